import random

import pytest

from wagerseg.models import PlayerAggregate, Segment, ThresholdConfig
from wagerseg.segmentation import assign_segment, classify, count_segments, counts_by_label, percentile_ranks


def _agg(player: str, total: float, games: int = 10) -> PlayerAggregate:
    return PlayerAggregate(
        player=player,
        total_wagered=total,
        avg_wager=total / games if games else 0.0,
        game_count=games,
    )


def _by_player(players):
    return {player.player: player for player in players}


def test_three_player_scenario():
    aggregates = [
        PlayerAggregate(player="P1", total_wagered=1000, avg_wager=100, game_count=10),
        PlayerAggregate(player="P2", total_wagered=500, avg_wager=50, game_count=10),
        PlayerAggregate(player="P3", total_wagered=100, avg_wager=10, game_count=10),
    ]

    result = _by_player(classify(aggregates, ThresholdConfig(80, 20)))

    assert result["P1"].percentile == pytest.approx(100.0)
    assert result["P2"].percentile == pytest.approx(50.0)
    assert result["P3"].percentile == pytest.approx(0.0)
    assert result["P1"].segment is Segment.HIGH_ROLLER
    assert result["P2"].segment is Segment.MID_ROLLER
    assert result["P3"].segment is Segment.LOW_ROLLER
    assert counts_by_label(count_segments(result.values())) == {
        "HighRoller": 1,
        "MidRoller": 1,
        "LowRoller": 1,
    }


def test_classify_keeps_every_player_once():
    aggregates = [_agg(f"p{idx}", random.Random(idx).uniform(0, 5000)) for idx in range(57)]

    result = classify(aggregates, ThresholdConfig())

    assert len(result) == len(aggregates)
    assert [player.player for player in result] == [agg.player for agg in aggregates]
    assert len({player.player for player in result}) == len(aggregates)


def test_classify_carries_aggregate_fields():
    result = classify([_agg("solo", 250.0, games=5)], ThresholdConfig())
    player = result[0]
    assert player.total_wagered == pytest.approx(250.0)
    assert player.avg_wager == pytest.approx(50.0)
    assert player.game_count == 5


def test_empty_input_classifies_to_empty_list():
    assert classify([], ThresholdConfig()) == []
    assert count_segments([]) == {
        Segment.HIGH_ROLLER: 0,
        Segment.MID_ROLLER: 0,
        Segment.LOW_ROLLER: 0,
    }


def test_single_player_ranks_zero():
    result = classify([_agg("only", 999.0)], ThresholdConfig(80, 20))
    assert result[0].percentile == 0.0
    assert result[0].segment is Segment.LOW_ROLLER


def test_single_player_with_zero_high_threshold_is_high_roller():
    result = classify([_agg("only", 999.0)], ThresholdConfig(0, 20))
    assert result[0].segment is Segment.HIGH_ROLLER


def test_ties_keep_input_order():
    aggregates = [_agg("a", 100), _agg("b", 100), _agg("c", 100)]
    assert percentile_ranks(aggregates) == [0.0, 50.0, 100.0]


def test_ranks_are_monotonic_in_total_wagered():
    rng = random.Random(7)
    aggregates = [_agg(f"p{idx}", float(rng.randint(0, 50))) for idx in range(40)]
    ranks = percentile_ranks(aggregates)

    for i, left in enumerate(aggregates):
        for j, right in enumerate(aggregates):
            if left.total_wagered > right.total_wagered:
                assert ranks[i] >= ranks[j]


def test_threshold_boundaries_are_inclusive():
    # Six players give ranks 0, 20, 40, 60, 80, 100.
    aggregates = [_agg(f"p{idx}", float(idx * 10)) for idx in range(6)]
    result = _by_player(classify(aggregates, ThresholdConfig(80, 20)))

    assert result["p4"].percentile == pytest.approx(80.0)
    assert result["p4"].segment is Segment.HIGH_ROLLER
    assert result["p1"].percentile == pytest.approx(20.0)
    assert result["p1"].segment is Segment.LOW_ROLLER
    assert result["p2"].segment is Segment.MID_ROLLER
    assert result["p3"].segment is Segment.MID_ROLLER


def test_overlapping_thresholds_favour_high_roller():
    thresholds = ThresholdConfig(high_roller_min_percentile=40, low_roller_max_percentile=60)
    assert assign_segment(50.0, thresholds) is Segment.HIGH_ROLLER
    assert assign_segment(30.0, thresholds) is Segment.LOW_ROLLER

    aggregates = [_agg(f"p{idx}", float(idx)) for idx in range(11)]
    segments = {player.segment for player in classify(aggregates, thresholds)}
    assert Segment.MID_ROLLER not in segments


def test_counts_sum_to_population():
    aggregates = [_agg(f"p{idx}", float(idx * idx)) for idx in range(23)]
    result = classify(aggregates, ThresholdConfig(75, 25))
    assert sum(count_segments(result).values()) == len(result)
