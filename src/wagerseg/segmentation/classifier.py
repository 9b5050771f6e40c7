"""Percentile-rank segmentation of player wagering aggregates."""

from __future__ import annotations

from typing import Iterable, Mapping, Sequence

from wagerseg.models import PlayerAggregate, Segment, SegmentedPlayer, ThresholdConfig


def percentile_ranks(aggregates: Sequence[PlayerAggregate]) -> list[float]:
    """Return the percentile rank of each aggregate, aligned with the input.

    Players are ordered by ``total_wagered`` ascending with ties kept in input
    order; position ``i`` of ``n`` maps to ``i * 100 / (n - 1)``. A set with a
    single player ranks that player at 0.
    """

    count = len(aggregates)
    ranks = [0.0] * count
    if count <= 1:
        return ranks

    # sorted() is stable, so equal totals keep their input order.
    order = sorted(range(count), key=lambda idx: aggregates[idx].total_wagered)
    for position, idx in enumerate(order):
        ranks[idx] = position * 100 / (count - 1)
    return ranks


def assign_segment(percentile: float, thresholds: ThresholdConfig) -> Segment:
    if percentile >= thresholds.high_roller_min_percentile:
        return Segment.HIGH_ROLLER
    if percentile <= thresholds.low_roller_max_percentile:
        return Segment.LOW_ROLLER
    return Segment.MID_ROLLER


def classify(
    aggregates: Iterable[PlayerAggregate],
    thresholds: ThresholdConfig,
) -> list[SegmentedPlayer]:
    """Label every aggregate with its segment.

    The result holds exactly one entry per input aggregate, in input order.
    """

    aggregate_list = list(aggregates)
    ranks = percentile_ranks(aggregate_list)
    return [
        SegmentedPlayer.from_aggregate(
            aggregate,
            segment=assign_segment(rank, thresholds),
            percentile=rank,
        )
        for aggregate, rank in zip(aggregate_list, ranks)
    ]


def count_segments(players: Iterable[SegmentedPlayer]) -> dict[Segment, int]:
    counts = {segment: 0 for segment in Segment}
    for player in players:
        counts[player.segment] += 1
    return counts


def counts_by_label(counts: Mapping[Segment, int]) -> dict[str, int]:
    return {segment.value: int(counts.get(segment, 0)) for segment in Segment}


__all__ = [
    "assign_segment",
    "classify",
    "count_segments",
    "counts_by_label",
    "percentile_ranks",
]
