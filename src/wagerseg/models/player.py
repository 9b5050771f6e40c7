"""Canonical player models shared across sources, segmentation and the API."""

from __future__ import annotations

from enum import Enum

from pydantic import AliasChoices, BaseModel, Field
from pydantic.config import ConfigDict


class Segment(str, Enum):
    HIGH_ROLLER = "HighRoller"
    MID_ROLLER = "MidRoller"
    LOW_ROLLER = "LowRoller"


class PlayerAggregate(BaseModel):
    """Per-player wagering totals for one query window.

    Values are taken as delivered by the aggregate source; negative amounts
    or an ``avg_wager`` that disagrees with ``total_wagered / game_count``
    are not rejected here.
    """

    player: str
    total_wagered: float = Field(validation_alias=AliasChoices("total_wagered", "totalWagered"))
    avg_wager: float = Field(validation_alias=AliasChoices("avg_wager", "avgWager"))
    game_count: int = Field(validation_alias=AliasChoices("game_count", "gameCount"))

    model_config = ConfigDict(frozen=True, populate_by_name=True)


class SegmentedPlayer(PlayerAggregate):
    """Aggregate labeled with the segment computed for one execution."""

    segment: Segment
    percentile: float = Field(ge=0.0, le=100.0)

    @classmethod
    def from_aggregate(
        cls,
        aggregate: PlayerAggregate,
        *,
        segment: Segment,
        percentile: float,
    ) -> "SegmentedPlayer":
        return cls(
            player=aggregate.player,
            total_wagered=aggregate.total_wagered,
            avg_wager=aggregate.avg_wager,
            game_count=aggregate.game_count,
            segment=segment,
            percentile=percentile,
        )
