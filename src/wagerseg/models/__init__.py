"""Data models for wagering aggregates and query parameters."""

from .player import PlayerAggregate, Segment, SegmentedPlayer
from .query import (
    DEFAULT_HIGH_ROLLER_MIN_PERCENTILE,
    DEFAULT_LOW_ROLLER_MAX_PERCENTILE,
    DEFAULT_TIME_FROM,
    DEFAULT_TIME_TO,
    QueryWindow,
    ThresholdConfig,
)

__all__ = [
    "PlayerAggregate",
    "Segment",
    "SegmentedPlayer",
    "QueryWindow",
    "ThresholdConfig",
    "DEFAULT_TIME_FROM",
    "DEFAULT_TIME_TO",
    "DEFAULT_HIGH_ROLLER_MIN_PERCENTILE",
    "DEFAULT_LOW_ROLLER_MAX_PERCENTILE",
]
