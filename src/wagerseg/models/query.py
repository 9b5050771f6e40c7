"""Query parameters: the time window and the percentile thresholds."""

from __future__ import annotations

from dataclasses import dataclass

from wagerseg.errors import InvalidParameters

# Full historical range used when a window edge is left unset.
DEFAULT_TIME_FROM = 633_026_396
DEFAULT_TIME_TO = 2_210_863_196

DEFAULT_HIGH_ROLLER_MIN_PERCENTILE = 80
DEFAULT_LOW_ROLLER_MAX_PERCENTILE = 20


@dataclass(frozen=True)
class QueryWindow:
    """Inclusive-exclusive ``[time_from, time_to)`` range in epoch seconds."""

    time_from: int = DEFAULT_TIME_FROM
    time_to: int = DEFAULT_TIME_TO

    def __post_init__(self) -> None:
        if self.time_from > self.time_to:
            raise InvalidParameters(
                f"time_from ({self.time_from}) must not be after time_to ({self.time_to})"
            )

    @classmethod
    def from_optional(cls, time_from: int | None = None, time_to: int | None = None) -> "QueryWindow":
        return cls(
            time_from=DEFAULT_TIME_FROM if time_from is None else int(time_from),
            time_to=DEFAULT_TIME_TO if time_to is None else int(time_to),
        )


@dataclass(frozen=True)
class ThresholdConfig:
    """Percentile cut-offs for the high and low roller segments.

    The two values are independent; a low cut-off above the high one is
    accepted and the high roller check takes precedence on the overlap.
    """

    high_roller_min_percentile: int = DEFAULT_HIGH_ROLLER_MIN_PERCENTILE
    low_roller_max_percentile: int = DEFAULT_LOW_ROLLER_MAX_PERCENTILE

    def __post_init__(self) -> None:
        for name in ("high_roller_min_percentile", "low_roller_max_percentile"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidParameters(f"{name} must be an integer, got {value!r}")
            if not 0 <= value <= 100:
                raise InvalidParameters(f"{name} must be between 0 and 100, got {value}")
