"""Persist and load CLI filter profiles."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path

from wagerseg.models import (
    DEFAULT_HIGH_ROLLER_MIN_PERCENTILE,
    DEFAULT_LOW_ROLLER_MAX_PERCENTILE,
    QueryWindow,
    ThresholdConfig,
)


@dataclass
class FilterProfile:
    window: QueryWindow
    thresholds: ThresholdConfig

    @classmethod
    def load(cls, path: Path) -> "FilterProfile":
        data = json.loads(path.read_text(encoding="utf-8"))
        window = data.get("window", {})
        thresholds = data.get("thresholds", {})
        high = thresholds.get("high_roller_min_percentile", DEFAULT_HIGH_ROLLER_MIN_PERCENTILE)
        low = thresholds.get("low_roller_max_percentile", DEFAULT_LOW_ROLLER_MAX_PERCENTILE)
        return cls(
            window=QueryWindow.from_optional(window.get("time_from"), window.get("time_to")),
            thresholds=ThresholdConfig(high_roller_min_percentile=high, low_roller_max_percentile=low),
        )

    def save(self, path: Path) -> None:
        payload = {
            "window": {
                "time_from": self.window.time_from,
                "time_to": self.window.time_to,
            },
            "thresholds": {
                "high_roller_min_percentile": self.thresholds.high_roller_min_percentile,
                "low_roller_max_percentile": self.thresholds.low_roller_max_percentile,
            },
        }
        path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
