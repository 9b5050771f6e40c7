"""Environment-driven runtime settings."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from wagerseg.models import (
    DEFAULT_HIGH_ROLLER_MIN_PERCENTILE,
    DEFAULT_LOW_ROLLER_MAX_PERCENTILE,
    ThresholdConfig,
)
from wagerseg.sources.http_source import DEFAULT_TIMEOUT


logger = logging.getLogger(__name__)

_SOURCE_URL_ENV = "WAGERSEG_SOURCE_URL"
_SOURCE_TOKEN_ENV = "WAGERSEG_SOURCE_TOKEN"
_SOURCE_TIMEOUT_ENV = "WAGERSEG_SOURCE_TIMEOUT"
_HIGH_ROLLER_ENV = "WAGERSEG_HIGH_ROLLER_MIN"
_LOW_ROLLER_ENV = "WAGERSEG_LOW_ROLLER_MAX"

DEFAULT_DB_PATH = Path(__file__).resolve().parent.parent / "wagerseg.sqlite"


def _env_float(name: str, default: float, *, clamp_min: float | None = None, clamp_max: float | None = None) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Invalid float for %s: %s; using default %.2f", name, raw, default)
        return default
    if clamp_min is not None:
        value = max(clamp_min, value)
    if clamp_max is not None:
        value = min(clamp_max, value)
    return value


def _env_int(name: str, default: int, *, min_value: int | None = None, max_value: int | None = None) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Invalid int for %s: %s; using default %d", name, raw, default)
        return default
    if min_value is not None:
        value = max(min_value, value)
    if max_value is not None:
        value = min(max_value, value)
    return value


@dataclass(frozen=True)
class Settings:
    db_path: Path
    source_url: str | None
    source_token: str | None
    source_timeout: float
    default_thresholds: ThresholdConfig


def load_settings() -> Settings:
    """Read settings from the environment, falling back to defaults."""

    return Settings(
        db_path=DEFAULT_DB_PATH,
        source_url=os.getenv(_SOURCE_URL_ENV) or None,
        source_token=os.getenv(_SOURCE_TOKEN_ENV) or None,
        source_timeout=_env_float(_SOURCE_TIMEOUT_ENV, DEFAULT_TIMEOUT, clamp_min=0.1),
        default_thresholds=ThresholdConfig(
            high_roller_min_percentile=_env_int(
                _HIGH_ROLLER_ENV, DEFAULT_HIGH_ROLLER_MIN_PERCENTILE, min_value=0, max_value=100
            ),
            low_roller_max_percentile=_env_int(
                _LOW_ROLLER_ENV, DEFAULT_LOW_ROLLER_MAX_PERCENTILE, min_value=0, max_value=100
            ),
        ),
    )
