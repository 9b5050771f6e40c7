"""Configuration helpers for runtime settings."""

from .settings import DEFAULT_DB_PATH, Settings, load_settings

__all__ = [
    "DEFAULT_DB_PATH",
    "Settings",
    "load_settings",
]
