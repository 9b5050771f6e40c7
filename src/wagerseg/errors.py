"""Exception types raised by segment queries."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from wagerseg.models import QueryWindow


class QueryError(RuntimeError):
    """Base class for failures surfaced by a segment query."""


class SourceUnavailable(QueryError):
    """Raised when the aggregate source cannot answer for a window."""

    def __init__(self, message: str, window: "QueryWindow | None" = None):
        super().__init__(message)
        self.message = message
        self.window = window


class InvalidParameters(QueryError, ValueError):
    """Raised for out-of-range thresholds or an inverted time window."""


__all__ = ["QueryError", "SourceUnavailable", "InvalidParameters"]
