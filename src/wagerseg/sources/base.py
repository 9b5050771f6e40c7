"""Aggregate source contract and an in-memory implementation."""

from __future__ import annotations

from typing import Iterable, Protocol, runtime_checkable

from wagerseg.models import PlayerAggregate, QueryWindow


@runtime_checkable
class AggregateSource(Protocol):
    """Anything that can report per-player wagering totals for a window.

    Implementations raise :class:`wagerseg.errors.SourceUnavailable` when the
    window cannot be answered; an empty list is a valid answer.
    """

    async def fetch(self, window: QueryWindow) -> list[PlayerAggregate]:
        ...


class StaticAggregateSource:
    """Serve a fixed list of aggregates regardless of the window."""

    def __init__(self, aggregates: Iterable[PlayerAggregate] = ()):
        self._aggregates = list(aggregates)

    async def fetch(self, window: QueryWindow) -> list[PlayerAggregate]:
        return list(self._aggregates)
