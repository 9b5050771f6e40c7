"""Fetch, classify and hold segmented query results."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Mapping, Sequence

from wagerseg.errors import SourceUnavailable
from wagerseg.models import (
    QueryWindow,
    Segment,
    SegmentedPlayer,
    ThresholdConfig,
)
from wagerseg.segmentation import PAGE_SIZE, PageState, classify, count_segments
from wagerseg.sources import AggregateSource


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QueryResult:
    """Outcome of one execution: the labeled players and their segment counts."""

    window: QueryWindow
    thresholds: ThresholdConfig
    segmented: tuple[SegmentedPlayer, ...]
    segment_counts: Mapping[Segment, int]

    @property
    def total_players(self) -> int:
        return len(self.segmented)

    @property
    def is_empty(self) -> bool:
        return not self.segmented


@dataclass(frozen=True)
class QueryFailure:
    """Error state left behind by a failed execution."""

    sequence: int
    window: QueryWindow
    thresholds: ThresholdConfig
    error: SourceUnavailable = field(compare=False)

    @property
    def message(self) -> str:
        return str(self.error)


def order_players(players: Sequence[SegmentedPlayer]) -> tuple[SegmentedPlayer, ...]:
    """Display order: highest total wagered first, ties by player identifier."""

    return tuple(sorted(players, key=lambda p: (-p.total_wagered, p.player)))


async def run_query(
    source: AggregateSource,
    window: QueryWindow,
    thresholds: ThresholdConfig,
) -> QueryResult:
    """Run the full fetch -> classify -> count pipeline once."""

    aggregates = await source.fetch(window)
    segmented = order_players(classify(aggregates, thresholds))
    counts = count_segments(segmented)
    return QueryResult(
        window=window,
        thresholds=thresholds,
        segmented=segmented,
        segment_counts=counts,
    )


class SegmentQueryEngine:
    """Dashboard-style query lifecycle over an aggregate source.

    Filter edits (``set_window`` / ``set_thresholds``) stay pending until
    :meth:`apply_filters` commits them and runs one execution. Executions are
    numbered; a completed execution replaces the current result only when it
    is newer than the result already held, so an older request that finishes
    late never overwrites fresher data. Paging works on the held result and
    never triggers a fetch.
    """

    def __init__(
        self,
        source: AggregateSource,
        *,
        window: QueryWindow | None = None,
        thresholds: ThresholdConfig | None = None,
        page_size: int = PAGE_SIZE,
    ):
        if page_size <= 0:
            raise ValueError("page_size must be positive")
        self.source = source
        self.page_size = page_size
        self.pending_window = window or QueryWindow()
        self.pending_thresholds = thresholds or ThresholdConfig()
        self._result: QueryResult | None = None
        self._page_state = PageState(count=0, page_size=page_size)
        self._last_error: QueryFailure | None = None
        self._issued = 0
        self._committed = 0
        self._in_flight = 0

    # Filter edits -----------------------------------------------------

    def set_window(self, time_from: int | None = None, time_to: int | None = None) -> QueryWindow:
        current = self.pending_window
        self.pending_window = QueryWindow(
            time_from=current.time_from if time_from is None else int(time_from),
            time_to=current.time_to if time_to is None else int(time_to),
        )
        return self.pending_window

    def set_thresholds(
        self,
        high_roller_min_percentile: int | None = None,
        low_roller_max_percentile: int | None = None,
    ) -> ThresholdConfig:
        current = self.pending_thresholds
        self.pending_thresholds = ThresholdConfig(
            high_roller_min_percentile=(
                current.high_roller_min_percentile
                if high_roller_min_percentile is None
                else high_roller_min_percentile
            ),
            low_roller_max_percentile=(
                current.low_roller_max_percentile
                if low_roller_max_percentile is None
                else low_roller_max_percentile
            ),
        )
        return self.pending_thresholds

    # Execution --------------------------------------------------------

    async def query(self, window: QueryWindow, thresholds: ThresholdConfig) -> QueryResult:
        """Stateless execution; the engine's held result is left untouched."""

        return await run_query(self.source, window, thresholds)

    async def apply_filters(self) -> QueryResult:
        self._issued += 1
        sequence = self._issued
        window = self.pending_window
        thresholds = self.pending_thresholds
        logger.info(
            "Segment query #%s window=[%s, %s) high>=%s low<=%s",
            sequence,
            window.time_from,
            window.time_to,
            thresholds.high_roller_min_percentile,
            thresholds.low_roller_max_percentile,
        )

        self._in_flight += 1
        try:
            result = await run_query(self.source, window, thresholds)
        except SourceUnavailable as exc:
            logger.warning("Segment query #%s failed: %s", sequence, exc)
            stale = self._last_error is not None and self._last_error.sequence > sequence
            if sequence > self._committed and not stale:
                self._last_error = QueryFailure(
                    sequence=sequence,
                    window=window,
                    thresholds=thresholds,
                    error=exc,
                )
            raise
        finally:
            self._in_flight -= 1

        if sequence <= self._committed:
            logger.info(
                "Discarding result of segment query #%s; #%s is already held",
                sequence,
                self._committed,
            )
            return result

        self._commit(sequence, result)
        logger.info(
            "Segment query #%s classified %s players (%s)",
            sequence,
            result.total_players,
            ", ".join(f"{segment.value}={count}" for segment, count in result.segment_counts.items()),
        )
        return result

    def _commit(self, sequence: int, result: QueryResult) -> None:
        self._committed = sequence
        self._result = result
        self._page_state = PageState(count=result.total_players, page_size=self.page_size)
        if self._last_error is not None and self._last_error.sequence < sequence:
            self._last_error = None

    # Paging -----------------------------------------------------------

    def set_page(self, page_number: int) -> int:
        self._page_state = self._page_state.goto(page_number)
        return self._page_state.current_page

    def next_page(self) -> int:
        self._page_state = self._page_state.next()
        return self._page_state.current_page

    def previous_page(self) -> int:
        self._page_state = self._page_state.previous()
        return self._page_state.current_page

    # Views ------------------------------------------------------------

    @property
    def result(self) -> QueryResult | None:
        return self._result

    @property
    def last_error(self) -> QueryFailure | None:
        return self._last_error

    @property
    def in_flight(self) -> int:
        return self._in_flight

    @property
    def current_page(self) -> int:
        return self._page_state.current_page

    @property
    def total_pages(self) -> int:
        return self._page_state.total_pages

    @property
    def segmented(self) -> tuple[SegmentedPlayer, ...]:
        return self._result.segmented if self._result is not None else ()

    @property
    def page_items(self) -> list[SegmentedPlayer]:
        return self._page_state.slice(self.segmented)

    @property
    def segment_counts(self) -> dict[Segment, int]:
        if self._result is None:
            return count_segments(())
        return dict(self._result.segment_counts)
