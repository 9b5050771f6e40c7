"""Player wagering segmentation: percentile-ranked High/Mid/Low roller labels."""

from wagerseg.errors import InvalidParameters, QueryError, SourceUnavailable
from wagerseg.models import PlayerAggregate, QueryWindow, Segment, SegmentedPlayer, ThresholdConfig
from wagerseg.query import QueryResult, SegmentQueryEngine, run_query
from wagerseg.segmentation import classify, count_segments, page, total_pages

__version__ = "0.1.0"

__all__ = [
    "InvalidParameters",
    "PlayerAggregate",
    "QueryError",
    "QueryResult",
    "QueryWindow",
    "Segment",
    "SegmentQueryEngine",
    "SegmentedPlayer",
    "SourceUnavailable",
    "ThresholdConfig",
    "classify",
    "count_segments",
    "page",
    "run_query",
    "total_pages",
]
