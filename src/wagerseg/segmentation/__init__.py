"""Segment classification, paging and export helpers."""

from .classifier import assign_segment, classify, count_segments, counts_by_label, percentile_ranks
from .export import export_segments_to_csv, format_usd
from .pagination import PAGE_SIZE, PageState, page, total_pages

__all__ = [
    "PAGE_SIZE",
    "PageState",
    "assign_segment",
    "classify",
    "count_segments",
    "counts_by_label",
    "export_segments_to_csv",
    "format_usd",
    "page",
    "percentile_ranks",
    "total_pages",
]
