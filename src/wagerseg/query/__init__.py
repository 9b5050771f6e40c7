"""Segment query orchestration."""

from .engine import QueryFailure, QueryResult, SegmentQueryEngine, order_players, run_query

__all__ = ["QueryFailure", "QueryResult", "SegmentQueryEngine", "order_players", "run_query"]
