"""Aggregate sources: where per-player wagering totals come from."""

from .base import AggregateSource, StaticAggregateSource
from .csv_source import CsvAggregateSource, load_aggregate_csv, parse_aggregate_csv
from .http_source import HttpAggregateSource
from .sqlite_store import SqliteWagerStore, WagerEvent

__all__ = [
    "AggregateSource",
    "CsvAggregateSource",
    "HttpAggregateSource",
    "SqliteWagerStore",
    "StaticAggregateSource",
    "WagerEvent",
    "load_aggregate_csv",
    "parse_aggregate_csv",
]
