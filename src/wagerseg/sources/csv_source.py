"""Load pre-aggregated wagering statistics from CSV files."""

from __future__ import annotations

import csv
import logging
import re
from io import StringIO
from pathlib import Path
from typing import Iterable, List, Mapping, Sequence

from wagerseg.errors import SourceUnavailable
from wagerseg.models import PlayerAggregate, QueryWindow


logger = logging.getLogger(__name__)

DEFAULT_AGGREGATE_MAPPING = {
    "player": "player",
    "total_wagered": "total_wagered",
    "avg_wager": "avg_wager",
    "game_count": "game_count",
}

REQUIRED_COLUMNS = ("player", "total_wagered", "game_count")


def _parse_amount(raw_amount: str | None, *, field: str) -> float:
    text = re.sub(r"[$,\s]", "", raw_amount or "")
    if not text:
        return 0.0
    try:
        return float(text)
    except ValueError:
        raise ValueError(f"{field} '{raw_amount}' is not numeric") from None


def _parse_count(raw_count: str | None) -> int:
    text = re.sub(r"[,\s]", "", raw_count or "")
    if not text:
        return 0
    try:
        return int(float(text))
    except ValueError:
        raise ValueError(f"game_count '{raw_count}' is not numeric") from None


def row_to_aggregate(row: Mapping[str, str], mapping: Mapping[str, str]) -> PlayerAggregate:
    player = (row.get(mapping["player"]) or "").strip()
    if not player:
        raise ValueError("row is missing a player identifier")
    total = _parse_amount(row.get(mapping["total_wagered"]), field="total_wagered")
    count = _parse_count(row.get(mapping["game_count"]))
    avg_column = mapping.get("avg_wager")
    raw_avg = row.get(avg_column) if avg_column else None
    if raw_avg is None or not raw_avg.strip():
        avg = total / count if count > 0 else 0.0
    else:
        avg = _parse_amount(raw_avg, field="avg_wager")
    return PlayerAggregate(player=player, total_wagered=total, avg_wager=avg, game_count=count)


def _resolve_mapping(mapping: Mapping[str, str] | None) -> dict[str, str]:
    return {**DEFAULT_AGGREGATE_MAPPING, **(mapping or {})}


def _require_columns(fieldnames: Sequence[str] | None, mapping: Mapping[str, str]) -> None:
    present = set(fieldnames or ())
    missing = [mapping[key] for key in REQUIRED_COLUMNS if mapping[key] not in present]
    if missing:
        raise ValueError(f"missing required column(s): {', '.join(missing)}")


def parse_aggregate_rows(
    rows: Iterable[Mapping[str, str]],
    *,
    mapping: Mapping[str, str] | None = None,
) -> List[PlayerAggregate]:
    resolved = _resolve_mapping(mapping)
    aggregates: list[PlayerAggregate] = []
    for line_number, row in enumerate(rows, start=2):
        try:
            aggregates.append(row_to_aggregate(row, resolved))
        except ValueError as exc:
            raise ValueError(f"line {line_number}: {exc}") from exc
    return aggregates


def parse_aggregate_csv(text: str, *, mapping: Mapping[str, str] | None = None) -> List[PlayerAggregate]:
    reader = csv.DictReader(StringIO(text))
    _require_columns(reader.fieldnames, _resolve_mapping(mapping))
    return parse_aggregate_rows(reader, mapping=mapping)


def load_aggregate_csv(path: Path, *, mapping: Mapping[str, str] | None = None) -> List[PlayerAggregate]:
    with path.open(newline="", encoding="utf-8") as f:
        reader = csv.DictReader(f)
        _require_columns(reader.fieldnames, _resolve_mapping(mapping))
        return parse_aggregate_rows(reader, mapping=mapping)


class CsvAggregateSource:
    """Aggregate source backed by a CSV export.

    The file is assumed to be scoped to its window already, so the requested
    window is only logged.
    """

    def __init__(self, path: Path | str, *, mapping: Mapping[str, str] | None = None):
        self.path = Path(path)
        self.mapping = dict(mapping or {})

    async def fetch(self, window: QueryWindow) -> list[PlayerAggregate]:
        logger.debug(
            "Reading aggregates from %s (window %s-%s ignored)",
            self.path,
            window.time_from,
            window.time_to,
        )
        try:
            return load_aggregate_csv(self.path, mapping=self.mapping)
        except (OSError, ValueError, KeyError) as exc:
            raise SourceUnavailable(f"Unable to read aggregates from {self.path}: {exc}", window) from exc
