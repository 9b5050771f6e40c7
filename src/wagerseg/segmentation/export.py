"""CSV export and display formatting for segmented players."""

from __future__ import annotations

import csv
from io import StringIO
from typing import Sequence

from wagerseg.models import SegmentedPlayer

EXPORT_HEADERS: tuple[str, ...] = (
    "player",
    "segment",
    "percentile",
    "avg_wager",
    "total_wagered",
    "game_count",
)


def format_usd(amount: float) -> str:
    """Render ``amount`` as US dollars with two decimals, e.g. ``$1,234.50``."""

    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount):,.2f}"


def export_segments_to_csv(players: Sequence[SegmentedPlayer], *, formatted: bool = False) -> str:
    """Serialize players to CSV; ``formatted`` renders money columns as USD."""

    buffer = StringIO()
    writer = csv.writer(buffer)
    writer.writerow(EXPORT_HEADERS)
    for player in players:
        if formatted:
            avg_wager = format_usd(player.avg_wager)
            total_wagered = format_usd(player.total_wagered)
        else:
            avg_wager = f"{player.avg_wager:.2f}"
            total_wagered = f"{player.total_wagered:.2f}"
        writer.writerow([
            player.player,
            player.segment.value,
            f"{player.percentile:.2f}",
            avg_wager,
            total_wagered,
            player.game_count,
        ])
    return buffer.getvalue()


__all__ = ["EXPORT_HEADERS", "export_segments_to_csv", "format_usd"]
