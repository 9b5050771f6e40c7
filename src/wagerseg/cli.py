"""Command-line interface for segmenting players by wagering volume."""

from __future__ import annotations

import argparse
import asyncio
import logging
from datetime import datetime, timezone
from pathlib import Path

from wagerseg.config import load_settings
from wagerseg.config_loader import FilterProfile
from wagerseg.errors import QueryError
from wagerseg.models import QueryWindow, Segment, ThresholdConfig
from wagerseg.query import SegmentQueryEngine
from wagerseg.segmentation import export_segments_to_csv, format_usd
from wagerseg.sources import AggregateSource, CsvAggregateSource, HttpAggregateSource, SqliteWagerStore


def _parse_time(value: str) -> int:
    """Accept epoch seconds or an ISO date/datetime (UTC when naive)."""

    text = value.strip()
    if text.lstrip("-").isdigit():
        return int(text)
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid time '{value}', expected epoch seconds or ISO date") from None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return int(parsed.timestamp())


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Segment players into High/Mid/Low rollers")
    parser.add_argument("aggregates", type=Path, nargs="?", help="CSV of per-player aggregates")
    parser.add_argument("--db", type=Path, default=None, help="SQLite wager store to aggregate from")
    parser.add_argument("--url", default=None, help="Base URL of a remote aggregate service")
    parser.add_argument("--token", default=None, help="Bearer token for the remote aggregate service")
    parser.add_argument("--from", dest="time_from", type=_parse_time, default=None, help="Window start (inclusive)")
    parser.add_argument("--to", dest="time_to", type=_parse_time, default=None, help="Window end (exclusive)")
    parser.add_argument("--high", type=int, default=None, help="High roller minimum percentile (0-100)")
    parser.add_argument("--low", type=int, default=None, help="Low roller maximum percentile (0-100)")
    parser.add_argument("--page", type=int, default=1, help="Page of players to print")
    parser.add_argument("--load-profile", type=Path, help="Load window/threshold JSON", default=None)
    parser.add_argument("--save-profile", type=Path, help="Save window/threshold JSON", default=None)
    parser.add_argument("--output", type=Path, default=None, help="Write the full segmented list as CSV")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def _resolve_source(args: argparse.Namespace) -> AggregateSource:
    chosen = [opt for opt in (args.aggregates, args.db, args.url) if opt]
    if len(chosen) > 1:
        raise SystemExit("Use only one of: aggregates CSV, --db, --url")
    if args.aggregates:
        return CsvAggregateSource(args.aggregates)
    if args.db:
        return SqliteWagerStore.at_path(args.db)
    settings = load_settings()
    url = args.url or settings.source_url
    if url:
        return HttpAggregateSource(url, auth_token=args.token or settings.source_token, timeout=settings.source_timeout)
    raise SystemExit("An aggregates CSV, --db or --url (or WAGERSEG_SOURCE_URL) is required")


def _resolve_parameters(args: argparse.Namespace) -> tuple[QueryWindow, ThresholdConfig]:
    if args.load_profile:
        try:
            profile = FilterProfile.load(args.load_profile)
        except (OSError, ValueError) as exc:
            raise SystemExit(f"Unable to load filter profile {args.load_profile}: {exc}") from exc
        window, thresholds = profile.window, profile.thresholds
    else:
        window, thresholds = QueryWindow(), load_settings().default_thresholds

    window = QueryWindow(
        time_from=window.time_from if args.time_from is None else args.time_from,
        time_to=window.time_to if args.time_to is None else args.time_to,
    )
    thresholds = ThresholdConfig(
        high_roller_min_percentile=thresholds.high_roller_min_percentile if args.high is None else args.high,
        low_roller_max_percentile=thresholds.low_roller_max_percentile if args.low is None else args.low,
    )
    return window, thresholds


async def _run(args: argparse.Namespace) -> None:
    source = _resolve_source(args)
    window, thresholds = _resolve_parameters(args)
    if args.save_profile:
        FilterProfile(window, thresholds).save(args.save_profile)
        print(f"Saved filter profile to {args.save_profile}")

    engine = SegmentQueryEngine(source, window=window, thresholds=thresholds)
    result = await engine.apply_filters()
    engine.set_page(args.page)

    counts = engine.segment_counts
    print(
        "High Rollers: {}  Mid Rollers: {}  Low Rollers: {}".format(
            counts[Segment.HIGH_ROLLER],
            counts[Segment.MID_ROLLER],
            counts[Segment.LOW_ROLLER],
        )
    )

    items = engine.page_items
    if not items:
        print("No data available")
    else:
        print(f"{'Player':<24} {'Segment':<11} {'Avg Wager':>14} {'Total Wagered':>16} {'Games':>7}")
        for player in items:
            print(
                f"{player.player:<24} {player.segment.value:<11} "
                f"{format_usd(player.avg_wager):>14} {format_usd(player.total_wagered):>16} "
                f"{player.game_count:>7}"
            )
    print(f"Page {engine.current_page}/{engine.total_pages}")

    if args.output:
        args.output.write_text(export_segments_to_csv(result.segmented), encoding="utf-8")
        print(f"Wrote {result.total_players} players to {args.output}")


def main(argv: list[str] | None = None) -> None:
    args = _parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)
    try:
        asyncio.run(_run(args))
    except QueryError as exc:
        raise SystemExit(f"Segment query failed: {exc}") from exc


if __name__ == "__main__":
    main()
