#!/usr/bin/env python3
"""
Catan stats CLI

Parses a spreadsheet export of Catan: Cities & Knights sessions and prints
player statistics for the selected date range and players.

Usage:
    python catan_stats.py --file export.csv
    python catan_stats.py --file https://example.com/export.csv --start 2023-01-01 --end 2023-12-31
    python catan_stats.py --file export.xlsx --players Anna,Ben,Cleo --require order
    python catan_stats.py --file export.csv --json-out games.json
"""

import argparse
import logging
import sys
from datetime import date
from pathlib import Path

from catanstats import (
    ExportFetcher,
    FilterCriteria,
    apply_filters,
    build_player_profile,
    build_player_stats,
    default_whitelist,
    dump_games,
    find_score_mismatches,
    start_order_matrix,
    summarize_games,
    validate_games,
)
from catanstats.constants import COMPLETENESS_REQUIREMENTS
from catanstats.logging_config import setup_logging
from catanstats.report import (
    mismatch_table,
    place_rate_table,
    series_table,
    start_order_table,
    stats_table,
)


def print_summary(games) -> None:
    summary = summarize_games(games)
    print(f"Total games:   {summary.total_games}")
    print(f"Total players: {summary.total_players}")
    if summary.last_date:
        print(
            f"Last played:   {summary.last_date:%d %B %Y} "
            f"({summary.days_since_last_game} days ago, {summary.recency})"
        )


def print_profiles(stats) -> None:
    for player_stats in stats.values():
        profile = build_player_profile(player_stats)
        if not profile.detailed_games:
            continue
        dev = profile.development
        buildings = profile.buildings
        print(
            f"  {profile.name} ({profile.detailed_games} detailed games): "
            f"trade {dev['trade']:.2f}, politics {dev['politics']:.2f}, "
            f"science {dev['science']:.2f}, cities {buildings['cities']:.2f}, "
            f"settlements {buildings['settlements']:.2f}"
        )


def main():
    parser = argparse.ArgumentParser(description="Catan game statistics from a spreadsheet export")
    parser.add_argument(
        "--file", "-f",
        required=True,
        help="CSV/XLSX/JSON path or CSV URL of the export",
    )
    parser.add_argument(
        "--sheet",
        default=None,
        help="Worksheet name for .xlsx exports (defaults to the active sheet)",
    )
    parser.add_argument(
        "--start",
        type=date.fromisoformat,
        default=None,
        help="First date to include (YYYY-MM-DD)",
    )
    parser.add_argument(
        "--end",
        type=date.fromisoformat,
        default=None,
        help="Last date to include (YYYY-MM-DD)",
    )
    parser.add_argument(
        "--players", "-p",
        default=None,
        help="Comma-separated player whitelist (defaults to regular players)",
    )
    parser.add_argument(
        "--require",
        nargs="*",
        choices=COMPLETENESS_REQUIREMENTS,
        default=[],
        help="Only include games that record these stats",
    )
    parser.add_argument(
        "--series",
        choices=["win_rate", "average_score"],
        default=None,
        help="Also print a cumulative time series",
    )
    parser.add_argument(
        "--json-out", "-o",
        default=None,
        help="Write the parsed games to this JSON file",
    )
    parser.add_argument(
        "--log-dir",
        default=None,
        help="Also write a log file to this directory",
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Only log errors",
    )

    args = parser.parse_args()

    setup_logging(
        log_dir=Path(args.log_dir) if args.log_dir else None,
        level=logging.ERROR if args.quiet else logging.INFO,
        log_to_file=args.log_dir is not None,
    )

    fetcher = ExportFetcher(args.file, sheet_name=args.sheet)
    games = fetcher.load()
    if games is None:
        print(f"❌ {fetcher.error}")
        sys.exit(1)

    if not games:
        print("No games found in export")
        sys.exit(0)

    validate_games(games)

    if args.json_out:
        dump_games(args.json_out, games)

    print_summary(games)

    if args.players:
        whitelist = [name.strip() for name in args.players.split(",") if name.strip()]
    else:
        whitelist = default_whitelist(build_player_stats(games), len(games))

    criteria = FilterCriteria(
        start=args.start,
        end=args.end,
        players=frozenset(whitelist),
        required=frozenset(args.require),
    )
    filtered = apply_filters(games, criteria)
    stats = build_player_stats(filtered)

    print(f"\nShowing {len(filtered)} of {len(games)} games for: {', '.join(stats) or '-'}")

    print("\n" + "=" * 60)
    print("PLAYERS")
    print("=" * 60)
    print(stats_table(stats))
    print(place_rate_table(stats))

    print("\nPoint details per game:")
    print_profiles(stats)

    matrix = start_order_matrix(filtered)
    if matrix:
        print("\n" + "=" * 60)
        print("PLACES BY START ORDER")
        print("=" * 60)
        print(start_order_table(matrix))

    if args.series:
        print("\n" + "=" * 60)
        print(args.series.upper().replace("_", " "))
        print("=" * 60)
        print(series_table(stats, args.series))

    mismatches = find_score_mismatches(filtered)
    if mismatches:
        print(f"\n⚠️  {len(mismatches)} score mismatches:")
        print(mismatch_table(mismatches))


if __name__ == "__main__":
    main()
