#!/usr/bin/env python3
"""
EVE Online Corporation Killmail Statistics

Fetches a corporation's kills or losses for one month from zKillboard,
resolves full killmails and character names through ESI, and writes a ranked
report of who killed (or lost) what.

Usage:
    python corp_stats.py --corp 98626718                  # kill ranking (docs/)
    python corp_stats.py --corp 98626718 --losses         # loss ranking
    python corp_stats.py --corp 98626718 --sort finalblows
    python corp_stats.py --corp 98626718 --losses --sort value --format csv

Sources:
- zkillboard API: https://github.com/zKillboard/zKillboard/wiki/API-(Killmails)
- ESI API: https://esi.evetech.net/
"""

from __future__ import annotations

import os
import sys
import logging
import argparse
from pathlib import Path

from zkb_stats.config.loader import (
    get_fetch_settings,
    get_stats_settings,
    load_constants,
    validate_corporation_id,
    validate_period,
)
from zkb_stats.cli.shared import OUTPUT_FORMATS, run_statistics, write_report
from zkb_stats.data.killmail import PartitionKey
from zkb_stats.errors import ConfigurationError, PageFetchFailure
from zkb_stats.stats import KillStatistics, LossStatistics


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with defaults from constants.yaml and the environment."""
    constants = load_constants()
    defaults = constants.get('defaults', {})
    stats_settings = get_stats_settings()
    cache_root = constants.get('cache', {}).get('root', 'cache')

    parser = argparse.ArgumentParser(
        prog="zkb-stats",
        description="EVE Online corporation killmail statistics from zKillboard",
    )
    parser.add_argument(
        "--corp", "-c",
        default=os.environ.get("CORPORATION_ID", str(defaults.get('corporation_id', ''))),
        help="Corporation ID (default: $CORPORATION_ID)"
    )
    parser.add_argument(
        "--sort", "-s",
        default=None,
        help="Sort by: kills/finalblows for kills, losses/value/damage for losses"
    )
    parser.add_argument(
        "--top", "-t",
        type=int,
        default=stats_settings.report_top,
        help="Limit output to top N participants (default: %(default)s)"
    )
    parser.add_argument("--solo", action="store_true", help="Only include solo kills")
    parser.add_argument("--wspace", action="store_true", help="Only include w-space kills")
    parser.add_argument(
        "--year",
        default=str(defaults.get('year', 2026)),
        help="Year (default: %(default)s)"
    )
    parser.add_argument(
        "--month",
        default=str(defaults.get('month', 1)),
        help="Month 1-12 (default: %(default)s)"
    )
    parser.add_argument(
        "--losses",
        action="store_true",
        help="Show loss statistics instead of kills"
    )
    parser.add_argument(
        "--no-names",
        dest="names",
        action="store_false",
        help="Skip character name resolution through ESI"
    )
    parser.add_argument(
        "--format", "-f",
        choices=OUTPUT_FORMATS,
        default="markdown",
        help="Report format (default: %(default)s)"
    )
    parser.add_argument(
        "--output-dir", "-o",
        type=Path,
        default=stats_settings.output_dir,
        help="Directory for the report file (default: %(default)s)"
    )
    parser.add_argument(
        "--cache-dir",
        type=Path,
        default=Path(os.environ.get("ZKB_STATS_CACHE_DIR", cache_root)),
        help="Cache directory (default: $ZKB_STATS_CACHE_DIR or %(default)s)"
    )
    parser.add_argument(
        "--user-agent",
        default=os.environ.get("USER_AGENT"),
        help="User-Agent sent to zKillboard and ESI (default: $USER_AGENT)"
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    return parser


def build_partition_key(args: argparse.Namespace) -> PartitionKey:
    """
    Validate arguments into a partition key.

    Raises:
        ConfigurationError: Invalid corporation ID, period, sort key or limit
    """
    corporation_id = validate_corporation_id(args.corp)
    year, month = validate_period(args.year, args.month)
    kind = "losses" if args.losses else "kills"

    sort_keys = (LossStatistics if args.losses else KillStatistics).SORT_KEYS
    if args.sort is not None and args.sort not in sort_keys:
        raise ConfigurationError(
            f"Invalid sort '{args.sort}' for {kind}. Available: {', '.join(sort_keys)}"
        )
    if args.top <= 0:
        raise ConfigurationError(f"--top must be positive, got {args.top}")

    return PartitionKey(corporation_id, year, month, solo=args.solo, wspace=args.wspace, kind=kind)


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the corporation statistics CLI."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )

    try:
        key = build_partition_key(args)
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    label = "Loss" if key.kind == "losses" else "Kill"
    print("=" * 70)
    print(f"EVE Online Corporation {label} Statistics")
    print(f"  Corporation ID: {key.corporation_id}")
    print(f"  Period: {key.period}")
    if key.solo or key.wspace:
        print(f"  Filters: {', '.join(f for f, on in (('solo', key.solo), ('w-space', key.wspace)) if on)}")
    print(f"  Character names: {'enabled' if args.names else 'disabled'}")
    print("=" * 70)

    settings = get_fetch_settings(cache_root=args.cache_dir, user_agent=args.user_agent)
    stats_settings = get_stats_settings()

    try:
        stats = run_statistics(key, settings, stats_settings, resolve_names=args.names)
    except PageFetchFailure as e:
        print(f"Error: {e}", file=sys.stderr)
        print("No report written.", file=sys.stderr)
        return 1

    if stats is None:
        print(f"\nNo {key.kind} found for {key.cache_name}.")
        return 0

    summary = stats.get_summary()
    total = summary['total_losses'] if key.kind == "losses" else summary['total_kills']
    print(f"\nTotal {key.kind}: {total}")
    print(f"Participants: {summary['total_participants']}")
    print(f"Ship types: {summary['total_ship_types']}")

    path = write_report(
        stats, key, args.output_dir,
        fmt=args.format, sort_by=args.sort, top=args.top,
    )
    print(f"\nReport saved to: {path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
