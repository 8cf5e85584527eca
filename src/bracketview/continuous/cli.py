#!/usr/bin/env python
"""
Command-line interface for the live bracket display.

Usage:
    python -m bracketview.continuous.cli <command> [options]

Examples:
    # Redraw the bracket every 30 seconds
    python -m bracketview.continuous.cli bracket --phase-id 123456

    # Rotate through pools, one side at a time
    python -m bracketview.continuous.cli pools --phase-id 123456

    # Stream overlay texts for one channel
    python -m bracketview.continuous.cli overlay --tournament my-event --stream mychannel

    # Upcoming matches panel with countdown
    python -m bracketview.continuous.cli schedule --tournament my-event

    # Single refresh and exit
    python -m bracketview.continuous.cli bracket --once

    # Print the laid-out bracket as a table
    python -m bracketview.continuous.cli dump --summary
"""

from __future__ import annotations

import argparse
import logging
import os
from pathlib import Path

from dotenv import load_dotenv

from bracketview import __version__
from bracketview.bracket.layout import LayoutEngine
from bracketview.bracket.pipeline import build_bracket_view
from bracketview.continuous.manager import (
    BracketDriver,
    FixedDelayScheduler,
    OverlayDriver,
    ScheduleDriver,
    schedule_bracket,
    schedule_overlay,
    schedule_panel,
)
from bracketview.continuous.state import DisplaySession
from bracketview.continuous.strategies import RefreshStrategy
from bracketview.core.config import DisplayConfig, LayoutConfig
from bracketview.core.logging import setup_logging
from bracketview.core.parser import parse_tournament_info
from bracketview.core.sentry import init_sentry, tag_display
from bracketview.core.tables import layout_frame, round_summary
from bracketview.render.figure import BracketRenderer
from bracketview.render.surface import FileTextSurface
from bracketview.scraping.api import FetchError, StartGGClient
from bracketview.scraping.storage import SnapshotCache

logger = logging.getLogger(__name__)

BRACKET_PAGE = "bracket.html"

# Delay field overridden by --interval, per command
INTERVAL_FIELDS = {
    "bracket": "bracket_delay",
    "pools": "bracket_delay",
    "overlay": "overlay_delay",
    "schedule": "schedule_delay",
}


def build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--phase-id", type=int, help="start.gg phase id")
    common.add_argument("--tournament", help="start.gg tournament slug")
    common.add_argument("--stream", help="Stream channel name for the overlay")
    common.add_argument(
        "--output-dir",
        help="Directory for the bracket page and overlay text files "
        "(default: data/display)",
    )
    common.add_argument(
        "--cache-file",
        help="Fallback snapshot file (default: data/bracket_cache.json)",
    )
    common.add_argument(
        "--spacing",
        choices=["centered", "edge_anchored"],
        default="centered",
        help="Vertical spacing of match boxes (default: centered)",
    )
    common.add_argument(
        "--verbose", action="store_true", help="Enable verbose logging"
    )
    common.add_argument("--log-file", help="Also write logs to this file")

    loop = argparse.ArgumentParser(add_help=False)
    loop.add_argument(
        "--once", action="store_true", help="Run a single refresh and exit"
    )
    loop.add_argument(
        "--max-cycles",
        type=int,
        help="Maximum number of refreshes to run (default: unlimited)",
    )
    loop.add_argument(
        "--interval",
        type=float,
        help="Seconds between refreshes (overrides the default delay)",
    )

    parser = argparse.ArgumentParser(
        description="Live start.gg bracket display",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser(
        "bracket", parents=[common, loop], help="Draw the whole bracket"
    )
    commands.add_parser(
        "pools", parents=[common, loop], help="Rotate through pool brackets"
    )
    commands.add_parser(
        "overlay", parents=[common, loop], help="Stream overlay texts"
    )
    commands.add_parser(
        "schedule", parents=[common, loop], help="Upcoming matches panel"
    )
    commands.add_parser(
        "status", parents=[common], help="Show data status and exit"
    )
    dump = commands.add_parser(
        "dump", parents=[common], help="Print the laid-out bracket as a table"
    )
    dump.add_argument(
        "--summary", action="store_true", help="Print matches per round only"
    )
    dump.add_argument("--csv", help="Also write the table to this CSV file")

    return parser


def build_config(args: argparse.Namespace) -> DisplayConfig:
    return DisplayConfig.from_env(
        phase_id=args.phase_id,
        tournament_slug=args.tournament,
        stream_name=args.stream,
        output_dir=args.output_dir,
        cache_file=args.cache_file,
        pool_mode=args.command == "pools",
        layout=LayoutConfig(spacing_mode=args.spacing),
    )


def build_strategy(args: argparse.Namespace) -> RefreshStrategy:
    strategy = RefreshStrategy()
    interval = getattr(args, "interval", None)
    if interval is not None and args.command in INTERVAL_FIELDS:
        setattr(strategy, INTERVAL_FIELDS[args.command], interval)
        strategy.__post_init__()
    return strategy


def build_bracket_driver(
    config: DisplayConfig, client: StartGGClient, strategy: RefreshStrategy
) -> BracketDriver:
    reload_seconds = (
        strategy.side_toggle_delay if config.pool_mode else strategy.bracket_delay
    )
    renderer = BracketRenderer(
        Path(config.output_dir) / BRACKET_PAGE,
        config=config.layout,
        reload_seconds=max(1, int(reload_seconds)),
    )
    return BracketDriver(
        client=client,
        cache=SnapshotCache(config.cache_file),
        renderer=renderer,
        config=config,
        session=DisplaySession(),
    )


def run_status(driver: BracketDriver, client: StartGGClient) -> None:
    generation = driver.session.begin_refresh()
    records, source = driver.load_records()
    driver.session.commit_dataset(generation, records, source)
    driver.session.views[None] = build_bracket_view(records, driver.engine)
    status = driver.get_status()

    print("\n=== Bracket Display Status ===")
    if driver.config.tournament_slug:
        try:
            info = parse_tournament_info(
                client.fetch_tournament(driver.config.tournament_slug)
            )
        except FetchError as e:
            logger.warning(f"Tournament lookup failed: {e}")
            info = None
        if info:
            print(f"Tournament: {info['name']} (id {info['id']})")
    print(f"Data source: {status['data_source']}")
    print(f"Sets: {status['sets']}")
    print(f"Pools: {', '.join(p or '-' for p in status['pools']) or 'none'}")
    print(f"Winners matches: {status['winners_matches']}")
    print(f"Losers matches: {status['losers_matches']}")


def run_dump(driver: BracketDriver, args: argparse.Namespace) -> None:
    records, source = driver.load_records()
    logger.info(f"Dumping {len(records)} sets from {source}")
    view = build_bracket_view(records, LayoutEngine(driver.config.layout))
    frame = round_summary(view) if args.summary else layout_frame(view)
    print(frame)
    if args.csv:
        frame.write_csv(args.csv)
        logger.info(f"Wrote {frame.height} rows to {args.csv}")


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the bracket display CLI."""
    load_dotenv()
    args = build_parser().parse_args(argv)

    level = "DEBUG" if args.verbose else os.getenv("BRACKETVIEW_LOG_LEVEL", "INFO")
    setup_logging(level=level, log_file=args.log_file)
    config = build_config(args)
    if init_sentry(context=f"bracketview-{args.command}", release=__version__):
        tag_display(config)

    strategy = build_strategy(args)
    client = StartGGClient()

    if args.command in ("bracket", "pools", "status", "dump"):
        driver = build_bracket_driver(config, client, strategy)
        if args.command == "status":
            run_status(driver, client)
            return 0
        if args.command == "dump":
            run_dump(driver, args)
            return 0
        if args.once:
            driver.refresh()
            print(f"\nRefresh complete: {driver.get_status()}")
            return 0
        scheduler = FixedDelayScheduler(error_delay=strategy.error_delay)
        primary = schedule_bracket(scheduler, driver, strategy)
    else:
        surface = FileTextSurface(config.output_dir)
        if args.command == "overlay":
            driver = OverlayDriver(client, surface, config)
            if args.once:
                print(driver.tick())
                return 0
            scheduler = FixedDelayScheduler(error_delay=strategy.error_delay)
            primary = schedule_overlay(scheduler, driver, strategy)
        else:
            driver = ScheduleDriver(client, surface, config)
            if args.once:
                print(driver.tick())
                return 0
            scheduler = FixedDelayScheduler(error_delay=strategy.error_delay)
            primary = schedule_panel(scheduler, driver, strategy)

    logger.info(f"Starting {args.command} display")
    scheduler.run(max_runs=args.max_cycles, task_name=primary)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
