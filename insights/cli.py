#!/usr/bin/env python3
# SPDX-License-Identifier: MIT
"""
CLI interface for Project Insights.

Usage:
    insights serve [--jsonl PATH] [--port N] [--tz ZONE] [--poll HOURS]
    insights summary [--from YYYY-MM-DD] [--to YYYY-MM-DD] [--json]
    insights watch [--from YYYY-MM-DD] [--to YYYY-MM-DD]
    python3 -m insights.cli <command> [args]
"""

import argparse
import json
import sys
from typing import List, Optional

from insights._version import __version__
from insights.aggregator import summarize
from insights.config import Config, load_config
from insights.debug_logger import get_logger
from insights.errors import ConfigError, LoadError, QueryError
from insights.query import parse_date_range
from insights.scheduler import RefreshScheduler
from insights.store import SnapshotStore
from insights.tui.formatting import format_summary

# Listen on every interface
LISTEN_HOST = "0.0.0.0"

TOP_LEVEL_FLAGS = ("-h", "--help", "--version")


def _config_args() -> argparse.ArgumentParser:
    parent = argparse.ArgumentParser(add_help=False)
    parent.add_argument("--config", default=None, help="Path to config JSON file (default: config.json)")
    parent.add_argument("--jsonl", default="", help="Path to JSONL export file")
    parent.add_argument("--tz", default="", help="Timezone (e.g. Australia/Sydney)")
    return parent


def _range_args() -> argparse.ArgumentParser:
    parent = argparse.ArgumentParser(add_help=False)
    parent.add_argument("--from", dest="date_from", default="", help="Start date YYYY-MM-DD (default: today-30)")
    parent.add_argument("--to", dest="date_to", default="", help="End date YYYY-MM-DD (default: today)")
    return parent


def build_parser() -> argparse.ArgumentParser:
    config_args = _config_args()
    range_args = _range_args()

    parser = argparse.ArgumentParser(
        prog="insights",
        description="Project Insights - time log aggregation dashboard",
    )
    parser.add_argument(
        "--version", action="version", version=f"project-insights {__version__}"
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # serve command - HTTP API
    serve_parser = subparsers.add_parser("serve", parents=[config_args], help="Run the HTTP API")
    serve_parser.add_argument("--port", type=int, default=0, help="HTTP port")
    serve_parser.add_argument("--poll", type=float, default=0, help="Poll interval in hours")
    serve_parser.add_argument("--frontend", default="", help="Path to frontend dist directory")

    # summary command - one-shot report
    summary_parser = subparsers.add_parser(
        "summary", parents=[config_args, range_args], help="Print a summary of a date range"
    )
    summary_parser.add_argument("--json", action="store_true", help="Emit JSON instead of text")
    summary_parser.add_argument(
        "--limit", "-n", type=int, default=10, help="Number of projects to list"
    )

    # watch command - terminal dashboard
    subparsers.add_parser(
        "watch", parents=[config_args, range_args], help="Launch the terminal dashboard"
    )

    return parser


def _resolve_config(args: argparse.Namespace) -> Config:
    overrides = {
        "jsonl_path": args.jsonl,
        "timezone": args.tz,
        "port": getattr(args, "port", 0),
        "poll_interval_hours": getattr(args, "poll", 0),
        "frontend_dir": getattr(args, "frontend", ""),
    }
    return load_config(args.config, overrides)


def cmd_serve(cfg: Config) -> int:
    """Initial load, background refresh, then serve until interrupted."""
    from insights.server import create_app

    store = SnapshotStore()
    try:
        store.load(cfg.jsonl_path)
    except LoadError as e:
        # Non-fatal: the export may not exist yet
        print(f"Warning: initial JSONL load failed: {e}", file=sys.stderr)
        print("Hint: export time entries to JSONL, then POST /refresh", file=sys.stderr)

    scheduler = RefreshScheduler(store, cfg.jsonl_path, cfg.poll_interval_hours)
    scheduler.start()

    app = create_app(store, cfg)
    get_logger().server_start(
        cfg.port, cfg.jsonl_path, cfg.timezone, cfg.poll_interval_hours, cfg.frontend_dir
    )
    print(f"Listening on http://localhost:{cfg.port}", file=sys.stderr)
    print(
        f"JSONL: {cfg.jsonl_path!r} | Timezone: {cfg.timezone} | "
        f"Poll: {cfg.poll_interval_hours:g}h | Frontend: {cfg.frontend_dir}",
        file=sys.stderr,
    )
    try:
        app.run(host=LISTEN_HOST, port=cfg.port, threaded=True)
    except OSError as e:
        get_logger().error("serve", str(e))
        print(f"Error: cannot listen on port {cfg.port}: {e}", file=sys.stderr)
        return 1
    finally:
        scheduler.stop()
    return 0


def cmd_summary(cfg: Config, args: argparse.Namespace) -> int:
    """Load once and print the aggregated range."""
    store = SnapshotStore()
    try:
        store.load(cfg.jsonl_path)
    except LoadError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    try:
        date_from, date_to = parse_date_range(
            {"from": args.date_from, "to": args.date_to}, cfg.timezone
        )
    except QueryError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    summary = summarize(store.entries(), date_from, date_to)
    if args.json:
        print(json.dumps(summary.to_dict(), indent=2))
    else:
        print(format_summary(summary, store.count(), store.last_loaded(), limit=args.limit), end="")
    return 0


def cmd_watch(cfg: Config, args: argparse.Namespace) -> int:
    """Run the Textual dashboard."""
    try:
        date_from, date_to = parse_date_range(
            {"from": args.date_from, "to": args.date_to}, cfg.timezone
        )
    except QueryError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    store = SnapshotStore()
    try:
        store.load(cfg.jsonl_path)
    except LoadError as e:
        # The dashboard can retry with "r"
        print(f"Warning: initial JSONL load failed: {e}", file=sys.stderr)

    from insights.tui.app import InsightsApp

    app = InsightsApp(
        store,
        (date_from, date_to),
        jsonl_path=cfg.jsonl_path,
        poll_interval_hours=cfg.poll_interval_hours,
    )
    app.run()
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point."""
    parser = build_parser()
    argv = list(sys.argv[1:] if argv is None else argv)

    # Default to serve when no subcommand given (bare flags go to serve)
    if not argv or (argv[0].startswith("-") and argv[0] not in TOP_LEVEL_FLAGS):
        argv = ["serve"] + argv
    args = parser.parse_args(argv)

    try:
        cfg = _resolve_config(args)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.command == "serve":
        return cmd_serve(cfg)
    if args.command == "summary":
        return cmd_summary(cfg, args)
    if args.command == "watch":
        return cmd_watch(cfg, args)

    print(f"Unknown command: {args.command}", file=sys.stderr)
    return 1


if __name__ == "__main__":
    sys.exit(main())
