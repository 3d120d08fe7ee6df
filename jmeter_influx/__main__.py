"""CLI entry point for the exporter.

Usage:
    python -m jmeter_influx replay results.jtl --config listener.yaml
    python -m jmeter_influx replay results.jtl --config listener.yaml --dry-run
    python -m jmeter_influx replay results.jtl --config listener.yaml --workers 4 --batch-size 500
    python -m jmeter_influx defaults
    python -m jmeter_influx senders
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

import yaml

from jmeter_influx.lib.config import PARAM_SENDER, BackendListenerContext
from jmeter_influx.lib.config_loader import load_listener_context
from jmeter_influx.lib.errors import ExporterError
from jmeter_influx.lib.listener import InfluxBackendListenerClient
from jmeter_influx.lib.logging import setup_logging
from jmeter_influx.lib.replay import run_replay
from jmeter_influx.lib.results import read_jtl
from jmeter_influx.lib.senders import MemoryMetricsSender, list_sender_types

logger = logging.getLogger("jmeter_influx")


def replay_command(args: argparse.Namespace) -> int:
    """Replay a JTL file through the listener."""
    context = load_listener_context(args.config)
    if args.dry_run:
        parameters = context.parameters
        parameters[PARAM_SENDER] = "memory"
        context = BackendListenerContext(parameters)

    listener = InfluxBackendListenerClient()
    summary = run_replay(
        listener,
        context,
        read_jtl(args.results),
        batch_size=args.batch_size,
        workers=args.workers,
    )

    if args.dry_run and isinstance(listener.sender, MemoryMetricsSender):
        for line in listener.sender.lines:
            print(line)

    return 0 if summary.success else 1


def defaults_command(args: argparse.Namespace) -> int:
    """Print the listener parameters with their defaults as YAML."""
    parameters = InfluxBackendListenerClient().get_default_parameters()
    print(yaml.safe_dump({"parameters": parameters}, sort_keys=False), end="")
    return 0


def senders_command(args: argparse.Namespace) -> int:
    """List registered metrics senders."""
    for name in list_sender_types():
        print(name)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="jmeter-influx",
        description="Export JMeter sample results as InfluxDB line protocol",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # Send a results file to InfluxDB
    python -m jmeter_influx replay results.jtl --config listener.yaml

    # Print the lines instead of sending them
    python -m jmeter_influx replay results.jtl --config listener.yaml --dry-run

    # Start a config file from the defaults
    python -m jmeter_influx defaults > listener.yaml
        """,
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose logging")
    parser.add_argument("--json-logs", action="store_true", help="Output logs as JSON")
    parser.add_argument("--log-file", help="Also write logs to this file")

    subparsers = parser.add_subparsers(dest="command", required=True)

    replay = subparsers.add_parser("replay", help="Replay a CSV JTL file through the listener")
    replay.add_argument("results", help="Path to a CSV JTL results file")
    replay.add_argument("--config", "-c", required=True, help="Listener YAML config")
    replay.add_argument("--batch-size", type=int, default=100, help="Results per batch (default 100)")
    replay.add_argument("--workers", type=int, default=1, help="Concurrent batch workers (default 1)")
    replay.add_argument(
        "--dry-run",
        action="store_true",
        help="Use the in-memory sender and print the lines",
    )
    replay.set_defaults(func=replay_command)

    defaults = subparsers.add_parser("defaults", help="Print default listener parameters")
    defaults.set_defaults(func=defaults_command)

    senders = subparsers.add_parser("senders", help="List metrics sender implementations")
    senders.set_defaults(func=senders_command)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(verbose=args.verbose, json_format=args.json_logs, log_file=args.log_file)

    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        return 130
    except ExporterError as e:
        logger.error("%s", e)
        return 1
    except OSError as e:
        logger.error("I/O error: %s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
