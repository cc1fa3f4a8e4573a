"""Command line host for the interval scheduler."""
from __future__ import annotations

import argparse
import json
import signal
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional, Sequence

import yaml

from .config import CadenceConfig
from .config_loader import load_config
from .log import configure_logging, get_logger
from .scheduling import Cadence, IntervalScheduler
from .services import IntervalRunner, ScheduledTask

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Interval scheduler helper CLI")
    sub = parser.add_subparsers(dest="command", required=True)

    next_cmd = sub.add_parser(
        "next",
        help="Arm the schedule once and print the next run time",
    )
    _add_schedule_arguments(next_cmd)

    run = sub.add_parser(
        "run",
        help="Wait for each interval and print the wake time",
    )
    _add_schedule_arguments(run)
    run.add_argument(
        "--max-runs",
        type=int,
        default=None,
        help="Stop after this many wake-ups (default: run until interrupted)",
    )
    run.add_argument(
        "--run-immediately",
        action="store_true",
        default=None,
        help="Report once before the first wait",
    )

    return parser


def _add_schedule_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to the YAML configuration file",
    )
    parser.add_argument(
        "--every",
        default=None,
        help='Cadence expression such as "5 sec" or "2 years" (overrides the config file)',
    )
    parser.add_argument(
        "--timezone",
        default=None,
        help="IANA timezone name used for calendar arithmetic (default: local)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Log level for diagnostics written to stderr",
    )


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = _resolve_config(args)
        configure_logging(config.logging.level, config.logging.json_format)
        scheduler = IntervalScheduler(
            config.interval.frequency,
            config.interval.unit,
            timezone=config.interval.timezone,
        )
        logger.debug(
            "configuration_resolved",
            command=args.command,
            frequency=scheduler.frequency(),
            timezone=config.interval.timezone,
        )
    except (OSError, ValueError, yaml.YAMLError) as exc:
        print(f"Error: invalid configuration: {exc}", file=sys.stderr)
        return 1

    if args.command == "next":
        return _command_next(scheduler)
    if args.command == "run":
        return _command_run(scheduler, config)

    parser.error("unknown command")
    return 1


def _resolve_config(args: argparse.Namespace) -> CadenceConfig:
    config = load_config(args.config) if args.config is not None else CadenceConfig()

    if args.every is not None:
        cadence = Cadence.parse(args.every)
        config.interval.frequency = cadence.frequency
        config.interval.unit = cadence.unit
    elif args.config is None:
        raise ValueError("either --config or --every is required")
    if args.timezone is not None:
        config.interval.timezone = args.timezone
    if args.log_level is not None:
        config.logging.level = args.log_level.upper()

    if getattr(args, "max_runs", None) is not None:
        if args.max_runs < 1:
            raise ValueError("--max-runs must be a positive integer")
        config.runner.max_runs = args.max_runs
    if getattr(args, "run_immediately", None):
        config.runner.run_immediately = True
    return config


def _command_next(scheduler: IntervalScheduler) -> int:
    scheduler.compute_next()
    output = {
        "frequency": scheduler.frequency(),
        "timezone": _timezone_name(scheduler),
        "now": scheduler.now().isoformat(),
        "next_run": scheduler.next_schedule(),
    }
    print(json.dumps(output, ensure_ascii=False))
    return 0


def _command_run(scheduler: IntervalScheduler, config: CadenceConfig) -> int:
    def report(wake: datetime) -> None:
        print(
            json.dumps(
                {
                    "wake": wake.isoformat(),
                    "next_run": scheduler.next_schedule(),
                    "frequency": scheduler.frequency(),
                },
                ensure_ascii=False,
            ),
            flush=True,
        )

    runner = IntervalRunner(
        ScheduledTask(name="report", scheduler=scheduler, task=report),
        run_immediately=config.runner.run_immediately,
        max_runs=config.runner.max_runs,
    )
    previous = signal.signal(signal.SIGTERM, lambda _signum, _frame: runner.stop())
    try:
        runner.run()
    except KeyboardInterrupt:  # pragma: no cover - interactive use
        print("Interrupted, stopping scheduler", file=sys.stderr)
    finally:
        signal.signal(signal.SIGTERM, previous)
    return 0


def _timezone_name(scheduler: IntervalScheduler) -> Optional[str]:
    zone = scheduler.timezone
    key = getattr(zone, "key", None)
    if key:
        return key
    return zone.tzname(scheduler.now())


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
