#!/usr/bin/env python3
"""snrwatch CLI entrypoint: per-device SNR/ITGT/frequency/PPT statistics for rtl_433 JSON logs."""

from __future__ import annotations

import argparse
import sys
from typing import Any, List, Optional

from snrwatch.catalog.model import StatsConfig
from snrwatch.pipeline.runner import StatsRunner
from snrwatch.util.duration import parse_duration_to_seconds
from snrwatch.util.event_logger import EventLogger
from snrwatch.util.exit_codes import ExitCode
from snrwatch.util.logging import configure_logging, get_logger


def run(args: argparse.Namespace) -> int:
    """Configure logging, build the runner and process every input."""
    configure_logging(level=args.log_level, json_file=args.log_json)
    logger = get_logger(__name__)
    config = config_from_args(args)
    logger.info(
        "Categories %s, transmission window %.3f s, noise floor %d",
        ",".join(config.enabled_categories),
        config.transmission_window,
        config.noise_floor,
    )
    events = EventLogger.from_path(args.jsonl) if args.jsonl else None
    runner = StatsRunner(config, args.files, events=events)
    code = runner.run()
    if code != ExitCode.SUCCESS:
        logger.error("Exit %d: %s", code, ExitCode.message(code))
    return code


def config_from_args(args: argparse.Namespace) -> StatsConfig:
    selected = [args.snr, args.itgt, args.freq, args.ppt]
    # No category named on the command line: fall back to SNRWATCH_ENABLE_* (all on by default).
    if not any(selected):
        env = StatsConfig.from_env()
        selected = [env.enable_snr, env.enable_gap, env.enable_freq, env.enable_ppt]
    return StatsConfig(
        transmission_window=args.window,
        enable_snr=selected[0],
        enable_gap=selected[1],
        enable_freq=selected[2],
        enable_ppt=selected[3],
        noise_floor=args.noise_floor,
        include_tpms=args.include_tpms,
    )


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    if argv is None:
        argv = sys.argv[1:]

    p = argparse.ArgumentParser(
        prog="snrwatch",
        description="Per-device signal statistics from rtl_433 JSON logs (-F json)",
        argument_default=argparse.SUPPRESS,
    )
    p.add_argument("files", nargs="*", help="rtl_433 JSON log files (.gz/.bz2/.xz/.zst ok); '-' or none reads stdin")
    p.add_argument("-S", "--snr", action="store_true", help="Report signal-to-noise ratio statistics")
    p.add_argument("-I", "--itgt", action="store_true", help="Report inter-transmission gap time statistics")
    p.add_argument("-F", "--freq", action="store_true", help="Report carrier frequency statistics")
    p.add_argument("-P", "--ppt", action="store_true", help="Report packets-per-transmission statistics")
    p.add_argument(
        "-w",
        "--window",
        type=str,
        help="Packets closer than this to the start of a transmission are duplicates (e.g. '2', '1.5s', '500ms'; default 2s)",
    )
    p.add_argument("-n", "--noise-floor", dest="noise_floor", type=int, help="Omit devices with fewer packets than this (default 0)")
    p.add_argument("-T", "--include-tpms", dest="include_tpms", action="store_true", help="Include tire-pressure (TPMS) records")
    p.add_argument("--jsonl", type=str, help="Append new-device and battery/status change events as JSON lines to this path")
    p.add_argument("--log-level", dest="log_level", type=str, help="Log level (DEBUG, INFO, WARNING, ERROR)")
    p.add_argument("--log-json", dest="log_json", type=str, help="Also write logs as JSON lines to this path")
    p.add_argument("-d", "--debug", action="store_true", help="Shortcut for --log-level DEBUG")

    args = p.parse_args(argv)
    env = StatsConfig.from_env()

    _set_default(args, "files", [])
    _set_default(args, "snr", False)
    _set_default(args, "itgt", False)
    _set_default(args, "freq", False)
    _set_default(args, "ppt", False)
    _set_default(args, "window", env.transmission_window)
    _set_default(args, "noise_floor", env.noise_floor)
    _set_default(args, "include_tpms", env.include_tpms)
    _set_default(args, "jsonl", None)
    _set_default(args, "log_level", None)
    _set_default(args, "log_json", None)
    _set_default(args, "debug", False)

    try:
        window = parse_duration_to_seconds(args.window)
    except argparse.ArgumentTypeError as exc:
        p.error(f"--window: {exc}")
    if window is None or not window > 0:
        p.error("--window must be > 0")
    args.window = window

    if args.noise_floor < 0:
        p.error("--noise-floor must be >= 0")
    if args.debug:
        args.log_level = "DEBUG"

    return args


def _set_default(args: argparse.Namespace, attr: str, value: Any) -> None:
    if not hasattr(args, attr):
        setattr(args, attr, value)


def main(argv: Optional[List[str]] = None) -> int:
    try:
        return run(parse_args(argv))
    except KeyboardInterrupt:
        return ExitCode.GENERAL_ERROR


if __name__ == "__main__":
    sys.exit(main())
