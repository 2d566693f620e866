#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
hostsweep command-line entry point.
"""

from __future__ import annotations
import argparse
import sys
from typing import List, Optional

from rich.markup import escape

from hostsweep.commands import cmd_clean, cmd_config, cmd_kernels
from hostsweep.constants import CATEGORIES, VERSION
from hostsweep.errors import HostsweepError
from hostsweep.logging_setup import logger, setup_logging
from hostsweep.models import DockerPrunePolicy
from hostsweep.output import line_warn, print_header


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="hostsweep",
        description="hostsweep: safe, accounted maintenance for Ubuntu hosts.",
        formatter_class=argparse.RawTextHelpFormatter,
    )
    ap.add_argument("-V", "--version", action="version", version=f"hostsweep {VERSION}")
    ap.add_argument("-v", "--verbose", action="store_true", help="Enable verbose logging (DEBUG level).")
    ap.add_argument("--config", type=str, metavar="PATH", help="Read configuration from PATH.")
    ap.add_argument("--log-dir", type=str, metavar="DIR", help="Directory for per-run log files.")

    sp = ap.add_subparsers(dest="cmd")

    sp_clean = sp.add_parser("clean", help="Run the maintenance plan.")
    sp_clean.add_argument("--dry-run", action="store_true", help="Preview only, no actions executed.")
    sp_clean.add_argument("--yes", action="store_true", help="Assume 'yes' for confirmations.")
    sp_clean.add_argument("--allow-irreversible", action="store_true",
                          help="With --yes, also run irreversible steps (docker system prune).")
    sp_clean.add_argument("--docker-policy", choices=[x.value for x in DockerPrunePolicy], default=None,
                          help="Docker cleanup scope: none, dangling (default), unused (image prune -a),\n"
                               "full (system prune -a; removes stopped containers).")
    sp_clean.add_argument("--journal-size", default=None, help="Cap journald at this size (e.g. 100M, 1G).")
    sp_clean.add_argument("--journal-time", default=None, help="Drop journald entries older than this (e.g. 2weeks).")
    sp_clean.add_argument("--no-journal", action="store_true", help="Leave journald alone.")
    sp_clean.add_argument("--skip", action="append", choices=list(CATEGORIES), metavar="CATEGORY",
                          help=f"Skip a category (repeatable): {', '.join(CATEGORIES)}.")

    sp.add_parser("kernels", help="Show which kernel packages would be purged.")

    sp_config = sp.add_parser("config", help="Show or reset the configuration file.")
    config_mode = sp_config.add_mutually_exclusive_group()
    config_mode.add_argument("--show", action="store_true", help="Show the effective configuration (default).")
    config_mode.add_argument("--reset", action="store_true", help="Reset to default configuration.")

    return ap


def main(argv: Optional[List[str]] = None) -> int:
    ap = build_parser()
    args = ap.parse_args(argv)

    # Setup logging
    setup_logging(verbose=args.verbose)
    logger.debug(f"Command invoked: {' '.join(sys.argv)}")

    if args.cmd is None:
        ap.print_help()
        return 0

    print_header()
    try:
        if args.cmd == "clean":
            cmd_clean(args)
        elif args.cmd == "kernels":
            cmd_kernels(args)
        elif args.cmd == "config":
            cmd_config(args)
    except HostsweepError as e:
        line_warn(escape(str(e)))
        logger.error(str(e))
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
