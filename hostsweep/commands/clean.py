#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
The clean command: run (or preview) the full maintenance plan.
"""

from __future__ import annotations
import argparse
from typing import List, Optional, Tuple

from rich.text import Text

from hostsweep.config import build_run_context, load_config
from hostsweep.helpers import printable
from hostsweep.host import SystemHost
from hostsweep.logging_setup import logger, setup_logging
from hostsweep.models import CleanupStep, RiskLevel, RunReport
from hostsweep.orchestrator import Orchestrator
from hostsweep.output import line_do, p, section, table
from hostsweep.report import log_report, render_report

RISK_STYLES = {
    RiskLevel.ROUTINE: "green",
    RiskLevel.DESTRUCTIVE: "yellow",
    RiskLevel.IRREVERSIBLE: "red",
}


def show_plan(rows: List[Tuple[CleanupStep, str]], heading: str) -> None:
    out = []
    for i, (step, note) in enumerate(rows, 1):
        if note:
            command = f"(skip: {note})"
        else:
            command = "\n".join(printable(c) for c in step.commands)
        out.append([str(i), step.name, Text(step.risk.value, style=RISK_STYLES[step.risk]), command])
    table(heading, ["#", "Step", "Risk", "Command"], out)


def cmd_clean(args: argparse.Namespace, host=None) -> Optional[RunReport]:
    host = host or SystemHost()
    cfg = load_config(args.config)
    ctx = build_run_context(
        cfg,
        yes=args.yes,
        dry_run=args.dry_run,
        allow_irreversible=args.allow_irreversible,
        docker_policy=args.docker_policy,
        journal_size=args.journal_size,
        journal_time=args.journal_time,
        no_journal=args.no_journal,
        skip=args.skip or (),
        log_dir=args.log_dir,
    )

    section("Clean system")
    if ctx.dry_run:
        line_do("Dry Run Mode - Preview only, no changes")
        orch = Orchestrator(host, ctx)
        orch.check_preconditions(require_root=False)
        show_plan(orch.preview(), "Cleanup plan")
        p("Run without --dry-run to apply these changes")
        return None

    log_path = setup_logging(verbose=args.verbose, log_dir=ctx.log_dir)
    logger.info(f"Run started (auto-confirm: {ctx.auto_confirm}, categories: {', '.join(sorted(ctx.categories))})")
    orch = Orchestrator(host, ctx, log_path=str(log_path) if log_path else None)
    report = orch.run()
    log_report(report)
    render_report(report)
    return report
