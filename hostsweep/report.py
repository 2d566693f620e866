#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Run report: per-step records, the reclaimed-space total and the final summary.
"""

from __future__ import annotations
from typing import List, Optional

from rich.text import Text

from hostsweep.helpers import format_kb, printable
from hostsweep.logging_setup import logger
from hostsweep.models import (
    CleanupStep, Outcome, RunReport, SpaceMeasurement, StepKind, StepRecord, StepResult,
)
from hostsweep.output import kv_table, line_ok, line_skip, line_warn, p, section, table

OUTCOME_STYLES = {
    Outcome.SKIPPED_BY_OPERATOR: "dim",
    Outcome.SKIPPED_BY_POLICY: "dim",
    Outcome.SUCCEEDED_WITH_DELTA: "green",
    Outcome.SUCCEEDED_NO_CHANGE: "cyan",
    Outcome.FAILED: "red",
}


def classify(result: StepResult, measurement: SpaceMeasurement) -> Outcome:
    if not result.success:
        return Outcome.FAILED
    freed = measurement.freed_kb
    if freed is not None and freed > 0:
        return Outcome.SUCCEEDED_WITH_DELTA
    return Outcome.SUCCEEDED_NO_CHANGE


class ReportAggregator:
    """Folds step outcomes into a ``RunReport``."""

    def __init__(self, report: Optional[RunReport] = None):
        self.report = report or RunReport()

    def skipped(self, step: CleanupStep, outcome: Outcome, note: str = "") -> StepRecord:
        record = StepRecord(name=step.name, outcome=outcome, commands=step.commands, note=note)
        self.report.records.append(record)
        logger.info(f"Step '{step.name}' {outcome.value}{': ' + note if note else ''}")
        line_skip(f"{step.name}: {note or outcome.value}")
        return record

    def executed(self, step: CleanupStep, result: StepResult, measurement: SpaceMeasurement) -> StepRecord:
        outcome = classify(result, measurement)
        freed = measurement.freed_kb
        record = StepRecord(
            name=step.name,
            outcome=outcome,
            freed_kb=freed,
            exit_status=result.exit_status,
            commands=step.commands,
        )
        self.report.records.append(record)

        if not result.success:
            line_warn(f"{step.name}: failed (exit status {result.exit_status})")
            logger.warning(f"Step '{step.name}' failed with exit status {result.exit_status}")
        if freed is None:
            if result.success:
                line_warn(f"{step.name}: done, space change unknown")
            logger.warning(f"Step '{step.name}': space delta unknown (disk usage unavailable)")
        elif freed > 0:
            self.report.total_freed_kb += freed
            if result.success:
                line_ok(f"{step.name}: freed {format_kb(freed)}")
            logger.info(f"Step '{step.name}' freed {format_kb(freed)}")
        elif freed < 0:
            if result.success:
                line_warn(f"{step.name}: used space grew by {format_kb(-freed)}")
            logger.warning(f"Step '{step.name}': used space grew by {format_kb(-freed)}")
        else:
            if result.success:
                line_ok(f"{step.name}: no measurable change")
            logger.info(f"Step '{step.name}': no measurable change")

        if step.kind is StepKind.KERNEL_PURGE and result.success:
            self.report.reboot_recommended = True
        return record


def render_report(report: RunReport) -> None:
    section("Cleanup summary")
    rows: List[List] = []
    for i, r in enumerate(report.records, 1):
        if r.outcome in (Outcome.SKIPPED_BY_OPERATOR, Outcome.SKIPPED_BY_POLICY):
            freed = "-"
        else:
            freed = format_kb(r.freed_kb)
        status = "" if r.exit_status is None else str(r.exit_status)
        rows.append([
            str(i),
            r.name,
            Text(r.outcome.value, style=OUTCOME_STYLES[r.outcome]),
            status,
            freed,
        ])
    table("Steps", ["#", "Step", "Outcome", "Exit", "Freed"], rows)

    kv_table("Disk usage (/)", [
        ("Initial used", format_kb(report.initial_used_kb)),
        ("Final used", format_kb(report.final_used_kb)),
        ("Actual change", format_kb(report.actual_freed_kb)),
        ("Total freed by steps", Text(format_kb(report.total_freed_kb), style="green")),
    ])
    if report.log_path:
        p(f"Run log: {report.log_path}")
    if report.reboot_recommended:
        line_warn("Old kernels were removed. Reboot to boot into the current kernel: 'reboot'")


def log_report(report: RunReport) -> None:
    for r in report.records:
        cmds = "; ".join(printable(c) for c in r.commands) or "-"
        logger.info(
            f"Summary: {r.name} | {r.outcome.value} | exit={r.exit_status} | "
            f"freed={format_kb(r.freed_kb)} | {cmds}"
        )
    logger.info(
        f"Initial used {format_kb(report.initial_used_kb)}, final used {format_kb(report.final_used_kb)}, "
        f"total freed {format_kb(report.total_freed_kb)}"
    )
