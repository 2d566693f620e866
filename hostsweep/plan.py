#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Plan builder: the fixed, ordered list of cleanup steps for a run.

Order: package lists and caches, dependencies, kernels, journal and logs,
caches and temp files, then snap and Docker (both can restart services).
"""

from __future__ import annotations
from typing import List, Optional, Tuple

from hostsweep.constants import ROTATED_LOG_SUFFIXES
from hostsweep.docker.prune import docker_steps
from hostsweep.gate import requires_confirmation
from hostsweep.models import (
    CleanupStep, Command, RetentionMode, RiskLevel, RunContext, StepKind,
)

KERNEL_STEP_NAME = "Purge old kernel packages"
KERNEL_AUTOREMOVE_NAME = "Remove dependencies orphaned by kernel purge"
AUTOREMOVE_CMD: Command = ("apt-get", "autoremove", "--purge", "-y")


def _step(ctx: RunContext, name: str, risk: RiskLevel, category: str,
          commands: Tuple[Command, ...] = (), kind: StepKind = StepKind.COMMAND,
          tool: Optional[str] = None) -> CleanupStep:
    return CleanupStep(
        name=name,
        risk=risk,
        commands=commands,
        requires_confirmation=requires_confirmation(risk, ctx.auto_confirm),
        category=category,
        kind=kind,
        requires_tool=tool,
    )


def rotated_logs_command(log_root: str = "/var/log") -> Command:
    expr: List[str] = ["("]
    for i, pattern in enumerate(ROTATED_LOG_SUFFIXES):
        if i:
            expr.append("-o")
        expr.extend(["-name", pattern])
    expr.append(")")
    return ("find", log_root, "-type", "f", *expr, "-delete")


def older_than_command(path: str, days: int) -> Command:
    # -mtime +N matches entries at least N+1 whole days old
    return ("find", path, "-mindepth", "1", "-mtime", f"+{max(days - 1, 0)}", "-delete")


def journal_commands(ctx: RunContext) -> Tuple[Command, ...]:
    retention = ctx.journal_retention
    if retention.mode is RetentionMode.BY_SIZE:
        vacuum: Command = ("journalctl", f"--vacuum-size={retention.value}")
    elif retention.mode is RetentionMode.BY_AGE:
        vacuum = ("journalctl", f"--vacuum-time={retention.value}")
    else:
        return ()
    return (("journalctl", "--rotate"), vacuum)


def kernel_autoremove_step(ctx: RunContext) -> CleanupStep:
    return _step(ctx, KERNEL_AUTOREMOVE_NAME, RiskLevel.ROUTINE, "kernels", (AUTOREMOVE_CMD,))


def build_plan(ctx: RunContext) -> List[CleanupStep]:
    steps: List[CleanupStep] = []

    if ctx.enabled("apt_update"):
        steps.append(_step(ctx, "Refresh package lists", RiskLevel.ROUTINE, "apt_update",
                           (("apt-get", "update"),)))

    if ctx.enabled("apt"):
        steps.append(_step(ctx, "Clean APT package cache", RiskLevel.ROUTINE, "apt",
                           (("apt-get", "clean"),)))
        steps.append(_step(ctx, "Remove unused dependencies (autoremove)", RiskLevel.DESTRUCTIVE, "apt",
                           (AUTOREMOVE_CMD,)))

    if ctx.enabled("orphans"):
        steps.append(_step(ctx, "Purge orphaned libraries (deborphan)", RiskLevel.DESTRUCTIVE, "orphans",
                           kind=StepKind.ORPHAN_PACKAGES, tool="deborphan"))

    if ctx.enabled("kernels"):
        steps.append(_step(ctx, KERNEL_STEP_NAME, RiskLevel.DESTRUCTIVE, "kernels",
                           kind=StepKind.KERNEL_PURGE))

    if ctx.enabled("journal"):
        cmds = journal_commands(ctx)
        if cmds:
            steps.append(_step(ctx, f"Vacuum systemd journal ({ctx.journal_retention.describe()})",
                               RiskLevel.ROUTINE, "journal", cmds, tool="journalctl"))

    if ctx.enabled("logs"):
        steps.append(_step(ctx, "Remove rotated and compressed logs in /var/log", RiskLevel.DESTRUCTIVE,
                           "logs", (rotated_logs_command(),)))

    if ctx.enabled("root_cache"):
        steps.append(_step(ctx, "Empty /root/.cache", RiskLevel.DESTRUCTIVE, "root_cache",
                           (("find", "/root/.cache", "-mindepth", "1", "-delete"),)))

    if ctx.enabled("tmp"):
        steps.append(_step(ctx, f"Remove /tmp entries older than {ctx.tmp_max_age_days}d",
                           RiskLevel.ROUTINE, "tmp", (older_than_command("/tmp", ctx.tmp_max_age_days),)))
        steps.append(_step(ctx, f"Remove /var/tmp entries older than {ctx.var_tmp_max_age_days}d",
                           RiskLevel.ROUTINE, "tmp",
                           (older_than_command("/var/tmp", ctx.var_tmp_max_age_days),)))

    if ctx.enabled("snap"):
        steps.append(_step(ctx, "Remove disabled snap revisions", RiskLevel.DESTRUCTIVE, "snap",
                           kind=StepKind.SNAP_REVISIONS, tool="snap"))

    if ctx.enabled("docker"):
        steps.extend(docker_steps(ctx.docker_policy, ctx.auto_confirm))

    return steps
