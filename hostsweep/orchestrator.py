#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Runs a cleanup plan step by step: materialize, confirm, execute, account, report.

Steps run strictly one after another; a failing step never stops the run.
"""

from __future__ import annotations
from dataclasses import replace
from typing import List, Optional, Tuple

from hostsweep.constants import ESSENTIAL_COMMANDS
from hostsweep.errors import KernelVersionUnknown, PreconditionError
from hostsweep.gate import ConfirmationGate, Decision
from hostsweep.helpers import format_kb, printable
from hostsweep.logging_setup import logger
from hostsweep.models import CleanupStep, Outcome, RunContext, RunReport, StepKind, StepResult
from hostsweep.output import line_do, line_ok, line_warn, section, table
from hostsweep.plan import build_plan, kernel_autoremove_step
from hostsweep.report import ReportAggregator
from hostsweep.runner import StepRunner
from hostsweep.system.disk import SpaceAccountant
from hostsweep.system.kernels import find_old_kernels, purge_command
from hostsweep.system.packages import (
    disabled_snap_revisions, orphan_purge_command, orphaned_packages, snap_remove_commands,
)


class Orchestrator:
    def __init__(self, host, ctx: RunContext, log_path: Optional[str] = None):
        self.host = host
        self.ctx = ctx
        self.gate = ConfirmationGate(host)
        self.runner = StepRunner(host)
        self.accountant = SpaceAccountant(host)
        self.aggregator = ReportAggregator(RunReport(log_path=log_path))

    @property
    def report(self) -> RunReport:
        return self.aggregator.report

    def check_preconditions(self, require_root: bool = True) -> None:
        if require_root and not self.host.is_root():
            raise PreconditionError("Root privileges are required. Re-run with sudo.")
        missing = [cmd for cmd in ESSENTIAL_COMMANDS if not self.host.which(cmd)]
        if missing:
            raise PreconditionError(f"Missing required commands: {', '.join(missing)}")

    def materialize(self, step: CleanupStep) -> Tuple[Optional[CleanupStep], str]:
        """
        Resolve a step's commands from the live host.

        Returns (step, "") when there is something to run, or (None, reason).
        """
        if step.kind is StepKind.KERNEL_PURGE:
            try:
                selection = find_old_kernels(self.host)
            except KernelVersionUnknown as e:
                logger.warning(f"Kernel cleanup skipped: {e}")
                return None, "running kernel version unknown, kernel cleanup skipped"
            if selection.empty:
                return None, "no old kernels found"
            line_do(f"Running kernel: {selection.running_version}")
            line_do(f"Keeping fallback kernel(s): {', '.join(selection.retained_versions)}")
            table("Old kernel packages", ["Package"], [[name] for name in selection.packages])
            logger.info(f"Old kernel packages: {' '.join(selection.packages)}")
            return replace(step, commands=(purge_command(selection),)), ""

        if step.kind is StepKind.SNAP_REVISIONS:
            revisions = disabled_snap_revisions(self.host)
            if not revisions:
                return None, "no disabled snap revisions"
            table("Disabled snap revisions", ["Name", "Rev"], [[n, r] for n, r in revisions])
            return replace(step, commands=snap_remove_commands(revisions)), ""

        if step.kind is StepKind.ORPHAN_PACKAGES:
            packages = orphaned_packages(self.host)
            if not packages:
                return None, "no orphaned libraries"
            line_do(f"Orphaned libraries: {' '.join(packages)}")
            return replace(step, commands=(orphan_purge_command(packages),)), ""

        if not step.commands:
            return None, "nothing to run"
        return step, ""

    def _unavailable(self, step: CleanupStep) -> Optional[str]:
        if step.requires_tool and not self.host.which(step.requires_tool):
            return f"{step.requires_tool} not installed"
        return None

    def preview(self) -> List[Tuple[CleanupStep, str]]:
        """Materialize every planned step without running anything."""
        rows = []
        for step in build_plan(self.ctx):
            reason = self._unavailable(step)
            if reason:
                rows.append((step, reason))
                continue
            resolved, note = self.materialize(step)
            rows.append((resolved or step, note))
        return rows

    def run(self) -> RunReport:
        self.check_preconditions()
        if self.ctx.enabled("docker"):
            policy = self.ctx.docker_policy
            logger.info(f"Docker prune policy: {policy.value} ({policy.description})")
            line_do(f"Docker prune policy: {policy.value} ({policy.description})")
        logger.info(f"Journal retention: {self.ctx.journal_retention.describe()}")

        self.report.initial_used_kb = self.accountant.measure()
        line_do(f"Initial used space: {format_kb(self.report.initial_used_kb)}")

        for step in build_plan(self.ctx):
            self.process(step)

        self.report.final_used_kb = self.accountant.measure()
        return self.report

    def process(self, step: CleanupStep) -> None:
        section(step.name)
        logger.info(f"Step: {step.name} (risk: {step.risk.value})")

        reason = self._unavailable(step)
        if reason:
            self.aggregator.skipped(step, Outcome.SKIPPED_BY_POLICY, reason)
            return

        resolved, note = self.materialize(step)
        if resolved is None:
            self.aggregator.skipped(step, Outcome.SKIPPED_BY_POLICY, note)
            return

        decision = self.gate.decide(resolved, self.ctx)
        if not decision.approved:
            outcome = (Outcome.SKIPPED_BY_POLICY if decision is Decision.POLICY_DECLINED
                       else Outcome.SKIPPED_BY_OPERATOR)
            self.aggregator.skipped(resolved, outcome, decision.value)
            return

        for cmd in resolved.commands:
            logger.info(f"Command: {printable(cmd)}")
        result, measurement = self.accountant.wrap(resolved, self.runner.run)
        self.aggregator.executed(resolved, result, measurement)
        if not result.success and result.output.strip():
            logger.warning(f"Output of failed step '{resolved.name}':\n{result.output.rstrip()}")

        if resolved.kind is StepKind.KERNEL_PURGE:
            self.after_kernel_purge(result)

    def after_kernel_purge(self, result: StepResult) -> None:
        # Removing kernel meta packages can orphan more packages.
        self.process(kernel_autoremove_step(self.ctx))
        if not result.success:
            line_warn("Kernel purge failed; bootloader configuration left unchanged")
            return
        if not self.host.which("update-grub"):
            line_warn("update-grub not found; regenerate the bootloader configuration manually")
            logger.warning("update-grub not found after kernel purge")
            return
        line_do("[run] update-grub")
        status, output = self.host.execute(["update-grub"])
        if status != 0:
            line_warn(f"update-grub failed (exit status {status}); kernel packages were already removed")
            logger.warning(f"update-grub exited with status {status}: {output.strip()}")
        else:
            line_ok("Bootloader configuration regenerated")
            logger.info("update-grub succeeded")
