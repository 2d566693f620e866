#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Step runner: executes the commands of one approved step.
"""

from __future__ import annotations

from hostsweep.helpers import printable
from hostsweep.logging_setup import logger
from hostsweep.models import CleanupStep, StepResult
from hostsweep.output import line_do


class StepRunner:
    def __init__(self, host):
        self.host = host

    def run(self, step: CleanupStep) -> StepResult:
        """
        Run every command of ``step`` in order.

        The step succeeds only if every command exits 0. Later commands still
        run after a failure; the first non-zero status is reported.
        """
        exit_status = 0
        outputs = []
        for cmd in step.commands:
            line_do(f"[run] {printable(cmd)}")
            logger.info(f"Running: {printable(cmd)}")
            status, output = self.host.execute(cmd)
            if output:
                outputs.append(output)
                logger.debug(output.rstrip())
            if status != 0:
                logger.warning(f"Command exited with status {status}: {printable(cmd)}")
                if exit_status == 0:
                    exit_status = status
            else:
                logger.info(f"Command succeeded: {printable(cmd)}")
        return StepResult(success=exit_status == 0, exit_status=exit_status, output="".join(outputs))
