#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Confirmation gate: decides whether a planned step runs.

This is the only place a run waits for the operator.
"""

from __future__ import annotations
from enum import Enum

from hostsweep.helpers import is_affirmative
from hostsweep.logging_setup import logger
from hostsweep.models import CleanupStep, RiskLevel, RunContext


class Decision(str, Enum):
    AUTO_APPROVED = "auto-approved"
    OPERATOR_APPROVED = "operator-approved"
    OPERATOR_DECLINED = "operator-declined"
    POLICY_DECLINED = "policy-declined"

    @property
    def approved(self) -> bool:
        return self in (Decision.AUTO_APPROVED, Decision.OPERATOR_APPROVED)


def requires_confirmation(risk: RiskLevel, auto_confirm: bool) -> bool:
    """Routine steps skip the prompt under auto-confirm; riskier steps never do."""
    if risk is RiskLevel.ROUTINE:
        return not auto_confirm
    return True


class ConfirmationGate:
    def __init__(self, host):
        self.host = host

    def decide(self, step: CleanupStep, ctx: RunContext) -> Decision:
        if not step.requires_confirmation:
            logger.info(f"Auto-approved ({step.risk.value}): {step.name}")
            return Decision.AUTO_APPROVED

        if ctx.auto_confirm:
            if step.risk is RiskLevel.IRREVERSIBLE and not ctx.allow_irreversible:
                logger.warning(
                    f"Skipped irreversible step without --allow-irreversible: {step.name}"
                )
                return Decision.POLICY_DECLINED
            logger.info(f"Auto-approved ({step.risk.value}, --yes): {step.name}")
            return Decision.AUTO_APPROVED

        prefix = "IRREVERSIBLE - " if step.risk is RiskLevel.IRREVERSIBLE else ""
        answer = self.host.read_line(f"{prefix}Run '{step.name}'? [y/N]: ")
        if is_affirmative(answer):
            logger.info(f"Operator approved: {step.name}")
            return Decision.OPERATOR_APPROVED
        logger.info(f"Operator declined: {step.name}")
        return Decision.OPERATOR_DECLINED

    def should_run(self, step: CleanupStep, ctx: RunContext) -> bool:
        return self.decide(step, ctx).approved
