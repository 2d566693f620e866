#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Docker pruning policy -> cleanup steps.

``dangling`` never touches containers, networks or tagged images.
``full`` runs ``docker system prune`` and is always irreversible.
Volumes are never pruned.
"""

from __future__ import annotations
from typing import List, Tuple

from hostsweep.gate import requires_confirmation
from hostsweep.models import CleanupStep, DockerPrunePolicy, RiskLevel, StepKind


def docker_cmd(args: List[str]) -> Tuple[str, ...]:
    return ("docker", *args)


def docker_commands(policy: DockerPrunePolicy) -> List[Tuple[str, Tuple[str, ...], RiskLevel]]:
    """(label, argv, risk) for each command the policy issues."""
    if policy is DockerPrunePolicy.DANGLING_IMAGES_ONLY:
        return [
            ("Remove dangling Docker images", docker_cmd(["image", "prune", "-f"]), RiskLevel.DESTRUCTIVE),
            ("Remove Docker build cache", docker_cmd(["builder", "prune", "-f"]), RiskLevel.DESTRUCTIVE),
        ]
    if policy is DockerPrunePolicy.ALL_UNUSED_IMAGES:
        return [
            ("Remove unused Docker images (not referenced by containers)",
             docker_cmd(["image", "prune", "-a", "-f"]), RiskLevel.DESTRUCTIVE),
            ("Remove Docker build cache", docker_cmd(["builder", "prune", "-f"]), RiskLevel.DESTRUCTIVE),
        ]
    if policy is DockerPrunePolicy.FULL_SYSTEM_PRUNE:
        return [
            ("Docker system prune (stopped containers, networks, unused images, build cache)",
             docker_cmd(["system", "prune", "-a", "-f"]), RiskLevel.IRREVERSIBLE),
        ]
    return []


def docker_steps(policy: DockerPrunePolicy, auto_confirm: bool) -> List[CleanupStep]:
    steps = []
    for label, cmd, risk in docker_commands(policy):
        steps.append(CleanupStep(
            name=label,
            risk=risk,
            commands=(cmd,),
            requires_confirmation=requires_confirmation(risk, auto_confirm),
            category="docker",
            kind=StepKind.COMMAND,
            requires_tool="docker",
        ))
    return steps
