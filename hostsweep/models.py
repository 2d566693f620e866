#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Data model for a cleanup run: steps, run context, kernel packages,
space measurements and the run report.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from hostsweep.constants import DEFAULT_LOG_DIR, CATEGORIES

Command = Tuple[str, ...]


class RiskLevel(str, Enum):
    ROUTINE = "routine"
    DESTRUCTIVE = "destructive"
    IRREVERSIBLE = "irreversible"


class StepKind(str, Enum):
    """How a step's commands are obtained."""
    COMMAND = "command"
    KERNEL_PURGE = "kernel_purge"
    SNAP_REVISIONS = "snap_revisions"
    ORPHAN_PACKAGES = "orphan_packages"


class Outcome(str, Enum):
    SKIPPED_BY_OPERATOR = "skipped-by-operator"
    SKIPPED_BY_POLICY = "skipped-by-policy"
    SUCCEEDED_WITH_DELTA = "succeeded-with-delta"
    SUCCEEDED_NO_CHANGE = "succeeded-no-change"
    FAILED = "failed"


class RetentionMode(str, Enum):
    BY_SIZE = "by_size"
    BY_AGE = "by_age"
    NONE = "none"


class DockerPrunePolicy(str, Enum):
    """Destructive scope of container-runtime cleanup, safest first."""
    NONE = "none"
    DANGLING_IMAGES_ONLY = "dangling"
    ALL_UNUSED_IMAGES = "unused"
    FULL_SYSTEM_PRUNE = "full"

    @property
    def description(self) -> str:
        return {
            DockerPrunePolicy.NONE: "no Docker cleanup",
            DockerPrunePolicy.DANGLING_IMAGES_ONLY: "dangling images and build cache only",
            DockerPrunePolicy.ALL_UNUSED_IMAGES: "all unused images and build cache",
            DockerPrunePolicy.FULL_SYSTEM_PRUNE: "system prune (stopped containers, networks, unused images, build cache)",
        }[self]


@dataclass(frozen=True)
class JournalRetention:
    """Exactly one of: cap by size, cap by age, or leave the journal alone."""
    mode: RetentionMode
    value: Optional[str] = None

    @classmethod
    def from_settings(cls, size: Optional[str], age: Optional[str]) -> "JournalRetention":
        """Size takes precedence when both are configured."""
        if size:
            return cls(RetentionMode.BY_SIZE, size)
        if age:
            return cls(RetentionMode.BY_AGE, age)
        return cls(RetentionMode.NONE)

    def describe(self) -> str:
        if self.mode is RetentionMode.BY_SIZE:
            return f"cap journal at {self.value}"
        if self.mode is RetentionMode.BY_AGE:
            return f"drop journal entries older than {self.value}"
        return "journal retention disabled"


@dataclass(frozen=True)
class RunContext:
    """Settings for one run. Built once at startup and never mutated."""
    auto_confirm: bool = False
    allow_irreversible: bool = False
    journal_retention: JournalRetention = JournalRetention(RetentionMode.BY_SIZE, "100M")
    docker_policy: DockerPrunePolicy = DockerPrunePolicy.DANGLING_IMAGES_ONLY
    categories: frozenset = frozenset(CATEGORIES)
    tmp_max_age_days: int = 1
    var_tmp_max_age_days: int = 7
    log_dir: str = DEFAULT_LOG_DIR
    dry_run: bool = False

    def enabled(self, category: str) -> bool:
        return category in self.categories


@dataclass(frozen=True)
class CleanupStep:
    name: str
    risk: RiskLevel
    commands: Tuple[Command, ...] = ()
    requires_confirmation: bool = True
    category: str = ""
    kind: StepKind = StepKind.COMMAND
    requires_tool: Optional[str] = None


@dataclass(frozen=True)
class InstalledPackage:
    name: str
    version: str
    status: str = "installed"


@dataclass(frozen=True)
class KernelPackage:
    name: str
    kind: str
    version: str
    is_running: bool = False


@dataclass(frozen=True)
class KernelSelection:
    """Result of the kernel selector."""
    running_version: str
    running_stem: str
    removable_versions: Tuple[str, ...] = ()
    retained_versions: Tuple[str, ...] = ()
    packages: Tuple[str, ...] = ()
    kept_packages: Tuple[str, ...] = ()

    @property
    def empty(self) -> bool:
        return not self.packages


@dataclass(frozen=True)
class StepResult:
    success: bool
    exit_status: int
    output: str = ""


@dataclass(frozen=True)
class SpaceMeasurement:
    before_kb: Optional[int]
    after_kb: Optional[int]

    @property
    def freed_kb(self) -> Optional[int]:
        """Positive when space was reclaimed, negative when usage grew, None if unknown."""
        if self.before_kb is None or self.after_kb is None:
            return None
        return self.before_kb - self.after_kb


@dataclass
class StepRecord:
    name: str
    outcome: Outcome
    freed_kb: Optional[int] = None
    exit_status: Optional[int] = None
    commands: Tuple[Command, ...] = ()
    note: str = ""


@dataclass
class RunReport:
    records: List[StepRecord] = field(default_factory=list)
    total_freed_kb: int = 0
    reboot_recommended: bool = False
    initial_used_kb: Optional[int] = None
    final_used_kb: Optional[int] = None
    log_path: Optional[str] = None

    @property
    def actual_freed_kb(self) -> Optional[int]:
        if self.initial_used_kb is None or self.final_used_kb is None:
            return None
        return self.initial_used_kb - self.final_used_kb
