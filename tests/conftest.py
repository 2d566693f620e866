# -*- coding: utf-8 -*-
"""Shared fixtures for hostsweep tests."""

import fnmatch
import subprocess
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import pytest

from hostsweep.constants import ESSENTIAL_COMMANDS
from hostsweep.models import InstalledPackage


def kernel_set(*versions: str, flavor: str = "generic") -> List[InstalledPackage]:
    """Installed image/headers/modules packages for each kernel version."""
    pkgs = []
    for v in versions:
        pkgs.extend([
            InstalledPackage(f"linux-image-{v}-{flavor}", f"{v}.1"),
            InstalledPackage(f"linux-headers-{v}", f"{v}.1"),
            InstalledPackage(f"linux-headers-{v}-{flavor}", f"{v}.1"),
            InstalledPackage(f"linux-modules-{v}-{flavor}", f"{v}.1"),
            InstalledPackage(f"linux-modules-extra-{v}-{flavor}", f"{v}.1"),
        ])
    return pkgs


class FakeHost:
    """In-memory stand-in for SystemHost."""

    def __init__(
        self,
        used: Sequence[Optional[int]] = (5_000_000,),
        kernel: str = "5.4.0-100-generic",
        installed: Iterable[InstalledPackage] = (),
        tools: Iterable[str] = ESSENTIAL_COMMANDS,
        answers: Sequence[str] = (),
        statuses: Optional[Dict[Tuple[str, ...], int]] = None,
        captures: Optional[Dict[Tuple[str, ...], str]] = None,
        outputs: Optional[Dict[Tuple[str, ...], str]] = None,
        root: bool = True,
    ):
        self.used = list(used)
        self.kernel = kernel
        self.installed = list(installed)
        self.tools = set(tools)
        self.answers = list(answers)
        self.statuses = statuses or {}
        self.captures = captures or {}
        self.outputs = outputs or {}
        self.root = root
        self.executed: List[Tuple[str, ...]] = []
        self.prompts: List[str] = []

    def which(self, cmd):
        return f"/usr/bin/{cmd}" if cmd in self.tools else None

    def is_root(self):
        return self.root

    def execute(self, argv):
        argv = tuple(argv)
        self.executed.append(argv)
        if argv[0] == "apt-get" and argv[1:3] == ("purge", "-y"):
            removed = set(argv[3:])
            self.installed = [p for p in self.installed if p.name not in removed]
        return self.statuses.get(argv, 0), self.outputs.get(argv, "")

    def capture(self, argv):
        argv = tuple(argv)
        if argv not in self.captures:
            raise subprocess.CalledProcessError(1, list(argv))
        return self.captures[argv]

    def used_space_kb(self, path="/"):
        if len(self.used) > 1:
            return self.used.pop(0)
        return self.used[0]

    def list_installed(self, patterns):
        return [p for p in self.installed if any(fnmatch.fnmatch(p.name, pat) for pat in patterns)]

    def current_kernel_version(self):
        return self.kernel

    def read_line(self, prompt):
        self.prompts.append(prompt)
        return self.answers.pop(0) if self.answers else ""


@pytest.fixture
def temp_config_dir(tmp_path):
    """Create temporary config directory."""
    config_dir = tmp_path / ".config" / "hostsweep"
    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir


@pytest.fixture
def mock_root_user(mocker):
    """Mock root user check."""
    mocker.patch("os.geteuid", return_value=0)


@pytest.fixture
def mock_non_root_user(mocker):
    """Mock non-root user check."""
    mocker.patch("os.geteuid", return_value=1000)
