#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Snap revision and orphaned library discovery.
"""

from __future__ import annotations
import subprocess
from typing import List, Tuple

from hostsweep.logging_setup import logger


def parse_disabled_snaps(out: str) -> List[Tuple[str, str]]:
    """
    Parse ``snap list --all`` output into (name, revision) pairs of disabled revisions.

    Columns: Name Version Rev Tracking Publisher Notes
    """
    res = []
    for line in out.splitlines()[1:]:
        parts = line.split()
        if len(parts) >= 6 and "disabled" in parts[5].split(","):
            res.append((parts[0], parts[2]))
    return res


def disabled_snap_revisions(host) -> List[Tuple[str, str]]:
    try:
        out = host.capture(["snap", "list", "--all"])
    except (OSError, subprocess.CalledProcessError) as e:
        logger.warning(f"Could not list snaps: {e}")
        return []
    return parse_disabled_snaps(out)


def snap_remove_commands(revisions: List[Tuple[str, str]]) -> Tuple[Tuple[str, ...], ...]:
    return tuple(("snap", "remove", name, f"--revision={rev}") for name, rev in revisions)


def orphaned_packages(host) -> List[str]:
    """Library packages nothing depends on, as reported by deborphan."""
    try:
        out = host.capture(["deborphan"])
    except (OSError, subprocess.CalledProcessError) as e:
        logger.warning(f"deborphan failed: {e}")
        return []
    return [ln.strip() for ln in out.splitlines() if ln.strip()]


def orphan_purge_command(packages: List[str]) -> Tuple[str, ...]:
    return ("apt-get", "-y", "remove", "--purge", *packages)
