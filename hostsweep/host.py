#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
The host collaborator: every interaction hostsweep has with the running
system goes through ``SystemHost``. Commands are argv lists, never shell
strings.
"""

from __future__ import annotations
import os
import subprocess
from shutil import which as _which
from typing import List, Optional, Sequence, Tuple

from hostsweep.logging_setup import logger
from hostsweep.helpers import printable
from hostsweep.models import InstalledPackage

# dpkg-query format: name, version, and the status word ("installed", "config-files", ...)
DPKG_FORMAT = "${Package}\t${Version}\t${db:Status-Status}\n"


class SystemHost:
    """Live implementation of the host interface."""

    def which(self, cmd: str) -> Optional[str]:
        """Find the full path of a command."""
        return _which(cmd)

    def is_root(self) -> bool:
        return os.geteuid() == 0

    def execute(self, argv: Sequence[str]) -> Tuple[int, str]:
        """
        Run a command and wait for it.

        Args:
            argv: Command and arguments as list

        Returns:
            (exit status, combined stdout/stderr). A command that cannot be
            started reports status 127.
        """
        logger.debug(f"Executing command: {printable(argv)}")
        try:
            result = subprocess.run(
                list(argv),
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                check=False,
            )
        except OSError as e:
            logger.warning(f"Could not start {argv[0]}: {e}")
            return 127, str(e)
        logger.debug(f"Command completed with return code: {result.returncode}")
        return result.returncode, result.stdout or ""

    def capture(self, argv: Sequence[str]) -> str:
        """
        Execute a command and capture its output.

        Raises:
            subprocess.CalledProcessError: on non-zero exit
        """
        logger.debug(f"Capturing output: {printable(argv)}")
        result = subprocess.check_output(list(argv), text=True, stderr=subprocess.DEVNULL).strip()
        logger.debug(f"Captured {len(result)} bytes")
        return result

    def used_space_kb(self, path: str = "/") -> Optional[int]:
        """Used kilobytes on the filesystem holding ``path``, or None if unreadable."""
        try:
            out = self.capture(["df", "-k", "--output=used", path])
        except (OSError, subprocess.CalledProcessError) as e:
            logger.warning(f"df failed for {path}: {e}")
            return None
        return parse_df_used(out)

    def list_installed(self, patterns: Sequence[str]) -> List[InstalledPackage]:
        """Fully installed packages whose names match any of ``patterns``."""
        # dpkg-query exits 1 when a pattern matches nothing but still prints the rest.
        try:
            result = subprocess.run(
                ["dpkg-query", "-W", "-f", DPKG_FORMAT, *patterns],
                stdout=subprocess.PIPE,
                stderr=subprocess.DEVNULL,
                text=True,
                check=False,
            )
        except OSError as e:
            logger.warning(f"dpkg-query failed: {e}")
            return []
        return parse_dpkg_query(result.stdout or "")

    def current_kernel_version(self) -> str:
        try:
            return self.capture(["uname", "-r"])
        except (OSError, subprocess.CalledProcessError) as e:
            logger.warning(f"uname -r failed: {e}")
            return ""

    def read_line(self, prompt: str) -> str:
        try:
            return input(prompt)
        except EOFError:
            return ""


def parse_df_used(out: str) -> Optional[int]:
    """Parse ``df --output=used`` output (header line, then a number)."""
    lines = [ln.strip() for ln in out.splitlines() if ln.strip()]
    if len(lines) < 2:
        return None
    try:
        used = int(lines[1].split()[0])
    except (ValueError, IndexError):
        return None
    return used if used >= 0 else None


def parse_dpkg_query(out: str) -> List[InstalledPackage]:
    res = []
    for line in out.splitlines():
        parts = line.split("\t")
        if len(parts) < 3:
            continue
        name, version, status = (x.strip() for x in parts[:3])
        if status != "installed":
            continue
        res.append(InstalledPackage(name, version, status))
    return res
