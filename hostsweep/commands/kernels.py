#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
The kernels command: show which kernel packages a clean would purge.
"""

from __future__ import annotations
import argparse

from rich.text import Text

from hostsweep.errors import KernelVersionUnknown
from hostsweep.host import SystemHost
from hostsweep.output import line_ok, line_warn, section, table
from hostsweep.system.kernels import find_old_kernels


def cmd_kernels(args: argparse.Namespace, host=None) -> None:
    host = host or SystemHost()
    section("Kernels")
    try:
        selection = find_old_kernels(host)
    except KernelVersionUnknown as e:
        line_warn(f"Cannot determine the running kernel ({e}); nothing would be removed")
        return

    rows = []
    for name in selection.kept_packages:
        rows.append([name, Text("keep", style="green")])
    for name in selection.packages:
        rows.append([name, Text("remove", style="red")])
    table(f"Kernel packages (running {selection.running_version})", ["Package", "Action"], rows)

    if selection.empty:
        line_ok("No old kernels found")
    else:
        line_warn(
            f"{len(selection.removable_versions)} old kernel version(s) would be purged: "
            f"{', '.join(selection.removable_versions)}"
        )
