#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
The config command: show (default) or reset config.toml.
"""

from __future__ import annotations
import argparse
from pathlib import Path

from rich.markup import escape

from hostsweep.config import config_file_path, default_config, load_config, save_config
from hostsweep.output import kv_table, line_ok, p, section


def cmd_config(args: argparse.Namespace) -> None:
    path = Path(args.config) if args.config else config_file_path()
    if args.reset:
        written = save_config(default_config(), path)
        line_ok(f"Configuration reset to defaults: {written}")
        return

    section("Configuration")
    p(f"File: {path}{'' if path.exists() else ' (not found, showing defaults)'}")
    cfg = load_config(path)
    for name, values in cfg.items():
        if isinstance(values, dict):
            kv_table(escape(f"[{name}]"), [(k, str(v)) for k, v in values.items()])
        else:
            p(f"{name} = {values!r}")
