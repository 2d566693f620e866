# -*- coding: utf-8 -*-
"""Command implementations for hostsweep."""

from hostsweep.commands.clean import cmd_clean
from hostsweep.commands.kernels import cmd_kernels
from hostsweep.commands.config import cmd_config

__all__ = ["cmd_clean", "cmd_kernels", "cmd_config"]
