#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Space accounting on the root filesystem.
"""

from __future__ import annotations
from typing import Callable, Optional, Tuple, TypeVar

from hostsweep.constants import ROOT_PATH
from hostsweep.helpers import format_kb
from hostsweep.logging_setup import logger
from hostsweep.models import CleanupStep, SpaceMeasurement

T = TypeVar("T")


class SpaceAccountant:
    """Measures used space around each executed step."""

    def __init__(self, host, path: str = ROOT_PATH):
        self.host = host
        self.path = path

    def measure(self) -> Optional[int]:
        """Used KB on the filesystem, or None when it cannot be read."""
        try:
            used = self.host.used_space_kb(self.path)
        except (OSError, ValueError) as e:
            logger.warning(f"Disk usage query failed: {e}")
            return None
        if isinstance(used, bool) or not isinstance(used, int) or used < 0:
            if used is not None:
                logger.warning(f"Disk usage query returned a non-numeric value: {used!r}")
            return None
        return used

    def wrap(self, step: CleanupStep, execute: Callable[[CleanupStep], T]) -> Tuple[T, SpaceMeasurement]:
        before = self.measure()
        result = execute(step)
        after = self.measure()
        measurement = SpaceMeasurement(before, after)
        logger.debug(
            f"{step.name}: used before {format_kb(before)}, after {format_kb(after)}, "
            f"freed {format_kb(measurement.freed_kb)}"
        )
        return result, measurement
