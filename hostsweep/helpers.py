#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Helper utility functions for hostsweep.
"""

from __future__ import annotations
import re
import shlex
from typing import List, Optional, Sequence, Tuple

_VERSION_TOKEN = re.compile(r"\d+|\D+")


def printable(cmd: Sequence[str]) -> str:
    """Render an argv list the way a shell user would type it."""
    return " ".join(shlex.quote(x) for x in cmd)


def version_key(version: str) -> Tuple[Tuple[int, int, str], ...]:
    """
    Sort key that orders version strings like ``sort -V``.

    Digit runs compare numerically, everything else lexically, so
    ``5.4.0-90`` sorts before ``5.4.0-100`` and ``5.15.0-1`` after both.
    """
    key: List[Tuple[int, int, str]] = []
    for tok in _VERSION_TOKEN.findall(version):
        if tok.isdigit():
            key.append((0, int(tok), ""))
        else:
            key.append((1, 0, tok))
    return tuple(key)


def is_affirmative(answer: Optional[str]) -> bool:
    """True for ``y`` or ``yes`` in any case, ignoring surrounding whitespace."""
    if answer is None:
        return False
    return answer.strip().lower() in ("y", "yes")


def format_kb(kb: Optional[int]) -> str:
    """
    Convert kilobytes to a human-readable string.

    Args:
        kb: Number of kilobytes (may be negative), or None

    Returns:
        Human-readable string (e.g. "1.50 GB", "-500 KB", "unknown")
    """
    if kb is None:
        return "unknown"
    sign = "-" if kb < 0 else ""
    n = abs(kb)
    if n >= 1024 * 1024:
        return f"{sign}{n / 1024 / 1024:.2f} GB"
    if n >= 1024:
        return f"{sign}{n / 1024:.2f} MB"
    return f"{sign}{n} KB"
