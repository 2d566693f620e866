#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Old kernel selection.

The running kernel is never a candidate, and the newest non-running kernel
is always kept as a fallback, so a purge leaves at least two kernels
installed whenever two were installed before.
"""

from __future__ import annotations
import re
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from hostsweep.constants import KERNEL_FLAVORS, KERNEL_PACKAGE_PREFIXES, KERNEL_PACKAGE_PATTERNS
from hostsweep.errors import KernelVersionUnknown
from hostsweep.helpers import version_key
from hostsweep.logging_setup import logger
from hostsweep.models import InstalledPackage, KernelPackage, KernelSelection

# A numeric release ("5.4.0-100") followed by an unknown flavor ("-nvidia").
_RELEASE_WITH_TAIL = re.compile(r"^(\d+(?:\.\d+)*-\d+)-[a-z][a-z0-9.+-]*$")
# A dotted release embedded after a variant name ("unsigned-5.4.0-80-generic").
_EMBEDDED_RELEASE = re.compile(r"(?:^|-)(\d+(?:\.\d+)+-\d+)(?=-|$)")


def classify_package(name: str) -> Optional[Tuple[str, str]]:
    """Return (kind, version token) for a kernel package name, or None."""
    for prefix, kind in KERNEL_PACKAGE_PREFIXES:
        if name.startswith(prefix):
            token = name[len(prefix):]
            return (kind, token) if token else None
    return None


def version_stem(version: str) -> str:
    """Strip the flavor suffix: ``5.4.0-100-generic`` -> ``5.4.0-100``."""
    version = version.strip()
    for flavor in KERNEL_FLAVORS:
        suffix = f"-{flavor}"
        if version.endswith(suffix):
            return version[: -len(suffix)]
    m = _RELEASE_WITH_TAIL.match(version)
    if m:
        return m.group(1)
    return version


def token_stem(token: str) -> Optional[str]:
    """
    Release stem of a package version token, or None for meta packages.

    Variant packages such as ``linux-image-unsigned-*`` or
    ``linux-modules-nvidia-535-*`` carry the release after a name, and belong
    to that release.
    """
    if token[:1].isdigit():
        return version_stem(token)
    m = _EMBEDDED_RELEASE.search(token)
    return m.group(1) if m else None


def kernel_packages(installed: Iterable[InstalledPackage], running_version: str) -> List[KernelPackage]:
    """Turn installed package records into kernel package records."""
    running_stem = version_stem(running_version) if running_version else ""
    res = []
    for pkg in installed:
        parsed = classify_package(pkg.name)
        if parsed is None:
            continue
        kind, token = parsed
        is_running = bool(running_stem) and token_stem(token) == running_stem
        res.append(KernelPackage(name=pkg.name, kind=kind, version=token, is_running=is_running))
    return res


def select_removable(packages: Sequence[KernelPackage], running_version: str) -> KernelSelection:
    """
    Compute the kernel packages that are safe to purge.

    Packages are split into ``current`` (running or meta package) and
    ``others``. The distinct versions of ``others`` are sorted ascending and
    the newest is dropped; every package of the remaining versions is
    removable.

    Raises:
        KernelVersionUnknown: if ``running_version`` is empty.
    """
    running_version = (running_version or "").strip()
    if not running_version:
        raise KernelVersionUnknown("running kernel release is unknown")
    running_stem = version_stem(running_version)

    current: List[KernelPackage] = []
    others: Dict[str, List[KernelPackage]] = {}
    for pkg in packages:
        stem = token_stem(pkg.version)
        if stem is None or pkg.is_running:
            current.append(pkg)
        else:
            others.setdefault(stem, []).append(pkg)

    if not any(pkg.is_running for pkg in packages):
        # Nothing installed backs the running kernel; refuse to guess.
        logger.warning(f"No installed package matches running kernel {running_version}; keeping all kernels")
        return KernelSelection(
            running_version=running_version,
            running_stem=running_stem,
            retained_versions=tuple(sorted(others, key=version_key)),
            kept_packages=tuple(sorted(p.name for p in packages)),
        )

    ordered = sorted(others, key=version_key)
    removable = ordered[:-1]
    retained = ordered[-1:]

    names = sorted(p.name for stem in removable for p in others[stem])
    kept = sorted(
        [p.name for p in current] + [p.name for stem in retained for p in others[stem]]
    )
    return KernelSelection(
        running_version=running_version,
        running_stem=running_stem,
        removable_versions=tuple(removable),
        retained_versions=tuple(retained),
        packages=tuple(names),
        kept_packages=tuple(kept),
    )


def find_old_kernels(host) -> KernelSelection:
    """
    Enumerate installed kernels on ``host`` and select the removable ones.

    Raises:
        KernelVersionUnknown: if the running kernel cannot be determined.
    """
    running = host.current_kernel_version()
    if not running or not running.strip():
        raise KernelVersionUnknown("uname -r returned nothing")
    installed = host.list_installed(KERNEL_PACKAGE_PATTERNS)
    pkgs = kernel_packages(installed, running)
    logger.debug(f"Found {len(pkgs)} kernel packages, running {running}")
    return select_removable(pkgs, running)


def purge_command(selection: KernelSelection) -> Tuple[str, ...]:
    return ("apt-get", "purge", "-y", *selection.packages)
