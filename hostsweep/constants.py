#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Constants shared across hostsweep.
"""

VERSION = "1.0.0"
PROJECT_URL = "https://github.com/hostsweep/hostsweep"
TAGLINE = "Safe, accounted maintenance for Ubuntu hosts."

DEFAULT_LOG_DIR = "/var/log/hostsweep"
ROOT_PATH = "/"

# Commands that must exist before any step runs.
ESSENTIAL_COMMANDS = ("apt-get", "dpkg-query", "uname", "df", "find")

# Build-variant suffixes appended to Ubuntu kernel versions.
# Longer names first so "generic-64k" is tried before "generic".
KERNEL_FLAVORS = (
    "generic-64k",
    "generic-lpae",
    "lowlatency-64k",
    "generic",
    "lowlatency",
    "aws",
    "azure",
    "gcp",
    "gke",
    "oracle",
    "kvm",
    "ibm",
    "raspi",
)

# Prefix -> kind. "linux-modules-extra-" must be checked before "linux-modules-".
KERNEL_PACKAGE_PREFIXES = (
    ("linux-modules-extra-", "modules_extra"),
    ("linux-modules-", "modules"),
    ("linux-headers-", "headers"),
    ("linux-image-", "image"),
)

KERNEL_PACKAGE_PATTERNS = tuple(f"{prefix}*" for prefix, _ in KERNEL_PACKAGE_PREFIXES)

# Rotated or compressed logs under /var/log.
ROTATED_LOG_SUFFIXES = ("*.gz", "*.1", "*.xz")

CATEGORIES = (
    "apt_update",
    "apt",
    "orphans",
    "kernels",
    "journal",
    "logs",
    "root_cache",
    "tmp",
    "snap",
    "docker",
)
