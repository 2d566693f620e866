# -*- coding: utf-8 -*-
"""
hostsweep - safe maintenance runs for Ubuntu hosts (apt, kernels, journald, snap, Docker).
"""

from hostsweep.constants import VERSION

__version__ = VERSION

__all__ = ["__version__"]
