# -*- coding: utf-8 -*-
"""Host-side inspection: kernels, disk usage, snaps and orphaned packages."""
