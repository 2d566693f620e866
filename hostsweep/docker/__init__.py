# -*- coding: utf-8 -*-
"""Docker cleanup policy."""
