# -*- coding: utf-8 -*-
"""Exception types raised by hostsweep."""


class HostsweepError(Exception):
    """Base class for errors that end a run with a message."""


class PreconditionError(HostsweepError):
    """The host is not fit for a run (missing privilege or tools)."""


class ConfigError(HostsweepError):
    """A configuration value could not be understood."""


class KernelVersionUnknown(HostsweepError):
    """The running kernel release could not be determined."""
