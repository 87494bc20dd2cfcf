"""Exception types raised by the waiting-interval registry and its wiring."""
from __future__ import annotations


class WaitingIntervalError(Exception):
    """Base class for errors raised by this package."""


class InvalidArgument(WaitingIntervalError, ValueError):
    """A registration was rejected before anything was scheduled."""


class UnknownBackend(WaitingIntervalError, ValueError):
    """The configured timer backend name is not recognised."""
