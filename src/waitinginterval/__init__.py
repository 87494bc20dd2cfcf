"""Repeating timers that wait for the previous call before rearming."""
from waitinginterval.errors import InvalidArgument, UnknownBackend, WaitingIntervalError
from waitinginterval.models.delays import DelayCursor, next_delay, normalize_delays
from waitinginterval.services.registry import (
    WaitingIntervalRegistry,
    clear_waiting_interval,
    set_waiting_interval,
)
from waitinginterval.services.timers import AsyncioTimerFacility, TimerFacility

__version__ = "0.1.0"

__all__ = [
    "AsyncioTimerFacility",
    "DelayCursor",
    "InvalidArgument",
    "TimerFacility",
    "UnknownBackend",
    "WaitingIntervalError",
    "WaitingIntervalRegistry",
    "clear_waiting_interval",
    "next_delay",
    "normalize_delays",
    "set_waiting_interval",
]
