"""Single-shot timer hosts.

The registry only needs two primitives from its host: schedule an action once
after a delay, and cancel a not-yet-fired action by the reference returned
when it was scheduled. Cancelling a reference that already fired or was
already cancelled must be a no-op.

This module holds the protocol and the asyncio host. The APScheduler host
lives in services.scheduler and the Qt host in services.qt_timers.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Optional, Protocol

log = logging.getLogger(__name__)

# Opaque token handed back to the host's cancel primitive
TimerRef = Any


class TimerFacility(Protocol):
    def schedule_after(self, delay: float, action: Callable[[], None]) -> TimerRef:
        ...

    def cancel(self, ref: TimerRef) -> None:
        ...


class AsyncioTimerFacility:
    """Single-shot timers on an asyncio event loop via loop.call_later.

    If no loop is given, the loop running at schedule time is used, so
    schedule_after must then be called from inside that loop. Exceptions
    raised by an action reach the loop's exception handler.
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is not None:
            return self._loop
        return asyncio.get_running_loop()

    def schedule_after(self, delay: float, action: Callable[[], None]) -> asyncio.TimerHandle:
        return self.loop.call_later(max(0.0, delay), action)

    def cancel(self, ref: asyncio.TimerHandle) -> None:
        # TimerHandle.cancel is already idempotent and harmless after firing
        ref.cancel()
