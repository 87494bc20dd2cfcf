"""Self-rearming repeating timers ("waiting intervals").

Works like a periodic timer with two differences:

- at most one tick per registration is ever pending; the next single-shot
  timer is armed only after the callback returns, so a slow or throttled
  callback never causes overlapping or catch-up invocations;
- per-tick delays come from a sequence read back to front, ending on a
  constant floor. Given (16, 8, 4, 2) the delays are 2, 4, 8, 16, 16, ...

The timer host is injected, see services.timers.
"""
from __future__ import annotations

import itertools
import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from ..models.delays import DelayCursor, DelayValue
from .timers import TimerFacility, TimerRef

log = logging.getLogger(__name__)

# Shared by every registry so handles are unique for the life of the process.
# Starts at 1: 0 is never a valid handle.
_handle_counter = itertools.count(1)
_handle_lock = threading.Lock()


def _allocate_handle() -> int:
    with _handle_lock:
        return next(_handle_counter)


@dataclass
class Registration:
    callback: Callable[..., Any]
    args: Tuple[Any, ...]
    kwargs: Dict[str, Any]
    cursor: DelayCursor
    timer: Optional[TimerRef] = field(default=None, repr=False)


class WaitingIntervalRegistry:
    """Table of active waiting intervals, keyed by handle.

    A handle's presence in the table is the only record of whether it is
    still active. Ticks consult it before calling back and again before
    rearming, since stop() can run in between (or from inside the callback).
    """

    def __init__(self, timers: TimerFacility) -> None:
        self.timers = timers
        self._entries: Dict[int, Registration] = {}
        # Re-entrant: a host may fire synchronously from inside schedule_after
        self._lock = threading.RLock()

    def start(self, callback: Callable[..., Any], delays: Iterable[DelayValue], *args: Any, **kwargs: Any) -> int:
        """Start calling `callback(*args, **kwargs)` repeatedly and return its handle.

        The first call happens after the last delay in `delays`, never
        synchronously. Raises InvalidArgument for an empty or invalid delay
        sequence, in which case nothing is allocated or scheduled.
        """
        cursor = DelayCursor(delays)
        handle = _allocate_handle()
        entry = Registration(callback=callback, args=args, kwargs=kwargs, cursor=cursor)
        with self._lock:
            # Insert before arming so a tick on another thread always finds the entry
            self._entries[handle] = entry
            delay = cursor.next()
            try:
                entry.timer = self.timers.schedule_after(delay, lambda: self._tick(handle))
            except BaseException:
                del self._entries[handle]
                raise
        log.debug("Waiting interval %s started; first tick in %ss", handle, delay)
        return handle

    def stop(self, handle: int) -> None:
        """Cancel a waiting interval. Unknown or already stopped handles are ignored.

        A callback that is already running finishes, but is not rearmed.
        """
        with self._lock:
            entry = self._entries.pop(handle, None)
            if entry is None:
                return
            if entry.timer is not None:
                self.timers.cancel(entry.timer)
            entry.timer = None
        log.debug("Waiting interval %s stopped", handle)

    def stop_all(self) -> None:
        for handle in self.handles():
            self.stop(handle)

    def _tick(self, handle: int) -> None:
        with self._lock:
            entry = self._entries.get(handle)
            if entry is None:
                log.debug("Tick for stopped waiting interval %s ignored", handle)
                return
            # The timer that brought us here has fired
            entry.timer = None
        try:
            entry.callback(*entry.args, **entry.kwargs)
        finally:
            # Runs on error too; the callback's exception then goes to the host
            self._rearm(handle, entry)

    def _rearm(self, handle: int, entry: Registration) -> None:
        with self._lock:
            if self._entries.get(handle) is not entry:
                log.debug("Waiting interval %s stopped during its callback; not rearming", handle)
                return
            delay = entry.cursor.next()
            try:
                entry.timer = self.timers.schedule_after(delay, lambda: self._tick(handle))
            except BaseException:
                # Nothing will fire again, so the handle is no longer active
                del self._entries[handle]
                raise
        log.debug("Waiting interval %s rearmed; next tick in %ss", handle, delay)

    def is_active(self, handle: int) -> bool:
        with self._lock:
            return handle in self._entries

    def handles(self) -> List[int]:
        with self._lock:
            return list(self._entries)

    def next_delay(self, handle: int) -> Optional[float]:
        """Delay the next rearm of `handle` would use, or None if it is not active."""
        with self._lock:
            entry = self._entries.get(handle)
            return entry.cursor.peek() if entry is not None else None

    def __contains__(self, handle: object) -> bool:
        return isinstance(handle, int) and self.is_active(handle)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __enter__(self) -> "WaitingIntervalRegistry":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop_all()


def set_waiting_interval(
    registry: WaitingIntervalRegistry,
    callback: Callable[..., Any],
    delays: Iterable[DelayValue],
    *args: Any,
    **kwargs: Any,
) -> int:
    """Alias for registry.start()."""
    return registry.start(callback, delays, *args, **kwargs)


def clear_waiting_interval(registry: WaitingIntervalRegistry, handle: int) -> None:
    """Alias for registry.stop()."""
    registry.stop(handle)
