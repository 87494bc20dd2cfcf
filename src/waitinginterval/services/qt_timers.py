"""Timer host backed by Qt's event loop (PyQt6 QTimer).

Each delay becomes its own single-shot QTimer. Qt does not keep Python
references to timers without a parent, so live timers are held here until
they fire or are cancelled.
"""
from __future__ import annotations

import logging
from typing import Callable, Optional, Set

from PyQt6.QtCore import QObject, QTimer

from ..errors import InvalidArgument

log = logging.getLogger(__name__)

# QTimer intervals are signed 32-bit milliseconds (about 24.8 days)
MAX_INTERVAL_MS = 2**31 - 1


class QtTimerFacility:
    """Single-shot timers on the Qt event loop. Delays are seconds."""

    def __init__(self, parent: Optional[QObject] = None) -> None:
        self._parent = parent
        self._live: Set[QTimer] = set()

    def schedule_after(self, delay: float, action: Callable[[], None]) -> QTimer:
        interval_ms = int(round(max(0.0, delay) * 1000))
        if interval_ms > MAX_INTERVAL_MS:
            raise InvalidArgument(f"Qt timers cannot wait longer than {MAX_INTERVAL_MS} ms, got {delay}s")
        timer = QTimer(self._parent)
        timer.setSingleShot(True)
        timer.timeout.connect(lambda: self._fire(timer, action))
        self._live.add(timer)
        timer.start(interval_ms)
        return timer

    def _fire(self, timer: QTimer, action: Callable[[], None]) -> None:
        self._live.discard(timer)
        timer.deleteLater()
        action()

    def cancel(self, ref: QTimer) -> None:
        if ref not in self._live:
            return
        ref.stop()
        self._live.discard(ref)
        ref.deleteLater()

    @property
    def pending(self) -> int:
        return len(self._live)
