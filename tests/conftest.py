import os
import sys
from pathlib import Path

import pytest


def pytest_sessionstart(session):
    # Ensure headless Qt where applicable
    os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
    # Ensure src is on sys.path without needing plugins
    root = Path(__file__).resolve().parents[1]
    src = root / "src"
    if str(src) not in sys.path:
        sys.path.insert(0, str(src))


class FakeTimer:
    def __init__(self, seq, due, delay, action):
        self.seq = seq
        self.due = due
        self.delay = delay
        self.action = action
        self.cancelled = False
        self.fired = False


class FakeTimers:
    """Single-shot timer host on a virtual clock; nothing fires until told to."""

    def __init__(self):
        self.now = 0.0
        self.delays = []
        self.cancelled = []
        self._timers = []
        self._seq = 0

    def schedule_after(self, delay, action):
        self._seq += 1
        t = FakeTimer(self._seq, self.now + delay, delay, action)
        self._timers.append(t)
        self.delays.append(delay)
        return t

    def cancel(self, ref):
        if not ref.fired and not ref.cancelled:
            ref.cancelled = True
            self.cancelled.append(ref)

    @property
    def pending(self):
        return [t for t in self._timers if not t.fired and not t.cancelled]

    def fire_next(self):
        t = min(self.pending, key=lambda t: (t.due, t.seq))
        self.now = max(self.now, t.due)
        t.fired = True
        t.action()
        return t

    def advance(self, seconds):
        """Move the clock forward, firing everything that falls due on the way."""
        end = self.now + seconds
        while True:
            due = [t for t in self.pending if t.due <= end]
            if not due:
                break
            self.fire_next()
        self.now = end


@pytest.fixture
def fake_timers():
    return FakeTimers()


@pytest.fixture
def registry(fake_timers):
    from waitinginterval.services.registry import WaitingIntervalRegistry

    return WaitingIntervalRegistry(fake_timers)
