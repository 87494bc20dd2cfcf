import pytest

QtCore = pytest.importorskip("PyQt6.QtCore")

from waitinginterval.errors import InvalidArgument  # noqa: E402
from waitinginterval.services.registry import WaitingIntervalRegistry  # noqa: E402
from waitinginterval.services.qt_timers import QtTimerFacility  # noqa: E402


@pytest.fixture(scope="module")
def qapp():
    app = QtCore.QCoreApplication.instance()
    if app is None:
        app = QtCore.QCoreApplication([])
    return app


def run_loop(ms):
    loop = QtCore.QEventLoop()
    QtCore.QTimer.singleShot(ms, loop.quit)
    loop.exec()


def test_qt_host_ticks_until_stopped(qapp):
    facility = QtTimerFacility()
    reg = WaitingIntervalRegistry(facility)
    calls = []
    handles = []

    def cb():
        calls.append(1)
        if len(calls) == 3:
            reg.stop(handles[0])

    handles.append(reg.start(cb, [0.01]))
    run_loop(400)
    assert calls == [1, 1, 1]
    assert facility.pending == 0


def test_qt_stop_cancels_pending_timer(qapp):
    facility = QtTimerFacility()
    reg = WaitingIntervalRegistry(facility)
    calls = []
    handle = reg.start(calls.append, [0.02], "x")
    assert facility.pending == 1
    reg.stop(handle)
    assert facility.pending == 0
    run_loop(100)
    assert calls == []


def test_qt_rejects_delay_beyond_timer_range(qapp):
    facility = QtTimerFacility()
    reg = WaitingIntervalRegistry(facility)
    with pytest.raises(InvalidArgument):
        reg.start(lambda: None, [30 * 24 * 3600])
    assert len(reg) == 0
    assert facility.pending == 0
