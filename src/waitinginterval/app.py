"""Application wiring.

Builds timer hosts and registries from configuration, and applies the
configured logging. The heavier hosts (APScheduler, PyQt6) are imported
only when requested.
"""
from __future__ import annotations

import logging
from types import SimpleNamespace
from typing import Any, Optional

from .config import data_dir, load_config
from .errors import UnknownBackend
from .services.registry import WaitingIntervalRegistry
from .services.timers import AsyncioTimerFacility, TimerFacility
from .utils.logging_setup import configure_logging

log = logging.getLogger(__name__)

LOG_FILENAME = "waitinginterval.log"


def build_timers(backend: str, *, loop: Any = None, scheduler: Any = None, parent: Any = None) -> TimerFacility:
    """Return the single-shot timer host named by `backend`.

    Parameters
    ----------
    backend: str
        One of "asyncio", "apscheduler", "qt".
    loop / scheduler / parent:
        Passed to the asyncio, APScheduler and Qt hosts respectively.

    Raises
    ------
    UnknownBackend for any other name.
    """
    name = str(backend).lower()
    if name == "asyncio":
        return AsyncioTimerFacility(loop)
    if name == "apscheduler":
        from .services.scheduler import SchedulerTimerFacility

        return SchedulerTimerFacility(scheduler)
    if name == "qt":
        from .services.qt_timers import QtTimerFacility

        return QtTimerFacility(parent)
    raise UnknownBackend(f"Unknown timer backend {backend!r}")


def build_registry(cfg: Optional[SimpleNamespace] = None, **host_kwargs: Any) -> WaitingIntervalRegistry:
    """Return a registry on the backend named in `cfg` (loaded from the data folder if omitted)."""
    if cfg is None:
        cfg = load_config()
    timers = build_timers(cfg.timers.backend, **host_kwargs)
    log.info("Waiting interval registry using %s timers", cfg.timers.backend)
    return WaitingIntervalRegistry(timers)


def configure_from_config(cfg: SimpleNamespace) -> int:
    """Apply the configured log level, plus a log file in the data folder when enabled."""
    logfile = None
    if cfg.timers.log_to_file:
        logfile = data_dir() / LOG_FILENAME
    return configure_logging(cfg.timers.log_level, logfile)
