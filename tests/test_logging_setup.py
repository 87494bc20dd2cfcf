import logging

import pytest

from waitinginterval.utils.logging_setup import configure_logging


@pytest.fixture
def root_logger():
    root = logging.getLogger()
    before = list(root.handlers)
    old_level = root.level
    yield root
    for h in root.handlers[:]:
        if h not in before:
            root.removeHandler(h)
            h.close()
    root.setLevel(old_level)


def test_level_from_name(root_logger):
    assert configure_logging("debug") == logging.DEBUG
    assert root_logger.level == logging.DEBUG


def test_unknown_level_falls_back_to_info(root_logger):
    assert configure_logging("chatty") == logging.INFO
    assert root_logger.level == logging.INFO


def test_file_handler_not_duplicated(root_logger, tmp_path):
    logfile = tmp_path / "timers.log"
    configure_logging("INFO", logfile)
    configure_logging("INFO", str(logfile))
    file_handlers = [
        h for h in root_logger.handlers if isinstance(h, logging.FileHandler) and h.baseFilename == str(logfile)
    ]
    assert len(file_handlers) == 1
    logging.getLogger("waitinginterval.test").info("hello")
    file_handlers[0].flush()
    assert "hello" in logfile.read_text(encoding="utf-8")


def test_registry_logs_lifecycle_at_debug(registry, fake_timers, caplog):
    caplog.set_level(logging.DEBUG, logger="waitinginterval")
    handle = registry.start(lambda: None, [2, 1])
    fake_timers.fire_next()
    registry.stop(handle)
    messages = [r.getMessage() for r in caplog.records]
    assert f"Waiting interval {handle} started; first tick in 1.0s" in messages
    assert f"Waiting interval {handle} rearmed; next tick in 2.0s" in messages
    assert f"Waiting interval {handle} stopped" in messages
