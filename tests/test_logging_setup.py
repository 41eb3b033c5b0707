import io
import logging

import pytest

from finance_ledger import logging_setup
from finance_ledger.logging_setup import PACKAGE_LOGGER, configure_logging, get_logger, resolve_level


@pytest.fixture
def fresh_logging(monkeypatch):
    logger = logging.getLogger(PACKAGE_LOGGER)
    saved = (list(logger.handlers), logger.level, logger.propagate)
    monkeypatch.setattr(logging_setup, "_handler", None)
    logger.handlers = []
    logger.propagate = True
    yield logger
    logger.handlers, logger.level, logger.propagate = saved


@pytest.mark.parametrize(
    ("level", "expected"),
    [
        (logging.DEBUG, logging.DEBUG),
        ("info", logging.INFO),
        (" Error ", logging.ERROR),
        ("15", 15),
        (None, logging.WARNING),
        ("nonsense", logging.WARNING),
    ],
)
def test_resolve_level(level, expected):
    assert resolve_level(level) == expected


def test_resolve_level_falls_back_to_environment(monkeypatch):
    monkeypatch.setenv("LEDGER_LOG_LEVEL", "debug")
    assert resolve_level(None) == logging.DEBUG
    assert resolve_level("info") == logging.INFO


def test_unconfigured_package_logger_is_silent(fresh_logging):
    get_logger("finance_ledger.store")
    assert any(isinstance(h, logging.NullHandler) for h in fresh_logging.handlers)


def test_configure_logging_attaches_one_handler(fresh_logging):
    stream = io.StringIO()
    configure_logging("info", stream=stream)
    configure_logging("debug", stream=stream)

    handlers = [h for h in fresh_logging.handlers if isinstance(h, logging.StreamHandler)]
    assert len(handlers) == 1
    assert fresh_logging.level == logging.DEBUG
    assert not fresh_logging.propagate

    get_logger("finance_ledger.ledger").debug("imported %d row(s)", 3)
    assert "finance_ledger.ledger DEBUG imported 3 row(s)" in stream.getvalue()
