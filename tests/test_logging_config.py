"""Tests for logging helpers."""

import logging

from prodline.logging_config import (
    ENV_LEVEL,
    LOGGER_NAME,
    configure_from_env,
    disable_logging,
    enable_console_logging,
)


def _stream_handlers():
    return [h for h in logging.getLogger(LOGGER_NAME).handlers if not isinstance(h, logging.NullHandler)]


def test_package_is_silent_by_default():
    import prodline  # noqa: F401

    handlers = logging.getLogger(LOGGER_NAME).handlers
    assert any(isinstance(h, logging.NullHandler) for h in handlers)


def test_enable_console_logging(reset_logging):
    handler = enable_console_logging(level="DEBUG")
    assert handler in _stream_handlers()
    assert logging.getLogger(LOGGER_NAME).level == logging.DEBUG


def test_enable_twice_keeps_one_handler(reset_logging):
    enable_console_logging()
    enable_console_logging()
    assert len(_stream_handlers()) == 1


def test_disable_logging():
    enable_console_logging()
    disable_logging()
    assert _stream_handlers() == []


def test_configure_from_env(monkeypatch, reset_logging):
    monkeypatch.setenv(ENV_LEVEL, "warning")
    handler = configure_from_env()
    assert handler is not None
    assert handler.level == logging.WARNING


def test_configure_from_env_unset(monkeypatch):
    monkeypatch.delenv(ENV_LEVEL, raising=False)
    assert configure_from_env() is None
