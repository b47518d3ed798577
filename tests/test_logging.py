"""Tests for the typegen logging setup."""

from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import Iterator

import pytest

from typegen.logging import LOG_LEVEL_ENV, configure_logging, get_logger, resolve_level


@pytest.fixture(autouse=True)
def _restore_typegen_logger() -> Iterator[None]:
    logger = logging.getLogger("typegen")
    handlers, level, propagate = list(logger.handlers), logger.level, logger.propagate
    yield
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    for handler in handlers:
        logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = propagate


def test_resolve_level_prefers_flags(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(LOG_LEVEL_ENV, "error")

    assert resolve_level(verbose=True) == logging.DEBUG
    assert resolve_level(quiet=True) == logging.WARNING
    assert resolve_level() == logging.ERROR


@pytest.mark.parametrize("value", ["", "chatty", "  "])
def test_resolve_level_ignores_unknown_env_values(
    monkeypatch: pytest.MonkeyPatch, value: str
) -> None:
    monkeypatch.setenv(LOG_LEVEL_ENV, value)

    assert resolve_level() == logging.INFO


def test_stage_loggers_write_to_configured_stream(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(LOG_LEVEL_ENV, raising=False)
    stream = io.StringIO()

    configure_logging(stream=stream)
    get_logger("postproc.dedupe").info("Dropped %d duplicate declarations", 2)
    get_logger("generator").debug("hidden at INFO")

    assert stream.getvalue() == "[typegen] INFO Dropped 2 duplicate declarations\n"


def test_quiet_hides_info_records() -> None:
    stream = io.StringIO()

    configure_logging(quiet=True, stream=stream)
    get_logger("generator").info("Types written")
    get_logger("generator").warning("Skipping package %s", "example.com/app/pkg/baz")

    assert stream.getvalue() == "[typegen] WARNING Skipping package example.com/app/pkg/baz\n"


def test_repeated_configuration_does_not_stack_handlers(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(LOG_LEVEL_ENV, raising=False)
    first, second = io.StringIO(), io.StringIO()

    configure_logging(stream=first)
    logger = configure_logging(stream=second)
    get_logger().warning("once")

    assert len(logger.handlers) == 1
    assert first.getvalue() == ""
    assert second.getvalue() == "[typegen] WARNING once\n"


def test_log_file_keeps_debug_records_when_console_is_quiet(tmp_path: Path) -> None:
    stream = io.StringIO()
    log_file = tmp_path / "logs" / "typegen.log"

    logger = configure_logging(quiet=True, log_file=log_file, stream=stream)
    get_logger("discovery").debug("Discovered %d packages", 2)
    for handler in logger.handlers:
        handler.flush()

    assert stream.getvalue() == ""
    assert "DEBUG typegen.discovery: Discovered 2 packages" in log_file.read_text(encoding="utf-8")
