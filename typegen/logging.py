"""Logging utilities for typegen commands.

Log records always go to stderr (or an explicit stream) so that declarations
written with ``--stdout`` can be piped without log noise mixed in.
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import Optional, TextIO

_LOGGER_NAME = "typegen"
LOG_LEVEL_ENV = "TYPEGEN_LOG_LEVEL"
_STREAM_FORMAT = "[typegen] %(levelname)s %(message)s"
_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a stage logger such as ``typegen.postproc.dedupe``."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def resolve_level(*, verbose: bool = False, quiet: bool = False) -> int:
    """Pick the log level: flags first, then ``TYPEGEN_LOG_LEVEL``, then INFO."""
    if verbose:
        return logging.DEBUG
    if quiet:
        return logging.WARNING
    configured = os.environ.get(LOG_LEVEL_ENV, "").strip().upper()
    level = logging.getLevelName(configured) if configured else None
    return level if isinstance(level, int) else logging.INFO


def configure_logging(
    *,
    verbose: bool = False,
    quiet: bool = False,
    log_file: Path | None = None,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """Install the typegen stderr handler and an optional file sink."""
    level = resolve_level(verbose=verbose, quiet=quiet)
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    # Repeated CLI invocations in one process must not stack handlers.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    stream_handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    stream_handler.setLevel(level)
    stream_handler.setFormatter(logging.Formatter(_STREAM_FORMAT))
    logger.addHandler(stream_handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        # The file keeps debug detail even when the console is quiet.
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(_FILE_FORMAT))
        logger.addHandler(file_handler)
        logger.setLevel(logging.DEBUG)

    return logger


__all__ = ["LOG_LEVEL_ENV", "configure_logging", "get_logger", "resolve_level"]
