"""Logging for flowtrace.

Every module logs through ``get_logger(__name__)``. Records go to the
``flowtrace`` package logger, which owns the only handler; child loggers
stay at NOTSET and follow its level. Engines log per-round detail at DEBUG,
runs and file IO at INFO.

The starting level is INFO unless ``FLOWTRACE_LOG_LEVEL`` names another one
(``DEBUG``, ``WARNING``, ... or a number).
"""

import logging
import os
import sys
from typing import Optional, Union

ROOT_LOGGER_NAME = "flowtrace"
LEVEL_ENV_VAR = "FLOWTRACE_LOG_LEVEL"
DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Handler installed on the package logger; None until set up
_handler: Optional[logging.Handler] = None


def resolve_level(level: Union[int, str]) -> int:
    """Turn ``logging.DEBUG``, ``"debug"`` or ``"10"`` into a level number.

    Raises:
        ValueError: If a string names no logging level.
    """
    if isinstance(level, int):
        return level
    text = level.strip()
    if text.isdigit():
        return int(text)
    value = logging.getLevelName(text.upper())
    if not isinstance(value, int):
        raise ValueError(f"Unknown log level '{level}'.")
    return value


def _default_level() -> int:
    configured = os.environ.get(LEVEL_ENV_VAR)
    if not configured:
        return logging.INFO
    try:
        return resolve_level(configured)
    except ValueError:
        return logging.INFO


def setup_root_logger(
    level: Optional[Union[int, str]] = None,
    format_string: Optional[str] = None,
    handler: Optional[logging.Handler] = None,
) -> logging.Logger:
    """Install the package handler once and return the package logger.

    Later calls return the logger unchanged until :func:`reset_logging`.

    Args:
        level: Starting level; defaults to ``FLOWTRACE_LOG_LEVEL`` or INFO.
        format_string: Record format; defaults to :data:`DEFAULT_FORMAT`.
        handler: Destination; defaults to a stdout stream handler.
    """
    global _handler

    package_logger = logging.getLogger(ROOT_LOGGER_NAME)
    if _handler is not None:
        return package_logger

    _handler = handler if handler is not None else logging.StreamHandler(sys.stdout)
    _handler.setFormatter(logging.Formatter(format_string or DEFAULT_FORMAT))

    package_logger.handlers.clear()
    package_logger.addHandler(_handler)
    package_logger.setLevel(_default_level() if level is None else resolve_level(level))
    # pytest's caplog listens on the root logger
    package_logger.propagate = True
    return package_logger


def get_logger(name: str) -> logging.Logger:
    """Logger for a flowtrace module, usually called with ``__name__``."""
    setup_root_logger()
    logger = logging.getLogger(name)
    logger.setLevel(logging.NOTSET)
    return logger


def set_global_log_level(level: Union[int, str]) -> None:
    """Change the level of the package logger and its handler.

    Args:
        level: Level number or name.
    """
    numeric = resolve_level(level)
    package_logger = setup_root_logger()
    package_logger.setLevel(numeric)
    for handler in package_logger.handlers:
        handler.setLevel(numeric)


def enable_debug_logging() -> None:
    set_global_log_level(logging.DEBUG)


def disable_debug_logging() -> None:
    set_global_log_level(logging.INFO)


def reset_logging() -> None:
    """Drop the package handler so the next setup starts fresh (for tests)."""
    global _handler
    _handler = None

    package_logger = logging.getLogger(ROOT_LOGGER_NAME)
    package_logger.handlers.clear()
    package_logger.setLevel(logging.NOTSET)


setup_root_logger()
