"""Logging helpers for mailwright.

Modules log through ``logging.getLogger(__name__)``; applications call
``init_logging()`` once to attach Rich/file handlers to the ``mailwright``
namespace.

Examples:
    >>> from mailwright.logging import init_logging
    >>> log = init_logging(preset="dev")  # doctest: +SKIP
    >>> log.success("ready")  # doctest: +SKIP
"""

from __future__ import annotations

import logging
from typing import Any

from mailwright.logging.manager import SUCCESS_LEVEL, TRACE_LEVEL, LogManager

_ROOT_NAME = "mailwright"
_root_logger: LogManager | None = None


def init_logging(
    *,
    preset: str | None = None,
    config: dict[str, Any] | None = None,
) -> LogManager:
    """Create the root ``LogManager`` and wire its handlers to ``mailwright.*``.

    Args:
        preset: Logging preset (``dev``, ``prod``, ``debug``).
        config: Explicit overrides for the logger configuration.

    Returns:
        The root LogManager.
    """
    global _root_logger  # pylint: disable=global-statement

    manager = LogManager(name=_ROOT_NAME, preset=preset, config=config)

    std_logger = logging.getLogger(_ROOT_NAME)
    for handler in list(std_logger.handlers):
        std_logger.removeHandler(handler)
    for handler in manager.handlers:
        std_logger.addHandler(handler)
    std_logger.setLevel(TRACE_LEVEL)
    std_logger.propagate = False

    _root_logger = manager
    return manager


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a logger in the ``mailwright`` namespace.

    Args:
        name: Child name; ``None`` returns the root LogManager when initialized.

    Examples:
        >>> get_logger("cli").name
        'mailwright.cli'
    """
    if name is None:
        if _root_logger is not None:
            return _root_logger
        return logging.getLogger(_ROOT_NAME)
    if name == _ROOT_NAME or name.startswith(f"{_ROOT_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{_ROOT_NAME}.{name}")


__all__ = [
    "SUCCESS_LEVEL",
    "TRACE_LEVEL",
    "LogManager",
    "get_logger",
    "init_logging",
]
