# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Logging configuration plus user-facing status helpers.

Module loggers are plain :mod:`logging` loggers rendered through
:class:`rich.logging.RichHandler`. A ``TRACE`` level sits below ``DEBUG`` and
carries raw tool output. The ``info``/``ok``/``warn``/``fail`` helpers print
short status lines for humans watching a CI log.
"""

from __future__ import annotations

import logging
from typing import Final

from rich.logging import RichHandler
from rich.rule import Rule
from rich.text import Text

from .console import detect_tty, get_console_manager
from .errors import ConfigError

TRACE: Final[int] = 5
logging.addLevelName(TRACE, "TRACE")

LOG_LEVELS: Final[dict[str, int]] = {
    "trace": TRACE,
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "error": logging.ERROR,
}

_ROOT_LOGGER_NAME: Final[str] = "lintdiff"


def parse_log_level(value: str) -> int:
    """Return the numeric logging level for a user supplied ``value``.

    Args:
        value: Level name such as ``"debug"`` (case-insensitive).

    Returns:
        int: Matching :mod:`logging` level.

    Raises:
        ConfigError: If ``value`` is not a supported level name.
    """

    level = LOG_LEVELS.get(value.strip().lower())
    if level is None:
        supported = ", ".join(LOG_LEVELS)
        raise ConfigError(f"unsupported log level '{value}' (expected one of: {supported})")
    return level


def configure_logging(level: str = "info", *, use_color: bool | None = None) -> logging.Logger:
    """Attach a Rich handler to the package logger and set its level.

    Args:
        level: Level name accepted by :func:`parse_log_level`.
        use_color: Optional explicit colour flag overriding TTY detection.

    Returns:
        logging.Logger: The configured ``lintdiff`` logger.
    """

    numeric = parse_log_level(level)
    color_enabled = detect_tty() if use_color is None else use_color
    logger = logging.getLogger(_ROOT_LOGGER_NAME)
    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)
    handler = RichHandler(
        console=get_console_manager().get(color=color_enabled, emoji=False),
        show_path=False,
        markup=False,
        rich_tracebacks=True,
    )
    handler.setLevel(numeric)
    logger.addHandler(handler)
    logger.setLevel(numeric)
    logger.propagate = False
    return logger


def trace(logger: logging.Logger, msg: str, *args: object) -> None:
    """Log ``msg`` at ``TRACE`` level on ``logger``."""

    if logger.isEnabledFor(TRACE):
        logger.log(TRACE, msg, *args)


def emoji(symbol: str, enable: bool) -> str:
    """Return *symbol* when emoji output is enabled, otherwise blank."""

    return symbol if enable else ""


def _print_line(
    msg: str,
    *,
    style: str | None,
    use_emoji: bool,
    use_color: bool | None = None,
) -> None:
    color_enabled = detect_tty() if use_color is None else use_color
    console = get_console_manager().get(color=color_enabled, emoji=use_emoji)
    text = Text(msg)
    if style and color_enabled:
        text.stylize(style)
    console.print(text)


def section(title: str, *, use_color: bool) -> None:
    """Render a section header to delineate console output blocks."""

    console = get_console_manager().get(color=use_color, emoji=True)
    if use_color:
        console.print()
        console.print(Rule(title))
    else:
        console.print(f"\n--- {title} ---")


def info(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Emit an informational message."""

    _print_line(f"{emoji('ℹ️ ', use_emoji)}{msg}", style="cyan", use_emoji=use_emoji, use_color=use_color)


def ok(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Emit a success message."""

    _print_line(f"{emoji('✅ ', use_emoji)}{msg}", style="green", use_emoji=use_emoji, use_color=use_color)


def warn(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Emit a warning message."""

    _print_line(f"{emoji('⚠️ ', use_emoji)}{msg}", style="yellow", use_emoji=use_emoji, use_color=use_color)


def fail(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Emit an error message."""

    _print_line(f"{emoji('❌ ', use_emoji)}{msg}", style="red", use_emoji=use_emoji, use_color=use_color)


__all__ = [
    "LOG_LEVELS",
    "TRACE",
    "configure_logging",
    "emoji",
    "fail",
    "info",
    "ok",
    "parse_log_level",
    "section",
    "trace",
    "warn",
]
