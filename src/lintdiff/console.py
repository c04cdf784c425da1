# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Shared Rich consoles for status lines, log records and result tables."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from functools import lru_cache

from rich.console import Console


def detect_tty() -> bool:
    """Return ``True`` when lintdiff writes to an interactive terminal.

    CI runners pipe stdout, so colour and cursor control stay off there.
    """

    stream = sys.stdout
    isatty = getattr(stream, "isatty", None)
    if isatty is None:
        return False
    try:
        return bool(isatty())
    except ValueError:
        # closed stream
        return False


@dataclass(frozen=True, slots=True)
class ConsoleKey:
    color: bool
    emoji: bool
    terminal: bool

    @property
    def styled(self) -> bool:
        return self.color and self.terminal


class ConsoleManager:
    """Hand out one :class:`Console` per colour, emoji and terminal combination."""

    def __init__(self) -> None:
        self._consoles: dict[ConsoleKey, Console] = {}

    def get(self, *, color: bool, emoji: bool) -> Console:
        """Return the console for ``color``/``emoji`` on the current stdout."""

        key = ConsoleKey(color=color, emoji=emoji, terminal=detect_tty())
        console = self._consoles.get(key)
        if console is None:
            console = Console(
                color_system="auto" if key.styled else None,
                force_terminal=key.terminal,
                no_color=not key.styled,
                emoji=key.emoji,
                soft_wrap=True,
            )
            self._consoles[key] = console
        return console


@lru_cache(maxsize=1)
def get_console_manager() -> ConsoleManager:
    """Return the process-wide :class:`ConsoleManager`."""

    return ConsoleManager()


__all__ = ["ConsoleKey", "ConsoleManager", "detect_tty", "get_console_manager"]
