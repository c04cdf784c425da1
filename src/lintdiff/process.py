# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Safe wrappers around ``subprocess`` execution of external linters."""

from __future__ import annotations

import logging
import os
import shutil

# Bandit: subprocess usage is intentional; commands are argument lists and never
# go through a shell.
import subprocess  # nosec B404
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol, runtime_checkable

from .errors import ToolInvocationError, ToolTimeoutError
from .logging import trace

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ToolExecution:
    """Exit status and captured streams of one tool invocation."""

    exit_code: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.exit_code == 0


@dataclass(frozen=True, slots=True)
class CommandOptions:
    """Execution options for :func:`run_command`."""

    cwd: Path | None = None
    env: Mapping[str, str] | None = None
    timeout: float | None = None

    def __post_init__(self) -> None:
        if self.timeout is not None and self.timeout < 0:
            raise ValueError("timeout must be non-negative")


@runtime_checkable
class ToolRunner(Protocol):
    """Run an external binary and capture its output.

    Implementations must return non-zero exit codes as data rather than
    raising; only launch failures and timeouts raise.
    """

    def run(self, binary: str, arguments: Sequence[str], cwd: Path | None = None) -> ToolExecution:
        """Execute ``binary`` with ``arguments`` inside ``cwd``."""

        raise NotImplementedError


def _ensure_text(value: str | bytes | None) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return value.decode(errors="replace")


def _normalize_args(args: Sequence[str]) -> list[str]:
    """Resolve the executable of ``args`` against ``PATH``.

    Raises:
        ToolInvocationError: If ``args`` is empty or the executable is missing.
    """

    if not args:
        raise ToolInvocationError(args, "empty command")
    head, *rest = args
    head_path = Path(head)
    if head_path.is_absolute() or os.sep in head:
        if not head_path.exists():
            raise ToolInvocationError(args, "executable not found")
        return [str(head_path), *rest]
    resolved = shutil.which(head)
    if resolved is None:
        raise ToolInvocationError(args, "executable was not found on PATH")
    return [resolved, *rest]


def run_command(args: Sequence[str], *, options: CommandOptions | None = None) -> ToolExecution:
    """Execute ``args`` and capture stdout/stderr as text.

    Args:
        args: Command and argument sequence to execute.
        options: Working directory, environment and timeout.

    Returns:
        ToolExecution: Exit code and captured streams, even on failure.

    Raises:
        ToolInvocationError: If the executable cannot be found or started.
        ToolTimeoutError: If the configured timeout elapses.
    """

    resolved_options = options or CommandOptions()
    normalized = _normalize_args(args)
    LOGGER.info("running command: %s", " ".join(normalized))
    try:
        completed = subprocess.run(  # nosec B603 - argument list, no shell
            normalized,
            cwd=str(resolved_options.cwd) if resolved_options.cwd is not None else None,
            env=dict(resolved_options.env) if resolved_options.env is not None else None,
            check=False,
            capture_output=True,
            timeout=resolved_options.timeout,
            stdin=subprocess.DEVNULL,
        )
    except subprocess.TimeoutExpired as exc:
        raise ToolTimeoutError(normalized, float(exc.timeout)) from exc
    except OSError as exc:
        raise ToolInvocationError(normalized, exc.strerror or str(exc)) from exc

    execution = ToolExecution(
        exit_code=completed.returncode,
        stdout=_ensure_text(completed.stdout),
        stderr=_ensure_text(completed.stderr),
    )
    trace(
        LOGGER,
        "original output:\nreturn code: %d\nstdout:\n%s\nstderr:\n%s",
        execution.exit_code,
        execution.stdout,
        execution.stderr,
    )
    return execution


class SubprocessToolRunner:
    """:class:`ToolRunner` backed by :func:`run_command`."""

    def __init__(self, *, timeout: float | None = None, env: Mapping[str, str] | None = None) -> None:
        self._timeout = timeout
        self._env = env

    def run(self, binary: str, arguments: Sequence[str], cwd: Path | None = None) -> ToolExecution:
        options = CommandOptions(cwd=cwd, env=self._env, timeout=self._timeout)
        return run_command([binary, *arguments], options=options)


__all__ = [
    "CommandOptions",
    "SubprocessToolRunner",
    "ToolExecution",
    "ToolRunner",
    "run_command",
]
