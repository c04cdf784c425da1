# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Exception hierarchy shared across lintdiff components."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any


class LintDiffError(Exception):
    """Base class for every error raised by lintdiff."""


class ConfigError(LintDiffError):
    """Raised when configuration input is invalid."""


class RepositoryError(LintDiffError):
    """Raised when the repository cannot be opened, read or diffed."""


class RevisionNotFound(RepositoryError):
    """Raised when a revision specification does not resolve to a commit."""

    def __init__(self, revision: str, reason: str | None = None) -> None:
        message = f"revision '{revision}' not found"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.revision = revision


class MalformedOutput(LintDiffError):
    """Raised when tool output does not follow the expected grammar."""


class ToolInvocationError(LintDiffError):
    """Raised when an external tool cannot be launched."""

    def __init__(self, command: Sequence[str], reason: str) -> None:
        """Initialise the error with the offending command.

        Args:
            command: Command sequence that failed to launch.
            reason: Human-readable explanation of the failure.
        """

        head = command[0] if command else "<empty>"
        super().__init__(f"cannot run '{head}': {reason}")
        self.command = tuple(command)
        self.reason = reason


class ToolTimeoutError(ToolInvocationError):
    """Raised when an external tool exceeds its configured timeout."""

    def __init__(self, command: Sequence[str], timeout: float) -> None:
        super().__init__(command, f"timed out after {timeout:.1f}s")
        self.timeout = timeout


class PublisherError(LintDiffError):
    """Raised when the hosting platform rejects or fails a request."""

    def __init__(
        self,
        message: str,
        status_code: int = 0,
        response_body: Any | None = None,
        *,
        rate_limit_remaining: int | None = None,
        rate_limit_reset: int | None = None,
        retry_after: int | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.response_body = response_body
        self.rate_limit_remaining = rate_limit_remaining
        self.rate_limit_reset = rate_limit_reset
        self.retry_after = retry_after


__all__ = [
    "ConfigError",
    "LintDiffError",
    "MalformedOutput",
    "PublisherError",
    "RepositoryError",
    "RevisionNotFound",
    "ToolInvocationError",
    "ToolTimeoutError",
]
