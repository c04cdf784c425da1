# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Process-wide lifecycle of the git backend.

Every repository operation must happen between :meth:`GitBackend.init` and
the matching :meth:`GitBackend.shutdown`. :func:`backend_session` scopes the
pair so callers cannot forget the release.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager

import git
from git.exc import GitCommandNotFound

from ..errors import RepositoryError

LOGGER = logging.getLogger(__name__)


class GitBackend:
    """Reference-counted handle on the git executable used by GitPython."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._depth = 0

    @property
    def active(self) -> bool:
        """Return ``True`` while at least one session is open."""

        with self._lock:
            return self._depth > 0

    def init(self) -> int:
        """Open a session, validating the git executable on first use.

        Returns:
            int: Number of open sessions after this call.

        Raises:
            RepositoryError: If no usable git executable is available.
        """

        with self._lock:
            if self._depth == 0:
                try:
                    git.refresh()
                except (ImportError, GitCommandNotFound) as exc:
                    raise RepositoryError(f"git executable unavailable: {exc}") from exc
                LOGGER.debug("git backend initialised")
            self._depth += 1
            return self._depth

    def shutdown(self) -> int:
        """Close one session.

        Returns:
            int: Number of sessions still open.

        Raises:
            RepositoryError: If no session is open.
        """

        with self._lock:
            if self._depth == 0:
                raise RepositoryError("git backend shutdown without matching init")
            self._depth -= 1
            if self._depth == 0:
                LOGGER.debug("git backend shut down")
            return self._depth

    def ensure_active(self) -> None:
        """Raise :class:`RepositoryError` unless a session is open."""

        if not self.active:
            raise RepositoryError("git backend is not initialised; open a backend_session() first")


_BACKEND = GitBackend()


def get_backend() -> GitBackend:
    """Return the process-wide :class:`GitBackend`."""

    return _BACKEND


@contextmanager
def backend_session(backend: GitBackend | None = None) -> Iterator[GitBackend]:
    """Bracket repository work with ``init``/``shutdown`` on ``backend``."""

    target = backend or _BACKEND
    target.init()
    try:
        yield target
    finally:
        target.shutdown()


__all__ = ["GitBackend", "backend_session", "get_backend"]
