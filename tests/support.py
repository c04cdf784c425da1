# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Test doubles shared by the lintdiff test-suite."""

from __future__ import annotations

import threading
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import git

from lintdiff.process import ToolExecution

AUTHOR = git.Actor("lintdiff tests", "tests@example.com")


@dataclass
class RepoBuilder:
    """Create commits in a throwaway repository."""

    path: Path
    repo: git.Repo

    def write(self, relative: str, content: str | bytes) -> Path:
        target = self.path / relative
        target.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            target.write_bytes(content)
        else:
            target.write_text(content, encoding="utf-8")
        return target

    def commit(
        self,
        message: str,
        files: Mapping[str, str | bytes] | None = None,
        *,
        remove: Sequence[str] = (),
    ) -> str:
        for relative, content in (files or {}).items():
            self.write(relative, content)
            self.repo.index.add([relative])
        if remove:
            self.repo.index.remove(list(remove), working_tree=True)
        commit = self.repo.index.commit(message, author=AUTHOR, committer=AUTHOR)
        return commit.hexsha

    def move(self, old: str, new: str) -> None:
        self.repo.index.move([old, new])


@dataclass
class FakeRunner:
    """Tool runner returning canned executions keyed by the linted file."""

    responses: dict[str, ToolExecution] = field(default_factory=dict)
    default: ToolExecution = field(default_factory=lambda: ToolExecution(0, "", ""))
    handler: Callable[[str, Sequence[str]], ToolExecution] | None = None
    calls: list[tuple[str, tuple[str, ...], Path | None]] = field(default_factory=list)
    _lock: threading.Lock = field(default_factory=threading.Lock)

    def run(self, binary: str, arguments: Sequence[str], cwd: Path | None = None) -> ToolExecution:
        with self._lock:
            self.calls.append((binary, tuple(arguments), cwd))
        if self.handler is not None:
            return self.handler(binary, arguments)
        return self.responses.get(arguments[-1], self.default)

    def files(self) -> list[str]:
        return [arguments[-1] for _, arguments, _ in self.calls]


@dataclass
class RecordingPublisher:
    """In-memory publisher capturing every call."""

    existing: dict[int, str] = field(default_factory=dict)
    posted: list[tuple[str, int, str]] = field(default_factory=list)
    updated: list[tuple[str, int, str]] = field(default_factory=list)
    reviews: list[tuple[str, int, dict[str, Any]]] = field(default_factory=list)
    closed: bool = False

    def find_issue_comment_id(self, repo: str, number: int, marker: str) -> int | None:
        for comment_id, body in self.existing.items():
            if marker in body:
                return comment_id
        return None

    def post_issue_comment(self, repo: str, number: int, body: str) -> int:
        self.posted.append((repo, number, body))
        return 1000 + len(self.posted)

    def update_comment(self, repo: str, comment_id: int, body: str) -> None:
        self.updated.append((repo, comment_id, body))

    def post_review(self, repo: str, number: int, payload: Mapping[str, Any]) -> None:
        self.reviews.append((repo, number, dict(payload)))

    def close(self) -> None:
        self.closed = True
