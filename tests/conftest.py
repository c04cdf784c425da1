# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path

import git
import pytest

from lintdiff.git import GitBackend

from .support import FakeRunner, RecordingPublisher, RepoBuilder


@pytest.fixture
def repo_builder(tmp_path: Path) -> RepoBuilder:
    """Return a builder over an empty repository in ``tmp_path``."""

    root = tmp_path / "repo"
    root.mkdir()
    return RepoBuilder(path=root, repo=git.Repo.init(root))


@pytest.fixture
def backend() -> Iterator[GitBackend]:
    """Return a private, already initialised git backend."""

    instance = GitBackend()
    instance.init()
    yield instance
    if instance.active:
        instance.shutdown()


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def publisher() -> RecordingPublisher:
    return RecordingPublisher()


@pytest.fixture(autouse=True)
def _propagate_lintdiff_logs() -> Iterator[None]:
    """Let ``caplog`` see package records even after ``configure_logging``."""

    logger = logging.getLogger("lintdiff")
    previous = (logger.propagate, logger.level, list(logger.handlers))
    logger.propagate = True
    yield
    logger.propagate, level, handlers = previous
    logger.setLevel(level)
    logger.handlers[:] = handlers
