# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""GitHub Actions environment variables and event payload helpers."""

from __future__ import annotations

import json
import logging
import os
import re
from collections.abc import Mapping
from pathlib import Path
from typing import Final

from pydantic import BaseModel, ConfigDict

from ..errors import ConfigError

LOGGER = logging.getLogger(__name__)

GITHUB_ACTIONS: Final[str] = "GITHUB_ACTIONS"
GITHUB_REPOSITORY: Final[str] = "GITHUB_REPOSITORY"
GITHUB_TOKEN: Final[str] = "GITHUB_TOKEN"
GITHUB_EVENT_NAME: Final[str] = "GITHUB_EVENT_NAME"
GITHUB_EVENT_PATH: Final[str] = "GITHUB_EVENT_PATH"
GITHUB_WORKSPACE: Final[str] = "GITHUB_WORKSPACE"
GITHUB_SHA: Final[str] = "GITHUB_SHA"
GITHUB_BASE_REF: Final[str] = "GITHUB_BASE_REF"
GITHUB_HEAD_REF: Final[str] = "GITHUB_HEAD_REF"
GITHUB_REF: Final[str] = "GITHUB_REF"
GITHUB_REF_TYPE: Final[str] = "GITHUB_REF_TYPE"
GITHUB_STEP_SUMMARY: Final[str] = "GITHUB_STEP_SUMMARY"
GITHUB_OUTPUT: Final[str] = "GITHUB_OUTPUT"

EVENT_PUSH: Final[str] = "push"
EVENT_PULL_REQUEST: Final[str] = "pull_request"
EVENT_PULL_REQUEST_TARGET: Final[str] = "pull_request_target"
SUPPORTED_EVENTS: Final[tuple[str, ...]] = (EVENT_PUSH, EVENT_PULL_REQUEST, EVENT_PULL_REQUEST_TARGET)
PULL_REQUEST_EVENTS: Final[tuple[str, ...]] = (EVENT_PULL_REQUEST, EVENT_PULL_REQUEST_TARGET)

_PR_MERGE_REF: Final[re.Pattern[str]] = re.compile(r"refs/pull/(\d+)/merge")


def running_on_actions(environ: Mapping[str, str] | None = None) -> bool:
    """Return ``True`` when executing inside a GitHub Actions runner."""

    source = os.environ if environ is None else environ
    return source.get(GITHUB_ACTIONS, "") == "true"


class GitHubEnv(BaseModel):
    """Values read from the GitHub Actions runner environment."""

    model_config = ConfigDict(frozen=True)

    repository: str = ""
    token: str = ""
    event_name: str = ""
    event_path: str = ""
    workspace: str = ""
    sha: str = ""
    base_ref: str = ""
    head_ref: str = ""
    ref: str = ""
    ref_type: str = ""
    step_summary: str = ""
    output: str = ""

    @classmethod
    def from_environ(cls, environ: Mapping[str, str] | None = None) -> GitHubEnv:
        """Read every supported variable from ``environ`` (default ``os.environ``)."""

        source = os.environ if environ is None else environ
        return cls(
            repository=source.get(GITHUB_REPOSITORY, ""),
            token=source.get(GITHUB_TOKEN, ""),
            event_name=source.get(GITHUB_EVENT_NAME, ""),
            event_path=source.get(GITHUB_EVENT_PATH, ""),
            workspace=source.get(GITHUB_WORKSPACE, ""),
            sha=source.get(GITHUB_SHA, ""),
            base_ref=source.get(GITHUB_BASE_REF, ""),
            head_ref=source.get(GITHUB_HEAD_REF, ""),
            ref=source.get(GITHUB_REF, ""),
            ref_type=source.get(GITHUB_REF_TYPE, ""),
            step_summary=source.get(GITHUB_STEP_SUMMARY, ""),
            output=source.get(GITHUB_OUTPUT, ""),
        )

    def check(self) -> None:
        """Raise :class:`ConfigError` when a variable required on CI is missing."""

        required = {
            GITHUB_REPOSITORY: self.repository,
            GITHUB_EVENT_NAME: self.event_name,
            GITHUB_WORKSPACE: self.workspace,
            GITHUB_SHA: self.sha,
        }
        missing = sorted(name for name, value in required.items() if not value)
        if missing:
            raise ConfigError(f"missing GitHub environment variable(s): {', '.join(missing)}")
        if self.event_name not in SUPPORTED_EVENTS:
            raise ConfigError(f"unsupported event name: {self.event_name}")

    def pull_request_number(self) -> int | None:
        """Return the PR number from the event payload or ``refs/pull/<n>/merge``."""

        if self.event_name not in PULL_REQUEST_EVENTS:
            return None
        if self.event_path:
            try:
                payload = json.loads(Path(self.event_path).read_text(encoding="utf-8"))
            except (OSError, ValueError) as exc:
                LOGGER.warning("cannot read event payload %s: %s", self.event_path, exc)
            else:
                pull_request = payload.get("pull_request") if isinstance(payload, dict) else None
                number = pull_request.get("number") if isinstance(pull_request, dict) else None
                if isinstance(number, int):
                    return number
        match = _PR_MERGE_REF.fullmatch(self.ref)
        if match:
            return int(match.group(1))
        return None

    def log(self) -> None:
        """Log the environment with the token redacted."""

        for name, value in self.model_dump().items():
            shown = "***" if name == "token" and value else value
            LOGGER.info("github env %s: %s", name, shown)


__all__ = [
    "EVENT_PULL_REQUEST",
    "EVENT_PULL_REQUEST_TARGET",
    "EVENT_PUSH",
    "GITHUB_OUTPUT",
    "GITHUB_STEP_SUMMARY",
    "GitHubEnv",
    "PULL_REQUEST_EVENTS",
    "SUPPORTED_EVENTS",
    "running_on_actions",
]
