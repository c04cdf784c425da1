# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""GitHub Actions environment and REST publishing."""

from __future__ import annotations

from .client import DEFAULT_BASE_URL, GitHubClient, Publisher, add_or_update_issue_comment
from .env import PULL_REQUEST_EVENTS, SUPPORTED_EVENTS, GitHubEnv, running_on_actions

__all__ = [
    "DEFAULT_BASE_URL",
    "PULL_REQUEST_EVENTS",
    "SUPPORTED_EVENTS",
    "GitHubClient",
    "GitHubEnv",
    "Publisher",
    "add_or_update_issue_comment",
    "running_on_actions",
]
