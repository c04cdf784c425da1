# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for option validation, context building and the Actions environment."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from lintdiff.config import (
    DEFAULT_SOURCE_IREGEX,
    ClangFormatOptions,
    ClangTidyOptions,
    build_context,
    build_tool_options,
    must_not_specify,
    must_specify,
)
from lintdiff.errors import ConfigError
from lintdiff.github.env import GitHubEnv, running_on_actions


def _local(**overrides: Any) -> dict[str, Any]:
    provided: dict[str, Any] = {
        "repo_path": Path("."),
        "target": "main",
        "source": "HEAD",
        "event_name": "push",
    }
    provided.update(overrides)
    return provided


def _ci_env(tmp_path: Path, **overrides: str) -> GitHubEnv:
    values = {
        "repository": "octo/repo",
        "token": "ghs_token",
        "event_name": "pull_request",
        "workspace": str(tmp_path),
        "sha": "abc123",
        "ref": "refs/pull/12/merge",
        "step_summary": str(tmp_path / "summary.md"),
        "output": str(tmp_path / "output.txt"),
    }
    values.update(overrides)
    return GitHubEnv(**values)


def test_must_specify_lists_missing_flags() -> None:
    with pytest.raises(ConfigError, match="--repo-path, --event-name"):
        must_specify("when running locally", {"source": "HEAD"}, ["repo_path", "source", "event_name"])


def test_must_not_specify_lists_present_flags() -> None:
    must_not_specify("on CI", {"repo": None}, ["repo"])
    with pytest.raises(ConfigError, match="must not specify --pr-number"):
        must_not_specify("on CI", {"pr_number": 3}, ["pr_number"])


def test_local_context_defaults() -> None:
    context = build_context(_local(), use_on_local=True)

    assert context.use_on_local is True
    assert context.target == "main"
    assert context.source == "HEAD"
    assert context.jobs == 1
    assert context.context_lines == 3
    assert context.review_anchor == "position"
    assert context.enable_step_summary is False
    assert context.clang_tidy.source_iregex == DEFAULT_SOURCE_IREGEX
    assert context.is_pull_request is False


def test_target_is_always_required() -> None:
    with pytest.raises(ConfigError, match="--target"):
        build_context(_local(target=None), use_on_local=True)


@pytest.mark.parametrize("missing", ["repo_path", "source", "event_name"])
def test_local_run_requires_repository_options(missing: str) -> None:
    with pytest.raises(ConfigError, match="--" + missing.replace("_", "-")):
        build_context(_local(**{missing: None}), use_on_local=True)


def test_local_run_rejects_step_summary() -> None:
    with pytest.raises(ConfigError, match="--enable-step-summary"):
        build_context(_local(enable_step_summary=True), use_on_local=True)


def test_local_comment_requires_token_and_repo() -> None:
    with pytest.raises(ConfigError, match="--token, --repo"):
        build_context(
            _local(event_name="pull_request", pr_number=4, enable_comment_on_issue=True),
            use_on_local=True,
        )


def test_local_comment_on_push_is_rejected() -> None:
    with pytest.raises(ConfigError, match="pull request event"):
        build_context(
            _local(enable_comment_on_issue=True, token="t", repo="octo/repo"),
            use_on_local=True,
        )


def test_local_review_needs_pr_number() -> None:
    with pytest.raises(ConfigError, match="pull request number"):
        build_context(
            _local(event_name="pull_request", enable_pull_request_review=True, token="t", repo="octo/repo"),
            use_on_local=True,
        )


def test_unsupported_event_is_rejected() -> None:
    with pytest.raises(ConfigError, match="unsupported event name 'schedule'"):
        build_context(_local(event_name="schedule"), use_on_local=True)


def test_push_event_rejects_pr_number() -> None:
    with pytest.raises(ConfigError, match="--pr-number"):
        build_context(_local(pr_number=7), use_on_local=True)


@pytest.mark.parametrize(
    ("field", "value"),
    [("jobs", 0), ("context_lines", -1), ("log_level", "verbose"), ("review_anchor", "side")],
)
def test_invalid_values_become_config_errors(field: str, value: Any) -> None:
    with pytest.raises(ConfigError):
        build_context(_local(**{field: value}), use_on_local=True)


def test_log_level_is_normalised() -> None:
    assert build_context(_local(log_level="DEBUG"), use_on_local=True).log_level == "debug"


def test_ci_context_is_filled_from_environment(tmp_path: Path) -> None:
    context = build_context(
        {"target": "origin/main", "enable_comment_on_issue": True},
        use_on_local=False,
        env=_ci_env(tmp_path),
    )

    assert context.use_on_local is False
    assert context.repo_path == tmp_path
    assert context.repo == "octo/repo"
    assert context.source == "abc123"
    assert context.event_name == "pull_request"
    assert context.pr_number == 12
    assert context.token == "ghs_token"
    assert context.enable_step_summary is True
    assert context.step_summary_path == tmp_path / "summary.md"
    assert context.output_path == tmp_path / "output.txt"


def test_ci_explicit_token_wins(tmp_path: Path) -> None:
    context = build_context({"target": "main", "token": "mine"}, use_on_local=False, env=_ci_env(tmp_path))

    assert context.token == "mine"


def test_ci_step_summary_can_be_disabled(tmp_path: Path) -> None:
    env = _ci_env(tmp_path, step_summary="")
    context = build_context({"target": "main", "enable_step_summary": False}, use_on_local=False, env=env)

    assert context.enable_step_summary is False


def test_ci_step_summary_needs_path(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="GITHUB_STEP_SUMMARY"):
        build_context({"target": "main"}, use_on_local=False, env=_ci_env(tmp_path, step_summary=""))


@pytest.mark.parametrize("name", ["repo_path", "repo", "source", "event_name", "pr_number"])
def test_ci_rejects_local_only_options(tmp_path: Path, name: str) -> None:
    with pytest.raises(ConfigError, match="must not specify"):
        build_context({"target": "main", name: "x"}, use_on_local=False, env=_ci_env(tmp_path))


def test_ci_missing_variables(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="GITHUB_SHA"):
        build_context({"target": "main"}, use_on_local=False, env=_ci_env(tmp_path, sha=""))


def test_tool_options_drop_unset_values() -> None:
    options = build_tool_options(ClangTidyOptions, {"binary": None, "checks": "-*,bugprone-*", "fast_exit": None})

    assert isinstance(options, ClangTidyOptions)
    assert options.binary == "clang-tidy"
    assert options.checks == "-*,bugprone-*"
    assert options.fast_exit is False


@pytest.mark.parametrize(
    "values",
    [{"source_iregex": "(unclosed"}, {"binary": "  "}, {"timeout": 0}, {"unknown": 1}],
)
def test_tool_options_validation(values: dict[str, Any]) -> None:
    with pytest.raises(ConfigError):
        build_tool_options(ClangFormatOptions, values)


def test_running_on_actions() -> None:
    assert running_on_actions({"GITHUB_ACTIONS": "true"}) is True
    assert running_on_actions({"GITHUB_ACTIONS": "false"}) is False
    assert running_on_actions({}) is False


def test_github_env_from_environ() -> None:
    env = GitHubEnv.from_environ(
        {
            "GITHUB_REPOSITORY": "octo/repo",
            "GITHUB_EVENT_NAME": "push",
            "GITHUB_WORKSPACE": "/work",
            "GITHUB_SHA": "deadbeef",
            "GITHUB_REF": "refs/heads/main",
        }
    )

    assert env.repository == "octo/repo"
    assert env.ref == "refs/heads/main"
    assert env.token == ""
    env.check()
    assert env.pull_request_number() is None


def test_pull_request_number_prefers_event_payload(tmp_path: Path) -> None:
    payload = tmp_path / "event.json"
    payload.write_text(json.dumps({"pull_request": {"number": 41}}), encoding="utf-8")
    env = _ci_env(tmp_path, event_path=str(payload))

    assert env.pull_request_number() == 41


def test_pull_request_number_falls_back_to_merge_ref(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    env = _ci_env(tmp_path, event_path=str(tmp_path / "missing.json"))

    assert env.pull_request_number() == 12
    assert "cannot read event payload" in caplog.text


def test_github_env_log_redacts_token(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level("INFO", logger="lintdiff")
    _ci_env(tmp_path).log()

    assert "ghs_token" not in caplog.text
    assert "github env token: ***" in caplog.text


@pytest.mark.parametrize("payload", [{"pull_request": None}, {"pull_request": "7"}, ["not", "an", "object"]])
def test_pull_request_number_ignores_unusable_payload(tmp_path: Path, payload: object) -> None:
    event = tmp_path / "event.json"
    event.write_text(json.dumps(payload), encoding="utf-8")
    env = _ci_env(tmp_path, event_path=str(event), ref="refs/pull/7/merge")

    assert env.pull_request_number() == 7
