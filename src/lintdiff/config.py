# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Configuration models and option validation for lintdiff runs."""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any, Final, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import ConfigError
from .github.env import PULL_REQUEST_EVENTS, SUPPORTED_EVENTS, GitHubEnv
from .logging import LOG_LEVELS

DEFAULT_SOURCE_IREGEX: Final[str] = r".*\.(cpp|cc|c\+\+|cxx|c|cl|h|hpp|hh|hxx|m|mm|inc)"
DEFAULT_CLANG_TIDY_BINARY: Final[str] = "clang-tidy"
DEFAULT_CLANG_FORMAT_BINARY: Final[str] = "clang-format"


def _check_iregex(value: str) -> str:
    try:
        re.compile(value, re.IGNORECASE)
    except re.error as exc:
        raise ValueError(f"invalid source regular expression {value!r}: {exc}") from exc
    return value


class ToolOptions(BaseModel):
    """Options shared by every supported tool."""

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    enabled: bool = True
    binary: str
    fast_exit: bool = False
    source_iregex: str = DEFAULT_SOURCE_IREGEX
    timeout: float | None = Field(default=None, gt=0)

    @field_validator("source_iregex")
    @classmethod
    def _validate_iregex(cls, value: str) -> str:
        return _check_iregex(value)

    @field_validator("binary")
    @classmethod
    def _validate_binary(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("tool binary must not be empty")
        return value


class ClangTidyOptions(ToolOptions):
    """clang-tidy invocation options, emitted in declaration order."""

    binary: str = DEFAULT_CLANG_TIDY_BINARY
    database: str = ""
    checks: str = ""
    allow_no_checks: bool = False
    config: str = ""
    config_file: str = ""
    enable_check_profile: bool = False
    header_filter: str = ""
    line_filter: str = ""


class ClangFormatOptions(ToolOptions):
    """clang-format invocation options."""

    binary: str = DEFAULT_CLANG_FORMAT_BINARY
    style: str = ""


ReviewAnchor = Literal["position", "line"]


class LintContext(BaseModel):
    """Everything a lintdiff run needs, after validation."""

    model_config = ConfigDict(extra="forbid")

    use_on_local: bool = True
    log_level: str = "info"
    repo_path: Path = Field(default_factory=Path)
    repo: str = ""
    token: str = ""
    target: str
    source: str = ""
    event_name: str = ""
    pr_number: int | None = Field(default=None, ge=1)
    enable_step_summary: bool = False
    enable_comment_on_issue: bool = False
    enable_pull_request_review: bool = False
    jobs: int = Field(default=1, ge=1)
    context_lines: int = Field(default=3, ge=0)
    review_anchor: ReviewAnchor = "position"
    strict_hunk_bounds: bool = False
    symmetric_exit: bool = False
    step_summary_path: Path | None = None
    output_path: Path | None = None
    clang_tidy: ClangTidyOptions = Field(default_factory=ClangTidyOptions)
    clang_format: ClangFormatOptions = Field(default_factory=ClangFormatOptions)

    @field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, value: str) -> str:
        lowered = value.lower()
        if lowered not in LOG_LEVELS:
            raise ValueError(f"unsupported log level '{value}', expected one of {', '.join(LOG_LEVELS)}")
        return lowered

    @field_validator("target")
    @classmethod
    def _validate_target(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("target revision must not be empty")
        return value

    @property
    def is_pull_request(self) -> bool:
        return self.event_name in PULL_REQUEST_EVENTS

    @property
    def wants_formatted_source(self) -> bool:
        """Return ``True`` when clang-format review comments will be built."""

        return self.enable_pull_request_review and self.clang_format.enabled


def _flag(name: str) -> str:
    return "--" + name.replace("_", "-")


def must_specify(condition: str, provided: Mapping[str, Any], names: Iterable[str]) -> None:
    """Raise :class:`ConfigError` unless every option in ``names`` was given."""

    missing = [name for name in names if provided.get(name) is None]
    if missing:
        flags = ", ".join(_flag(name) for name in missing)
        raise ConfigError(f"{condition}, you must specify {flags}")


def must_not_specify(condition: str, provided: Mapping[str, Any], names: Iterable[str]) -> None:
    """Raise :class:`ConfigError` when any option in ``names`` was given."""

    present = [name for name in names if provided.get(name) is not None]
    if present:
        flags = ", ".join(_flag(name) for name in present)
        raise ConfigError(f"{condition}, you must not specify {flags}")


def _check_provided(provided: Mapping[str, Any], *, use_on_local: bool) -> None:
    must_specify("always", provided, ["target"])
    if not use_on_local:
        must_not_specify(
            "when running on CI",
            provided,
            ["repo_path", "repo", "source", "event_name", "pr_number"],
        )
        return

    must_specify("when running locally", provided, ["repo_path", "source", "event_name"])
    must_not_specify("when running locally", provided, ["enable_step_summary"])
    if provided.get("enable_comment_on_issue") or provided.get("enable_pull_request_review"):
        must_specify(
            "when enabling issue comments or pull request reviews",
            provided,
            ["token", "repo"],
        )
    event_name = provided["event_name"]
    if event_name not in SUPPORTED_EVENTS:
        raise ConfigError(f"unsupported event name '{event_name}', expected one of {', '.join(SUPPORTED_EVENTS)}")
    if event_name not in PULL_REQUEST_EVENTS:
        must_not_specify(f"when the event is '{event_name}'", provided, ["pr_number"])


def build_context(
    provided: Mapping[str, Any],
    *,
    use_on_local: bool,
    env: GitHubEnv | None = None,
    clang_tidy: ClangTidyOptions | None = None,
    clang_format: ClangFormatOptions | None = None,
) -> LintContext:
    """Validate explicitly passed options and combine them with the environment.

    Args:
        provided: Options the user passed explicitly, keyed by field name.
            Options that were not passed must be absent or ``None``.
        use_on_local: ``False`` when running inside GitHub Actions.
        env: Runner environment, consulted only on CI.
        clang_tidy: clang-tidy options.
        clang_format: clang-format options.

    Returns:
        LintContext: The validated run configuration.

    Raises:
        ConfigError: If an option combination is invalid.
    """

    _check_provided(provided, use_on_local=use_on_local)
    values: dict[str, Any] = {key: value for key, value in provided.items() if value is not None}
    values["use_on_local"] = use_on_local
    if not use_on_local:
        github = env or GitHubEnv.from_environ()
        github.check()
        values.update(
            repo_path=Path(github.workspace),
            repo=github.repository,
            event_name=github.event_name,
            source=github.sha,
            pr_number=github.pull_request_number(),
        )
        values.setdefault("token", github.token)
        values.setdefault("enable_step_summary", True)
        if github.step_summary:
            values.setdefault("step_summary_path", Path(github.step_summary))
        if github.output:
            values.setdefault("output_path", Path(github.output))
    if clang_tidy is not None:
        values["clang_tidy"] = clang_tidy
    if clang_format is not None:
        values["clang_format"] = clang_format

    try:
        context = LintContext(**values)
    except ValidationError as exc:
        raise ConfigError(str(exc)) from exc
    check_context(context)
    return context


def check_context(context: LintContext) -> None:
    """Raise :class:`ConfigError` for combinations only visible after merging."""

    if context.enable_comment_on_issue or context.enable_pull_request_review:
        if not context.is_pull_request:
            raise ConfigError("issue comments and pull request reviews need a pull request event")
        if context.pr_number is None:
            raise ConfigError("issue comments and pull request reviews need a pull request number")
        if not context.token or not context.repo:
            raise ConfigError("issue comments and pull request reviews need a token and a repository")
    if context.enable_step_summary and context.step_summary_path is None:
        raise ConfigError("step summary is enabled but GITHUB_STEP_SUMMARY is not set")


def build_tool_options(
    model: type[ToolOptions],
    values: Mapping[str, Any],
) -> ToolOptions:
    """Build tool options from a mapping, dropping unset (``None``) entries."""

    try:
        return model(**{key: value for key, value in values.items() if value is not None})
    except ValidationError as exc:
        raise ConfigError(str(exc)) from exc


__all__ = [
    "DEFAULT_SOURCE_IREGEX",
    "ClangFormatOptions",
    "ClangTidyOptions",
    "LintContext",
    "ReviewAnchor",
    "ToolOptions",
    "build_context",
    "build_tool_options",
    "check_context",
    "must_not_specify",
    "must_specify",
]
