# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""End-to-end lint run: diff, lint changed files, report and publish."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from .aggregate import ToolReport, aggregate, exit_status
from .config import LintContext
from .errors import ConfigError
from .git import Diff, GitBackend, Repository, backend_session, open_repository
from .git.repository import CommitHandle
from .github.client import GitHubClient, Publisher, add_or_update_issue_comment
from .models import ReviewComment
from .process import SubprocessToolRunner, ToolRunner
from .reporting.console import render_changed_files, render_results
from .reporting.markdown import COMMENT_MARKER, brief_result, issue_comment
from .reporting.outputs import write_action_output, write_step_summary
from .reporting.review import review_comments, review_payload
from .tools.base import LintTool
from .tools.clang_format import ClangFormatTool
from .tools.clang_tidy import ClangTidyTool

LOGGER = logging.getLogger(__name__)

RunnerFactory = Callable[[float | None], ToolRunner]


@dataclass(slots=True)
class RunOutcome:
    """Everything produced by :func:`run`."""

    target: str
    source: str
    changed_files: tuple[str, ...]
    diff: Diff
    reports: dict[str, ToolReport]
    exit_code: int
    comments: list[ReviewComment] = field(default_factory=list)


def _default_runner_factory(timeout: float | None) -> ToolRunner:
    return SubprocessToolRunner(timeout=timeout)


def build_tools(context: LintContext, runner_factory: RunnerFactory = _default_runner_factory) -> list[LintTool]:
    """Return tool adapters in run order: clang-format, then clang-tidy."""

    repo_path = context.repo_path
    return [
        ClangFormatTool(
            context.clang_format,
            runner_factory(context.clang_format.timeout),
            repo_path=repo_path,
            formatted_source=context.wants_formatted_source,
        ),
        ClangTidyTool(
            context.clang_tidy,
            runner_factory(context.clang_tidy.timeout),
            repo_path=repo_path,
        ),
    ]


def _source_reader(repo_path: Path, repository: Repository, source: CommitHandle) -> Callable[[str], bytes]:
    def read(path: str) -> bytes:
        candidate = repo_path / path
        if candidate.is_file():
            return candidate.read_bytes()
        LOGGER.debug("%s missing from the working tree, reading it from %s", path, source.sha[:12])
        return repository.read_file(source, path)

    return read


def publish(
    context: LintContext,
    outcome: RunOutcome,
    publisher_factory: Callable[[LintContext], Publisher] | None = None,
) -> None:
    """Write summaries and outputs, then post comments enabled in ``context``."""

    reports = outcome.reports
    if context.enable_step_summary and context.step_summary_path is not None:
        write_step_summary(context.step_summary_path, brief_result(reports))
    if not context.use_on_local and context.output_path is not None:
        write_action_output(context.output_path, reports)

    if not (context.enable_comment_on_issue or context.enable_pull_request_review):
        return
    number = context.pr_number
    if number is None:
        raise ConfigError("issue comments and pull request reviews need a pull request number")
    factory = publisher_factory or _default_publisher
    publisher = factory(context)
    try:
        if context.enable_comment_on_issue:
            add_or_update_issue_comment(publisher, context.repo, number, issue_comment(reports), marker=COMMENT_MARKER)
        if context.enable_pull_request_review:
            publisher.post_review(context.repo, number, review_payload(outcome.comments))
    finally:
        close = getattr(publisher, "close", None)
        if callable(close):
            close()


def _default_publisher(context: LintContext) -> Publisher:
    return GitHubClient(context.token)


def run(
    context: LintContext,
    *,
    runner_factory: RunnerFactory = _default_runner_factory,
    publisher_factory: Callable[[LintContext], Publisher] | None = None,
    backend: GitBackend | None = None,
    color: bool = False,
) -> RunOutcome:
    """Lint the files changed between ``context.target`` and ``context.source``.

    Args:
        context: Validated run configuration.
        runner_factory: Builds a tool runner for a per-invocation timeout.
        publisher_factory: Builds the publisher used for comments and reviews.
        backend: Git backend; the process-wide one by default.
        color: Render console tables with colour.

    Returns:
        RunOutcome: Reports, review comments and the process exit code.

    Raises:
        RepositoryError: If the repository or a revision cannot be read.
        ToolInvocationError: If a tool binary cannot be started.
        PublisherError: If the hosting platform rejects a request.
    """

    with backend_session(backend) as session, open_repository(context.repo_path, backend=session) as repository:
        target = repository.resolve(context.target)
        source = repository.resolve(context.source or "HEAD")
        diff = repository.diff(target, source, context_lines=context.context_lines)
        changed = diff.changed_files()
        render_changed_files(changed, color=color)

        tools = build_tools(context, runner_factory)
        reports = aggregate(tools, changed, jobs=context.jobs)

        comments: list[ReviewComment] = []
        if context.enable_pull_request_review:
            comments = review_comments(
                reports,
                diff,
                _source_reader(context.repo_path, repository, source),
                anchor=context.review_anchor,
                strict=context.strict_hunk_bounds,
                repo_path=context.repo_path,
            )

    outcome = RunOutcome(
        target=target.sha,
        source=source.sha,
        changed_files=changed,
        diff=diff,
        reports=reports,
        exit_code=exit_status(reports, symmetric=context.symmetric_exit),
        comments=comments,
    )
    render_results(reports, color=color)
    publish(context, outcome, publisher_factory)
    return outcome


__all__ = ["RunOutcome", "build_tools", "publish", "run"]
