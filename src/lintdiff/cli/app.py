# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Command-line entry point for lintdiff."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import typer

from .. import __version__
from ..config import ClangFormatOptions, ClangTidyOptions, build_context, build_tool_options
from ..console import detect_tty
from ..errors import ConfigError, LintDiffError
from ..github.env import GitHubEnv, running_on_actions
from ..logging import configure_logging, fail, ok, warn
from ..pipeline import run

app = typer.Typer(
    name="lintdiff",
    help="Run clang-format and clang-tidy on the files changed between two commits.",
    add_completion=False,
    no_args_is_help=False,
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit(code=0)


@app.command()
def lint(
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        callback=_version_callback,
        is_eager=True,
        help="Print the version and exit.",
    ),
    log_level: str = typer.Option("info", "--log-level", help="One of trace, debug, info, error."),
    repo_path: Path | None = typer.Option(None, "--repo-path", help="Repository to lint (local runs only)."),
    repo: str | None = typer.Option(None, "--repo", help="Repository name as owner/name (local runs only)."),
    token: str | None = typer.Option(None, "--token", help="Token used for comments and reviews."),
    target: str | None = typer.Option(None, "--target", help="Base revision the changes are compared against."),
    source: str | None = typer.Option(None, "--source", help="Head revision holding the changes (local runs only)."),
    event_name: str | None = typer.Option(
        None,
        "--event-name",
        help="push, pull_request or pull_request_target (local runs only).",
    ),
    pr_number: int | None = typer.Option(None, "--pr-number", help="Pull request number (local runs only)."),
    enable_step_summary: bool | None = typer.Option(
        None,
        "--enable-step-summary/--disable-step-summary",
        help="Append the result to the CI step summary (CI only, on by default).",
    ),
    enable_comment_on_issue: bool | None = typer.Option(
        None,
        "--enable-comment-on-issue",
        help="Add or update a result comment on the pull request.",
    ),
    enable_pull_request_review: bool | None = typer.Option(
        None,
        "--enable-pull-request-review",
        help="Post inline review comments for findings inside the diff.",
    ),
    jobs: int | None = typer.Option(None, "--jobs", "-j", min=1, help="Number of concurrent tool processes."),
    context_lines: int | None = typer.Option(None, "--context-lines", min=0, help="Diff context lines."),
    review_anchor: str | None = typer.Option(None, "--review-anchor", help="Anchor review comments by position or line."),
    strict_hunk_bounds: bool | None = typer.Option(
        None,
        "--strict-hunk-bounds",
        help="Treat the line just past a hunk as outside the diff.",
    ),
    symmetric_exit: bool | None = typer.Option(
        None,
        "--symmetric-exit",
        help="Let clang-format failures affect the exit status too.",
    ),
    enable_clang_tidy: bool | None = typer.Option(None, "--enable-clang-tidy/--disable-clang-tidy"),
    clang_tidy_binary: str | None = typer.Option(None, "--clang-tidy-binary"),
    clang_tidy_fast_exit: bool | None = typer.Option(None, "--clang-tidy-fast-exit"),
    clang_tidy_iregex: str | None = typer.Option(None, "--clang-tidy-iregex", help="Files to check, case-insensitive."),
    clang_tidy_database: str | None = typer.Option(None, "--clang-tidy-database", help="Compilation database (-p)."),
    clang_tidy_checks: str | None = typer.Option(None, "--clang-tidy-checks"),
    clang_tidy_allow_no_checks: bool | None = typer.Option(None, "--clang-tidy-allow-no-checks"),
    clang_tidy_config: str | None = typer.Option(None, "--clang-tidy-config"),
    clang_tidy_config_file: str | None = typer.Option(None, "--clang-tidy-config-file"),
    clang_tidy_enable_check_profile: bool | None = typer.Option(None, "--clang-tidy-enable-check-profile"),
    clang_tidy_header_filter: str | None = typer.Option(None, "--clang-tidy-header-filter"),
    clang_tidy_line_filter: str | None = typer.Option(None, "--clang-tidy-line-filter"),
    clang_tidy_timeout: float | None = typer.Option(None, "--clang-tidy-timeout", help="Seconds per file."),
    enable_clang_format: bool | None = typer.Option(None, "--enable-clang-format/--disable-clang-format"),
    clang_format_binary: str | None = typer.Option(None, "--clang-format-binary"),
    clang_format_fast_exit: bool | None = typer.Option(None, "--clang-format-fast-exit"),
    clang_format_iregex: str | None = typer.Option(None, "--clang-format-iregex", help="Files to check, case-insensitive."),
    clang_format_style: str | None = typer.Option(None, "--clang-format-style"),
    clang_format_timeout: float | None = typer.Option(None, "--clang-format-timeout", help="Seconds per file."),
) -> None:
    """Lint the changed files and report the results."""

    del version
    try:
        configure_logging(log_level)
        clang_tidy = build_tool_options(
            ClangTidyOptions,
            {
                "enabled": enable_clang_tidy,
                "binary": clang_tidy_binary,
                "fast_exit": clang_tidy_fast_exit,
                "source_iregex": clang_tidy_iregex,
                "database": clang_tidy_database,
                "checks": clang_tidy_checks,
                "allow_no_checks": clang_tidy_allow_no_checks,
                "config": clang_tidy_config,
                "config_file": clang_tidy_config_file,
                "enable_check_profile": clang_tidy_enable_check_profile,
                "header_filter": clang_tidy_header_filter,
                "line_filter": clang_tidy_line_filter,
                "timeout": clang_tidy_timeout,
            },
        )
        clang_format = build_tool_options(
            ClangFormatOptions,
            {
                "enabled": enable_clang_format,
                "binary": clang_format_binary,
                "fast_exit": clang_format_fast_exit,
                "source_iregex": clang_format_iregex,
                "style": clang_format_style,
                "timeout": clang_format_timeout,
            },
        )
        provided: dict[str, Any] = {
            "log_level": log_level,
            "repo_path": repo_path,
            "repo": repo,
            "token": token,
            "target": target,
            "source": source,
            "event_name": event_name,
            "pr_number": pr_number,
            "enable_step_summary": enable_step_summary,
            "enable_comment_on_issue": enable_comment_on_issue,
            "enable_pull_request_review": enable_pull_request_review,
            "jobs": jobs,
            "context_lines": context_lines,
            "review_anchor": review_anchor,
            "strict_hunk_bounds": strict_hunk_bounds,
            "symmetric_exit": symmetric_exit,
        }
        use_on_local = not running_on_actions()
        env = None
        if not use_on_local:
            env = GitHubEnv.from_environ()
            env.log()
        context = build_context(
            provided,
            use_on_local=use_on_local,
            env=env,
            clang_tidy=clang_tidy,
            clang_format=clang_format,
        )
    except ConfigError as exc:
        raise typer.BadParameter(str(exc)) from exc

    color = detect_tty()
    try:
        outcome = run(context, color=color)
    except LintDiffError as exc:
        fail(str(exc), use_emoji=True, use_color=color)
        raise typer.Exit(code=1) from exc

    if outcome.exit_code == 0:
        ok("all checks passed", use_emoji=True, use_color=color)
    else:
        warn("some files did not pass the checks", use_emoji=True, use_color=color)
    raise typer.Exit(code=outcome.exit_code)


def main() -> None:
    """Console-script entry point."""

    app()


__all__ = ["app", "lint", "main"]
