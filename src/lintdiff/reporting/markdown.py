# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Markdown bodies for the CI step summary and the pull request issue comment."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Final

from ..aggregate import ToolReport
from ..models import ClangTidyResult, FileResult

TITLE: Final[str] = "# The lintdiff Result"
HINT_PASS: Final[str] = ":rocket: All checks on all file passed."
HINT_FAIL: Final[str] = ":warning: Some files didn't pass the lintdiff checks\n"

COMMENT_MARKER: Final[str] = "<!-- lintdiff -->"
COMMENT_HEADER: Final[str] = "# lintdiff results:\n"
TABLE_HEADER: Final[str] = "| tool name | successed | failed | ignored |\n"
TABLE_SEPARATOR: Final[str] = "|-----------|-----------|--------|---------|\n"


def all_passed(reports: Mapping[str, ToolReport]) -> bool:
    return all(report.is_passed for report in reports.values())


def diagnostic_lines(result: ClangTidyResult) -> list[str]:
    """Return one Markdown bullet per diagnostic of ``result``."""

    return [
        f"- **{diag.file}:{diag.row}:{diag.column}:** {diag.severity.value}: {diag.diagnostic_type}\n"
        f"  > {diag.brief.strip()}\n"
        for diag in result.diagnostics
    ]


def _file_line(result: FileResult) -> str:
    if result.error:
        return f"- {result.file} ({result.error})\n"
    return f"- {result.file}\n"


def tool_details(report: ToolReport) -> str:
    """List every failed file of ``report``, expanding clang-tidy diagnostics."""

    lines: list[str] = []
    for result in report.failed.values():
        if isinstance(result, ClangTidyResult) and result.diagnostics:
            lines.extend(diagnostic_lines(result))
        else:
            lines.append(_file_line(result))
    return "".join(lines)


def tool_section(report: ToolReport) -> str:
    """Collapsible block summarising the failures of one tool."""

    return (
        f"<details>\n<summary>{report.tool} reports:<strong>{len(report.failed)} fails</strong></summary>\n\n"
        f"{tool_details(report)}\n</details>\n"
    )


def brief_result(reports: Mapping[str, ToolReport]) -> str:
    """Return the step-summary body: a title plus details of failing tools."""

    if all_passed(reports):
        return TITLE + "\n" + HINT_PASS + "\n"
    sections = "".join(tool_section(report) for report in reports.values() if not report.is_passed)
    return TITLE + "\n" + HINT_FAIL + sections


def result_table(reports: Mapping[str, ToolReport]) -> str:
    rows: list[str] = []
    for report in reports.values():
        brief = report.brief
        rows.append(f"| {report.tool} | {brief.successed} | {brief.failed} | {brief.ignored} |\n")
    return TABLE_HEADER + TABLE_SEPARATOR + "".join(rows)


def issue_comment(reports: Mapping[str, ToolReport]) -> str:
    """Return the issue comment body, tagged with :data:`COMMENT_MARKER`."""

    details = "".join(
        "<details>"
        f"<summary>click here to see the details of {len(report.failed)} failed files reported by {report.tool}"
        "</summary>\n\n"
        f"{tool_details(report)}\n</details>\n"
        for report in reports.values()
    )
    return f"{COMMENT_MARKER}\n{COMMENT_HEADER}{result_table(reports)}{details}"


__all__ = [
    "COMMENT_MARKER",
    "TITLE",
    "all_passed",
    "brief_result",
    "diagnostic_lines",
    "issue_comment",
    "result_table",
    "tool_details",
    "tool_section",
]
