# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Build inline pull request review comments from failed tool results."""

from __future__ import annotations

import difflib
import logging
import os
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Final

from ..aggregate import ToolReport
from ..git.diff import Diff
from ..git.models import Hunk
from ..logging import trace
from ..models import ClangFormatResult, ClangTidyResult, Diagnostic, ReviewComment
from ..parsers.clang_format import line_lengths, offset_to_position
from ..position import locate_hunk

LOGGER = logging.getLogger(__name__)

REVIEW_BODY: Final[str] = "lintdiff suggestion"
REVIEW_EVENT: Final[str] = "COMMENT"

SourceReader = Callable[[str], bytes]


def _normalise(path: str) -> str:
    return os.path.normpath(path).replace(os.sep, "/")


def diagnostic_targets(diag: Diagnostic, path: str, repo_path: Path | None = None) -> bool:
    """Return ``True`` when ``diag`` points into the changed file ``path``.

    clang-tidy may report absolute paths and findings in included headers;
    only findings in ``path`` itself can be anchored to its diff.
    """

    if os.path.isabs(diag.file):
        if repo_path is None:
            return _normalise(diag.file).endswith("/" + _normalise(path))
        return _normalise(diag.file) == _normalise(str(repo_path.resolve() / path))
    return _normalise(diag.file) == _normalise(path)


def _anchor(
    path: str,
    body: str,
    hunks: tuple[Hunk, ...],
    row: int,
    *,
    anchor: str,
    strict: bool,
) -> ReviewComment | None:
    match = locate_hunk(hunks, row, strict=strict)
    if match is None:
        trace(LOGGER, "%s:%d is outside the diff, dropping comment", path, row)
        return None
    if anchor == "line":
        return ReviewComment(path=path, body=body, line=row, side="RIGHT")
    return ReviewComment(path=path, body=body, position=match.position)


def clang_tidy_comments(
    report: ToolReport,
    diff: Diff,
    *,
    anchor: str = "position",
    strict: bool = False,
    repo_path: Path | None = None,
) -> list[ReviewComment]:
    """Return one comment per diagnostic of a failed file that lies in the diff."""

    comments: list[ReviewComment] = []
    for path, result in report.failed.items():
        if not isinstance(result, ClangTidyResult):
            continue
        hunks = diff.hunks(path)
        for diag in result.diagnostics:
            if not diagnostic_targets(diag, path, repo_path):
                continue
            body = (diag.brief + diag.diagnostic_type).strip()
            comment = _anchor(path, body, hunks, diag.row, anchor=anchor, strict=strict)
            if comment is not None:
                comments.append(comment)
    return comments


def _replacement_body(row: int, column: int, length: int, data: str) -> str:
    return (
        f"clang-format: replace {length} byte(s) at {row}:{column} with:\n"
        f"```\n{data}\n```"
    )


@dataclass(frozen=True, slots=True)
class FormatChange:
    """Rows ``start``..``end`` (1-based, inclusive) and the text clang-format wants there."""

    start: int
    end: int
    lines: tuple[str, ...]

    @property
    def single_row(self) -> bool:
        return self.start == self.end


def _text_lines(text: str) -> list[str]:
    return [line.removesuffix("\r") for line in text.removesuffix("\n").split("\n")] if text else []


def formatting_changes(original: str, formatted: str) -> list[FormatChange]:
    """Return the row ranges of ``original`` that differ from ``formatted``.

    Inserted lines have no row of their own, so they are attached to the
    neighbouring original row, which the change then repeats.
    """

    before = _text_lines(original)
    after = _text_lines(formatted)
    changes: list[FormatChange] = []
    matcher = difflib.SequenceMatcher(a=before, b=after, autojunk=False)
    for tag, i1, i2, j1, j2 in matcher.get_opcodes():
        if tag == "equal":
            continue
        lines = tuple(after[j1:j2])
        if i1 < i2:
            changes.append(FormatChange(start=i1 + 1, end=i2, lines=lines))
        elif i1 > 0:
            changes.append(FormatChange(start=i1, end=i1, lines=(before[i1 - 1], *lines)))
        elif before:
            changes.append(FormatChange(start=1, end=1, lines=(*lines, before[0])))
    return changes


def _suggestion_body(lines: Sequence[str]) -> str:
    content = "".join(f"{line}\n" for line in lines)
    return f"clang-format suggestion:\n```suggestion\n{content}```"


def _range_body(change: FormatChange) -> str:
    content = "".join(f"{line}\n" for line in change.lines)
    return f"clang-format: rows {change.start}-{change.end} should read:\n```\n{content}```"


def _change_comment(
    path: str,
    change: FormatChange,
    hunks: tuple[Hunk, ...],
    *,
    anchor: str,
    strict: bool,
) -> ReviewComment | None:
    first = locate_hunk(hunks, change.start, strict=strict)
    last = first if change.single_row else locate_hunk(hunks, change.end, strict=strict)
    if first is None or last is None or first.index != last.index:
        trace(LOGGER, "%s:%d-%d is not inside one hunk, dropping suggestion", path, change.start, change.end)
        return None
    body = _suggestion_body(change.lines)
    if anchor == "line":
        start_line = None if change.single_row else change.start
        return ReviewComment(path=path, body=body, line=change.end, side="RIGHT", start_line=start_line)
    if change.single_row:
        return ReviewComment(path=path, body=body, position=first.position)
    # a position anchor covers one row; quote the range instead
    return ReviewComment(path=path, body=_range_body(change), position=first.position)


def _suggestion_comments(
    path: str,
    result: ClangFormatResult,
    source: bytes,
    hunks: tuple[Hunk, ...],
    *,
    anchor: str,
    strict: bool,
) -> list[ReviewComment]:
    original = source.decode("utf-8", errors="replace")
    comments: list[ReviewComment] = []
    for change in formatting_changes(original, result.formatted_source or ""):
        comment = _change_comment(path, change, hunks, anchor=anchor, strict=strict)
        if comment is not None:
            comments.append(comment)
    return comments


def _replacement_comments(
    path: str,
    result: ClangFormatResult,
    source: bytes,
    hunks: tuple[Hunk, ...],
    *,
    anchor: str,
    strict: bool,
) -> list[ReviewComment]:
    comments: list[ReviewComment] = []
    lengths = line_lengths(source)
    for replacement in result.replacements:
        location = offset_to_position(lengths, replacement.offset)
        if location is None:
            LOGGER.debug("replacement offset %d is outside %s", replacement.offset, path)
            continue
        row, column = location
        body = _replacement_body(row, column, replacement.length, replacement.data)
        comment = _anchor(path, body, hunks, row, anchor=anchor, strict=strict)
        if comment is not None:
            comments.append(comment)
    return comments


def clang_format_comments(
    report: ToolReport,
    diff: Diff,
    read_source: SourceReader,
    *,
    anchor: str = "position",
    strict: bool = False,
) -> list[ReviewComment]:
    """Return review comments for the formatting problems of failed files.

    When clang-format printed the formatted file, each differing row range
    inside the diff becomes a suggestion the author can apply. Otherwise each
    replacement inside the diff is described by its offset and new text.

    Args:
        report: clang-format report.
        diff: Diff the hunks are taken from.
        read_source: Returns the bytes clang-format saw for a path.
        anchor: ``"position"`` or ``"line"``.
        strict: Use the half-open hunk test.
    """

    comments: list[ReviewComment] = []
    for path, result in report.failed.items():
        if not isinstance(result, ClangFormatResult) or not result.replacements:
            continue
        hunks = diff.hunks(path)
        if not hunks:
            continue
        source = read_source(path)
        build = _replacement_comments if result.formatted_source is None else _suggestion_comments
        comments.extend(build(path, result, source, hunks, anchor=anchor, strict=strict))
    return comments


def review_comments(
    reports: Mapping[str, ToolReport],
    diff: Diff,
    read_source: SourceReader,
    *,
    anchor: str = "position",
    strict: bool = False,
    repo_path: Path | None = None,
) -> list[ReviewComment]:
    """Collect review comments for every tool report."""

    comments: list[ReviewComment] = []
    for report in reports.values():
        comments.extend(clang_tidy_comments(report, diff, anchor=anchor, strict=strict, repo_path=repo_path))
        comments.extend(clang_format_comments(report, diff, read_source, anchor=anchor, strict=strict))
    LOGGER.info("built %d review comment(s)", len(comments))
    return comments


def review_payload(comments: Iterable[ReviewComment], body: str = REVIEW_BODY) -> dict[str, Any]:
    """Return the JSON object submitted to the review endpoint."""

    return {"body": body, "event": REVIEW_EVENT, "comments": [comment.payload() for comment in comments]}


__all__ = [
    "REVIEW_BODY",
    "REVIEW_EVENT",
    "FormatChange",
    "clang_format_comments",
    "clang_tidy_comments",
    "diagnostic_targets",
    "formatting_changes",
    "review_comments",
    "review_payload",
]
