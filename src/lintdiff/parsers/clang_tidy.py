# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Parse clang-tidy stdout diagnostics and stderr summary statistics."""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Final

from ..logging import trace
from ..models import Diagnostic, Statistic
from ..severity import severity_from_label

LOGGER = logging.getLogger(__name__)

_HEADER_FIELDS: Final[int] = 5
_MIN_TYPE_TAIL: Final[int] = 3
_DIGITS: Final[re.Pattern[str]] = re.compile(r"[0-9]+")


@dataclass(slots=True)
class DiagnosticHeader:
    """Header fields collected while detail lines are still accumulating."""

    file: str
    row: int
    column: int
    severity: str
    brief: str
    diagnostic_type: str
    details: list[str]

    def build(self) -> Diagnostic:
        return Diagnostic(
            file=self.file,
            row=self.row,
            column=self.column,
            severity=self.severity,
            brief=self.brief,
            diagnostic_type=self.diagnostic_type,
            details="\n".join(self.details),
        )


def parse_header(line: str) -> DiagnosticHeader | None:
    """Return the diagnostic header encoded in ``line`` or ``None``.

    A header has exactly five ``:``-separated fields: file, row, column,
    severity and a type tail such as ``" unused variable 'x' [check-name]"``.
    Row and column must be decimal digits, the severity one of ``warning``,
    ``info`` or ``error``, and the tail must end with a bracketed tag. The
    brief is the text before the last ``[`` of the tail.
    """

    parts = line.split(":")
    if len(parts) != _HEADER_FIELDS:
        return None
    file_name, row, column, severity_label, type_tail = parts
    if not _DIGITS.fullmatch(row) or not _DIGITS.fullmatch(column):
        return None
    severity = severity_from_label(severity_label)
    if severity is None:
        return None
    bracket = type_tail.rfind("[")
    if bracket < 0 or len(type_tail) < _MIN_TYPE_TAIL or not type_tail.endswith("]"):
        return None
    return DiagnosticHeader(
        file=file_name,
        row=int(row),
        column=int(column),
        severity=severity.value,
        brief=type_tail[:bracket],
        diagnostic_type=type_tail[bracket:],
        details=[],
    )


def parse_diagnostics(stdout: str) -> list[Diagnostic]:
    """Split clang-tidy stdout into diagnostics.

    Lines that follow a header are attached verbatim to that header's details
    until the next header. Lines before the first header are discarded, so
    output without any diagnostics yields an empty list.
    """

    diagnostics: list[Diagnostic] = []
    pending: DiagnosticHeader | None = None
    for raw_line in stdout.removesuffix("\n").split("\n"):
        line = raw_line.removesuffix("\r")
        trace(LOGGER, "parsing: %s", line)
        header = parse_header(line)
        if header is not None:
            if pending is not None:
                diagnostics.append(pending.build())
            pending = header
            continue
        if pending is not None:
            pending.details.append(line)
    if pending is not None:
        diagnostics.append(pending.build())
    LOGGER.info("parsed clang-tidy stdout, got %d diagnostic(s)", len(diagnostics))
    return diagnostics


StatisticSetter = Callable[[Statistic, re.Match[str]], None]


def _set_warnings_and_errors(stat: Statistic, match: re.Match[str]) -> None:
    stat.warnings = int(match[1])
    stat.errors = int(match[2])


def _set_warnings(stat: Statistic, match: re.Match[str]) -> None:
    stat.warnings = int(match[1])


def _set_errors(stat: Statistic, match: re.Match[str]) -> None:
    stat.errors = int(match[1])


def _set_suppressed(stat: Statistic, match: re.Match[str]) -> None:
    stat.total_suppressed_warnings = int(match[1])
    stat.non_user_code_warnings = int(match[2])


def _set_suppressed_nolint(stat: Statistic, match: re.Match[str]) -> None:
    stat.total_suppressed_warnings = int(match[1])
    stat.non_user_code_warnings = int(match[2])
    stat.no_lint_warnings = int(match[3])


def _set_warnings_as_errors(stat: Statistic, match: re.Match[str]) -> None:
    stat.warnings_treated_as_errors = int(match[1])


# Evaluated in order; the first pattern matching a line wins for that line.
STATISTIC_RULES: Final[Sequence[tuple[re.Pattern[str], StatisticSetter]]] = (
    (re.compile(r"(\d+) warnings? and (\d+) errors? generated\."), _set_warnings_and_errors),
    (re.compile(r"(\d+) warnings? generated\."), _set_warnings),
    (re.compile(r"(\d+) errors? generated\."), _set_errors),
    (re.compile(r"Suppressed (\d+) warnings? \((\d+) in non-user code\)\."), _set_suppressed),
    (
        re.compile(r"Suppressed (\d+) warnings? \((\d+) in non-user code, (\d+) NOLINT\)\."),
        _set_suppressed_nolint,
    ),
    (re.compile(r"(\d+) warnings? treated as errors?"), _set_warnings_as_errors),
)


def parse_statistics(stderr: str) -> Statistic:
    """Collect the summary counters clang-tidy prints on stderr.

    Every summary line is optional; unmatched lines are ignored and a later
    match for the same counter overwrites an earlier one.
    """

    stat = Statistic()
    for raw_line in stderr.split("\n"):
        line = raw_line.strip()
        if not line:
            continue
        for pattern, setter in STATISTIC_RULES:
            match = pattern.fullmatch(line)
            if match:
                setter(stat, match)
                break
    LOGGER.debug(
        "clang-tidy statistics: %d warning(s), %d error(s), %d as errors, %d suppressed "
        "(%d non-user, %d NOLINT)",
        stat.warnings,
        stat.errors,
        stat.warnings_treated_as_errors,
        stat.total_suppressed_warnings,
        stat.non_user_code_warnings,
        stat.no_lint_warnings,
    )
    return stat


__all__ = ["DiagnosticHeader", "STATISTIC_RULES", "parse_diagnostics", "parse_header", "parse_statistics"]
