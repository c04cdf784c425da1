# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Core data models shared across the lintdiff package."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .severity import Severity


class Diagnostic(BaseModel):
    """One clang-tidy finding: its header line plus any free-text details."""

    model_config = ConfigDict(frozen=True)

    file: str
    row: int = Field(ge=0)
    column: int = Field(ge=0)
    severity: Severity
    brief: str
    diagnostic_type: str
    details: str = ""

    @property
    def check_name(self) -> str:
        """Return the diagnostic tag without its surrounding brackets."""

        return self.diagnostic_type.strip().removeprefix("[").removesuffix("]")

    @property
    def location(self) -> str:
        return f"{self.file}:{self.row}:{self.column}"


class Statistic(BaseModel):
    """Summary counters reported on clang-tidy's stderr."""

    model_config = ConfigDict(validate_assignment=True)

    warnings: int = 0
    errors: int = 0
    warnings_treated_as_errors: int = 0
    total_suppressed_warnings: int = 0
    non_user_code_warnings: int = 0
    no_lint_warnings: int = 0


class Replacement(BaseModel):
    """A single byte-range edit proposed by clang-format."""

    model_config = ConfigDict(frozen=True)

    offset: int = Field(ge=0)
    length: int = Field(ge=0)
    data: str = ""


class FileResult(BaseModel):
    """Outcome of running one tool against one file."""

    model_config = ConfigDict(frozen=True)

    file: str
    passed: bool
    stdout: str = ""
    stderr: str = ""
    error: str | None = None


class ClangTidyResult(FileResult):
    """clang-tidy outcome with parsed diagnostics and statistics."""

    diagnostics: tuple[Diagnostic, ...] = Field(default_factory=tuple)
    statistic: Statistic = Field(default_factory=Statistic)


class ClangFormatResult(FileResult):
    """clang-format outcome with the replacements it proposed."""

    replacements: tuple[Replacement, ...] = Field(default_factory=tuple)
    formatted_source: str | None = None


class ReviewComment(BaseModel):
    """Inline comment anchored to a line of a pull request diff.

    ``position`` anchors by diff-relative offset; ``line`` plus ``side``
    anchors by absolute line in the newer API form. Exactly one is set.
    ``start_line`` widens a line anchor to a range of rows.
    """

    model_config = ConfigDict(frozen=True)

    path: str
    body: str
    position: int | None = Field(default=None, ge=1)
    line: int | None = Field(default=None, ge=1)
    side: Literal["LEFT", "RIGHT"] | None = None
    start_line: int | None = Field(default=None, ge=1)

    @model_validator(mode="after")
    def _check_anchor(self) -> ReviewComment:
        if (self.position is None) == (self.line is None):
            raise ValueError("review comment needs exactly one of position or line")
        if self.line is not None and self.side is None:
            raise ValueError("line-anchored review comments need a side")
        if self.start_line is not None and (self.line is None or self.start_line >= self.line):
            raise ValueError("start_line must precede line")
        return self

    def payload(self) -> dict[str, object]:
        """Return the JSON object submitted to the review API."""

        if self.position is not None:
            return {"path": self.path, "position": self.position, "body": self.body}
        payload: dict[str, object] = {"path": self.path, "line": self.line, "side": self.side, "body": self.body}
        if self.start_line is not None:
            payload.update(start_line=self.start_line, start_side=self.side)
        return payload


__all__ = [
    "ClangFormatResult",
    "ClangTidyResult",
    "Diagnostic",
    "FileResult",
    "Replacement",
    "ReviewComment",
    "Statistic",
]
