# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""clang-format adapter."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import ClassVar

from ..config import ClangFormatOptions
from ..errors import MalformedOutput
from ..models import ClangFormatResult, Replacement
from ..parsers.clang_format import apply_replacements, parse_replacements
from ..process import ToolRunner
from .base import LintTool

LOGGER = logging.getLogger(__name__)

REPLACEMENTS_XML_FLAG = "--output-replacements-xml"


class ClangFormatTool(LintTool[ClangFormatOptions, ClangFormatResult]):
    """Run clang-format in replacement mode, optionally capturing formatted source."""

    name: ClassVar[str] = "clang-format"
    result_type: ClassVar[type[ClangFormatResult]] = ClangFormatResult

    def __init__(
        self,
        options: ClangFormatOptions,
        runner: ToolRunner,
        *,
        repo_path: Path | None = None,
        formatted_source: bool = False,
    ) -> None:
        super().__init__(options, runner, repo_path=repo_path)
        self.formatted_source = formatted_source

    def _style_args(self) -> list[str]:
        return [f"--style={self.options.style}"] if self.options.style else []

    def arguments(self, path: str) -> list[str]:
        return [*self._style_args(), REPLACEMENTS_XML_FLAG, path]

    def source_arguments(self, path: str) -> list[str]:
        """Arguments requesting the formatted file on stdout."""

        return [*self._style_args(), path]

    def _formatted_source(self, path: str, replacements: list[Replacement]) -> str | None:
        execution = self.execute(self.source_arguments(path))
        if execution.ok:
            return execution.stdout
        LOGGER.warning(
            "clang-format could not print %s (exit code %d), applying replacements instead",
            path,
            execution.exit_code,
        )
        source = (self.repo_path or Path()) / path
        try:
            original = source.read_bytes()
        except OSError as exc:
            LOGGER.warning("cannot read %s: %s", source, exc)
            return None
        try:
            return apply_replacements(original, replacements).decode("utf-8", errors="replace")
        except ValueError as exc:
            LOGGER.warning("cannot apply clang-format replacements to %s: %s", path, exc)
            return None

    def run_file(self, path: str) -> ClangFormatResult:
        execution = self.execute(self.arguments(path))
        if not execution.ok:
            return ClangFormatResult(
                file=path,
                passed=False,
                stdout=execution.stdout,
                stderr=execution.stderr,
                error=f"exit code {execution.exit_code}",
            )
        try:
            replacements = parse_replacements(execution.stdout)
        except MalformedOutput as exc:
            LOGGER.error("cannot parse clang-format output for %s: %s", path, exc)
            return ClangFormatResult(
                file=path,
                passed=False,
                stdout=execution.stdout,
                stderr=execution.stderr,
                error=str(exc),
            )

        formatted: str | None = None
        if replacements and self.formatted_source:
            formatted = self._formatted_source(path, replacements)
        return ClangFormatResult(
            file=path,
            passed=not replacements,
            stdout=execution.stdout,
            stderr=execution.stderr,
            replacements=tuple(replacements),
            formatted_source=formatted,
        )


__all__ = ["REPLACEMENTS_XML_FLAG", "ClangFormatTool"]
