# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""clang-tidy adapter."""

from __future__ import annotations

import logging
from typing import ClassVar

from ..config import ClangTidyOptions
from ..models import ClangTidyResult
from ..parsers.clang_tidy import parse_diagnostics, parse_statistics
from .base import LintTool

LOGGER = logging.getLogger(__name__)


class ClangTidyTool(LintTool[ClangTidyOptions, ClangTidyResult]):
    """Run clang-tidy and collect diagnostics plus summary statistics."""

    name: ClassVar[str] = "clang-tidy"
    result_type: ClassVar[type[ClangTidyResult]] = ClangTidyResult

    def arguments(self, path: str) -> list[str]:
        opts = self.options
        args: list[str] = []
        if opts.database:
            args.append(f"-p={opts.database}")
        if opts.checks:
            args.append(f"-checks={opts.checks}")
        if opts.allow_no_checks:
            args.append("--allow-no-checks")
        if opts.config:
            args.append(f"--config={opts.config}")
        if opts.config_file:
            args.append(f"--config-file={opts.config_file}")
        if opts.enable_check_profile:
            args.append("--enable-check-profile")
        if opts.header_filter:
            args.append(f"--header-filter={opts.header_filter}")
        if opts.line_filter:
            args.append(f"--line-filter={opts.line_filter}")
        args.append(path)
        return args

    def run_file(self, path: str) -> ClangTidyResult:
        execution = self.execute(self.arguments(path))
        diagnostics = parse_diagnostics(execution.stdout)
        statistic = parse_statistics(execution.stderr)
        return ClangTidyResult(
            file=path,
            passed=execution.ok,
            stdout=execution.stdout,
            stderr=execution.stderr,
            diagnostics=tuple(diagnostics),
            statistic=statistic,
        )


__all__ = ["ClangTidyTool"]
