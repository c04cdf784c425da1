# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Append results to the GitHub Actions step summary and output files."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path

from ..aggregate import ToolReport, total_failed
from ..errors import LintDiffError
from ..tools.clang_format import ClangFormatTool
from ..tools.clang_tidy import ClangTidyTool

LOGGER = logging.getLogger(__name__)


def _append(path: Path, text: str, what: str) -> None:
    try:
        with path.open("a", encoding="utf-8") as handle:
            handle.write(text)
    except OSError as exc:
        raise LintDiffError(f"failed to open {what} file {path} to write: {exc}") from exc


def write_step_summary(path: Path, body: str) -> None:
    """Append ``body`` to the step summary file at ``path``."""

    LOGGER.info("writing step summary to %s", path)
    _append(path, body, "step summary")


def action_outputs(reports: Mapping[str, ToolReport]) -> dict[str, int]:
    """Return the action output values, in the order they are written."""

    def failed(name: str) -> int:
        report = reports.get(name)
        return len(report.failed) if report is not None else 0

    return {
        "total_failed": total_failed(reports),
        "clang_tidy_failed_number": failed(ClangTidyTool.name),
        "clang_format_failed_number": failed(ClangFormatTool.name),
    }


def write_action_output(path: Path, reports: Mapping[str, ToolReport]) -> None:
    """Append ``key=value`` lines for every action output to ``path``."""

    lines = "".join(f"{key}={value}\n" for key, value in action_outputs(reports).items())
    LOGGER.info("writing action outputs to %s", path)
    _append(path, lines, "action output")


__all__ = ["action_outputs", "write_action_output", "write_step_summary"]
