# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Run tools over the changed files and partition the results."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from dataclasses import dataclass, field

from .models import FileResult
from .tools.base import LintTool
from .tools.clang_tidy import ClangTidyTool

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ToolBrief:
    """Pass/fail counters for one tool."""

    is_passed: bool
    successed: int
    failed: int
    ignored: int


@dataclass(slots=True)
class ToolReport:
    """Per-tool outcome of a run, keyed by file path in changed-file order."""

    tool: str
    passed: dict[str, FileResult] = field(default_factory=dict)
    failed: dict[str, FileResult] = field(default_factory=dict)
    ignored: list[str] = field(default_factory=list)
    fast_exit: bool = False

    @property
    def is_passed(self) -> bool:
        return not self.failed

    @property
    def brief(self) -> ToolBrief:
        return ToolBrief(
            is_passed=self.is_passed,
            successed=len(self.passed),
            failed=len(self.failed),
            ignored=len(self.ignored),
        )

    def record(self, result: FileResult) -> None:
        target = self.passed if result.passed else self.failed
        target[result.file] = result

    def results(self) -> list[FileResult]:
        """Return passed then failed results."""

        return [*self.passed.values(), *self.failed.values()]


def _run_serial(tool: LintTool, files: Sequence[str], report: ToolReport) -> None:
    for path in files:
        if not tool.includes(path):
            LOGGER.info("%s ignored: %s", tool.name, path)
            report.ignored.append(path)
            continue
        result = tool.check(path)
        report.record(result)
        if not result.passed and tool.fast_exit:
            LOGGER.info("%s fast exit after %s", tool.name, path)
            report.fast_exit = True
            return


def _run_parallel(tool: LintTool, files: Sequence[str], report: ToolReport, jobs: int) -> None:
    """Check files on a worker pool with at most ``jobs`` in flight.

    Fast exit only stops launching new files; checks already running finish
    and are recorded. Results are joined in ``files`` order.
    """

    slots: dict[str, FileResult] = {}
    pending: set[Future[FileResult]] = set()
    queue = iter(files)
    stop = False

    with ThreadPoolExecutor(max_workers=jobs) as executor:
        while True:
            while not stop and len(pending) < jobs:
                path = next(queue, None)
                if path is None:
                    break
                if not tool.includes(path):
                    LOGGER.info("%s ignored: %s", tool.name, path)
                    report.ignored.append(path)
                    continue
                pending.add(executor.submit(tool.check, path))
            if not pending:
                break
            done, pending = wait(pending, return_when=FIRST_COMPLETED)
            for future in done:
                result = future.result()
                slots[result.file] = result
                if not result.passed and tool.fast_exit and not stop:
                    LOGGER.info("%s fast exit after %s", tool.name, result.file)
                    report.fast_exit = True
                    stop = True

    for path in files:
        result = slots.get(path)
        if result is not None:
            report.record(result)


def run_tool(tool: LintTool, files: Sequence[str], *, jobs: int = 1) -> ToolReport:
    """Run ``tool`` against every file it includes.

    Args:
        tool: Tool adapter to run.
        files: Changed files in diff order.
        jobs: Number of concurrent tool processes.

    Returns:
        ToolReport: Passed, failed and ignored files for ``tool``.

    Raises:
        ToolInvocationError: If the tool binary cannot be started.
    """

    report = ToolReport(tool=tool.name)
    if jobs > 1:
        _run_parallel(tool, files, report, jobs)
    else:
        _run_serial(tool, files, report)
    brief = report.brief
    LOGGER.info(
        "%s: %d passed, %d failed, %d ignored", tool.name, brief.successed, brief.failed, brief.ignored
    )
    return report


def aggregate(tools: Iterable[LintTool], files: Sequence[str], *, jobs: int = 1) -> dict[str, ToolReport]:
    """Run each enabled tool independently and return reports keyed by tool name."""

    reports: dict[str, ToolReport] = {}
    for tool in tools:
        if not tool.enabled:
            LOGGER.debug("%s disabled", tool.name)
            continue
        reports[tool.name] = run_tool(tool, files, jobs=jobs)
    return reports


def total_failed(reports: Mapping[str, ToolReport]) -> int:
    return sum(len(report.failed) for report in reports.values())


def exit_status(reports: Mapping[str, ToolReport], *, symmetric: bool = False) -> int:
    """Return the process exit status for ``reports``.

    Only clang-tidy failures fail the run unless ``symmetric`` is set, in
    which case a failure from any tool does.
    """

    if symmetric:
        return 1 if total_failed(reports) else 0
    tidy = reports.get(ClangTidyTool.name)
    return 1 if tidy is not None and tidy.failed else 0


__all__ = ["ToolBrief", "ToolReport", "aggregate", "exit_status", "run_tool", "total_failed"]
