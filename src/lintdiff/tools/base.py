# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Shared behaviour for tools run once per changed file."""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from collections.abc import Sequence
from pathlib import Path
from typing import ClassVar, Generic, TypeVar

from ..config import ToolOptions
from ..errors import ToolTimeoutError
from ..models import FileResult
from ..process import ToolExecution, ToolRunner

LOGGER = logging.getLogger(__name__)

OptionsT = TypeVar("OptionsT", bound=ToolOptions)
ResultT = TypeVar("ResultT", bound=FileResult)


class LintTool(ABC, Generic[OptionsT, ResultT]):
    """A linter applied to files one at a time.

    Subclasses build the argument list and turn a captured execution into a
    typed result. Non-zero exit codes are data; only a missing binary
    propagates, while a timeout becomes a failed result for that file.
    """

    name: ClassVar[str]
    result_type: ClassVar[type[FileResult]]

    def __init__(self, options: OptionsT, runner: ToolRunner, *, repo_path: Path | None = None) -> None:
        self.options = options
        self.runner = runner
        self.repo_path = repo_path
        self._include = re.compile(options.source_iregex, re.IGNORECASE)

    @property
    def enabled(self) -> bool:
        return self.options.enabled

    @property
    def fast_exit(self) -> bool:
        return self.options.fast_exit

    def includes(self, path: str) -> bool:
        """Return ``True`` when ``path`` fully matches the tool's source regex."""

        return self._include.fullmatch(path) is not None

    def check(self, path: str) -> FileResult:
        """Run the tool against ``path`` and return its result.

        Raises:
            ToolInvocationError: If the binary cannot be started.
        """

        try:
            result = self.run_file(path)
        except ToolTimeoutError as exc:
            LOGGER.error("%s timed out on %s: %s", self.name, path, exc)
            return self.result_type(file=path, passed=False, error=str(exc))
        if result.passed:
            LOGGER.info("%s passed: %s", self.name, path)
        else:
            LOGGER.error("%s failed: %s", self.name, path)
        return result

    def execute(self, arguments: Sequence[str]) -> ToolExecution:
        return self.runner.run(self.options.binary, arguments, self.repo_path)

    @abstractmethod
    def arguments(self, path: str) -> list[str]:
        """Return the command-line arguments for linting ``path``."""

    @abstractmethod
    def run_file(self, path: str) -> ResultT:
        """Invoke the tool on ``path`` and parse its output."""


__all__ = ["LintTool"]
