# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for subprocess execution helpers."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

from lintdiff.errors import ToolInvocationError, ToolTimeoutError
from lintdiff.process import CommandOptions, SubprocessToolRunner, ToolRunner, run_command


def test_run_command_captures_streams_and_exit_code(tmp_path: Path) -> None:
    script = "import sys; print('out'); print('err', file=sys.stderr); sys.exit(3)"

    execution = run_command([sys.executable, "-c", script], options=CommandOptions(cwd=tmp_path))

    assert execution.exit_code == 3
    assert not execution.ok
    assert execution.stdout.strip() == "out"
    assert execution.stderr.strip() == "err"


def test_runner_uses_working_directory(tmp_path: Path) -> None:
    runner = SubprocessToolRunner()

    execution = runner.run(sys.executable, ["-c", "import os; print(os.getcwd())"], tmp_path)

    assert Path(execution.stdout.strip()).resolve() == tmp_path.resolve()
    assert isinstance(runner, ToolRunner)


def test_missing_executable_raises() -> None:
    with pytest.raises(ToolInvocationError) as excinfo:
        run_command(["lintdiff-definitely-missing-binary", "--version"])

    assert excinfo.value.command[0] == "lintdiff-definitely-missing-binary"


def test_empty_command_raises() -> None:
    with pytest.raises(ToolInvocationError):
        run_command([])


def test_timeout_raises_timeout_error() -> None:
    runner = SubprocessToolRunner(timeout=0.2)

    with pytest.raises(ToolTimeoutError) as excinfo:
        runner.run(sys.executable, ["-c", "import time; time.sleep(5)"])

    assert excinfo.value.timeout == pytest.approx(0.2)


def test_negative_timeout_is_rejected() -> None:
    with pytest.raises(ValueError):
        CommandOptions(timeout=-1)
