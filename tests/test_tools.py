# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for the clang-tidy and clang-format adapters."""

from __future__ import annotations

from pathlib import Path

from lintdiff.config import ClangFormatOptions, ClangTidyOptions
from lintdiff.models import ClangFormatResult, ClangTidyResult
from lintdiff.process import ToolExecution
from lintdiff.tools import REPLACEMENTS_XML_FLAG, ClangFormatTool, ClangTidyTool

from .support import FakeRunner


def test_clang_tidy_arguments_follow_declared_order() -> None:
    options = ClangTidyOptions(
        database="build",
        checks="-*,readability-*",
        allow_no_checks=True,
        config="{Checks: '*'}",
        config_file=".clang-tidy",
        enable_check_profile=True,
        header_filter=".*",
        line_filter='[{"name":"a.cpp"}]',
    )
    tool = ClangTidyTool(options, FakeRunner())

    assert tool.arguments("src/a.cpp") == [
        "-p=build",
        "-checks=-*,readability-*",
        "--allow-no-checks",
        "--config={Checks: '*'}",
        "--config-file=.clang-tidy",
        "--enable-check-profile",
        "--header-filter=.*",
        '--line-filter=[{"name":"a.cpp"}]',
        "src/a.cpp",
    ]


def test_clang_tidy_defaults_pass_only_the_file() -> None:
    assert ClangTidyTool(ClangTidyOptions(), FakeRunner()).arguments("a.cpp") == ["a.cpp"]


def test_clang_tidy_result_is_parsed(tmp_path: Path) -> None:
    runner = FakeRunner(
        default=ToolExecution(
            1,
            "a.cpp:2:3: warning: shadowed [readability-shadow]\n  code\n",
            "1 warning generated.\n",
        )
    )
    tool = ClangTidyTool(ClangTidyOptions(binary="/opt/llvm/bin/clang-tidy"), runner, repo_path=tmp_path)

    result = tool.check("a.cpp")

    assert isinstance(result, ClangTidyResult)
    assert not result.passed
    assert result.statistic.warnings == 1
    (diagnostic,) = result.diagnostics
    assert diagnostic.details == "  code"
    assert runner.calls == [("/opt/llvm/bin/clang-tidy", ("a.cpp",), tmp_path)]


def test_clang_tidy_passes_on_zero_exit_even_with_warnings() -> None:
    runner = FakeRunner(default=ToolExecution(0, "a.cpp:2:3: warning: w [x]\n", ""))

    result = ClangTidyTool(ClangTidyOptions(), runner).check("a.cpp")

    assert result.passed


def test_clang_format_arguments() -> None:
    tool = ClangFormatTool(ClangFormatOptions(style="file"), FakeRunner())

    assert tool.arguments("a.cpp") == ["--style=file", REPLACEMENTS_XML_FLAG, "a.cpp"]
    assert tool.source_arguments("a.cpp") == ["--style=file", "a.cpp"]


def test_clang_format_formatted_file_passes() -> None:
    runner = FakeRunner(default=ToolExecution(0, "<replacements xml:space='preserve'>\n</replacements>\n", ""))

    result = ClangFormatTool(ClangFormatOptions(), runner, formatted_source=True).check("a.cpp")

    assert isinstance(result, ClangFormatResult)
    assert result.passed
    assert result.replacements == ()
    assert len(runner.calls) == 1


def test_clang_format_requests_source_only_when_needed() -> None:
    def handler(binary: str, arguments: list[str]) -> ToolExecution:
        if REPLACEMENTS_XML_FLAG in arguments:
            return ToolExecution(0, "<replacements><replacement offset='3' length='2'> </replacement></replacements>", "")
        return ToolExecution(0, "int x;\n", "")

    with_source = FakeRunner(handler=handler)
    result = ClangFormatTool(ClangFormatOptions(), with_source, formatted_source=True).check("a.cpp")
    assert not result.passed
    assert result.formatted_source == "int x;\n"
    assert len(with_source.calls) == 2

    without_source = FakeRunner(handler=handler)
    result = ClangFormatTool(ClangFormatOptions(), without_source).check("a.cpp")
    assert result.formatted_source is None
    assert len(without_source.calls) == 1


def test_clang_format_applies_replacements_when_printing_fails(tmp_path: Path) -> None:
    (tmp_path / "a.cpp").write_bytes(b"int  x;\n")

    def handler(binary: str, arguments: list[str]) -> ToolExecution:
        if REPLACEMENTS_XML_FLAG in arguments:
            return ToolExecution(0, "<replacements><replacement offset='3' length='2'> </replacement></replacements>", "")
        return ToolExecution(1, "", "crashed")

    tool = ClangFormatTool(ClangFormatOptions(), FakeRunner(handler=handler), repo_path=tmp_path, formatted_source=True)
    result = tool.check("a.cpp")

    assert not result.passed
    assert result.formatted_source == "int x;\n"


def test_clang_format_malformed_output_fails_the_file() -> None:
    runner = FakeRunner(default=ToolExecution(0, "<garbage", ""))

    result = ClangFormatTool(ClangFormatOptions(), runner).check("a.cpp")

    assert not result.passed
    assert result.error is not None
    assert "replacements" in result.error


def test_clang_format_nonzero_exit_fails_the_file() -> None:
    runner = FakeRunner(default=ToolExecution(1, "", "error: cannot open a.cpp"))

    result = ClangFormatTool(ClangFormatOptions(), runner).check("a.cpp")

    assert not result.passed
    assert result.stderr == "error: cannot open a.cpp"
    assert result.error == "exit code 1"
