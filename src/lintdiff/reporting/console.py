# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Render run results to the terminal with Rich."""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from rich import box
from rich.panel import Panel
from rich.table import Table

from ..aggregate import ToolReport
from ..console import get_console_manager


def build_result_table(reports: Mapping[str, ToolReport], *, color: bool) -> Table:
    """Return a table with one row of counters per tool."""

    table = Table(box=box.SIMPLE_HEAVY if color else box.SIMPLE)
    table.add_column("Tool", overflow="fold")
    table.add_column("Passed", justify="right")
    table.add_column("Failed", justify="right")
    table.add_column("Ignored", justify="right")
    table.add_column("Fast exit", justify="center")
    for report in reports.values():
        brief = report.brief
        failed = str(brief.failed)
        if color and brief.failed:
            failed = f"[red]{failed}[/red]"
        table.add_row(
            report.tool,
            str(brief.successed),
            failed,
            str(brief.ignored),
            "yes" if report.fast_exit else "-",
        )
    return table


def render_changed_files(files: Sequence[str], *, color: bool, emoji: bool = False) -> None:
    console = get_console_manager().get(color=color, emoji=emoji)
    console.print(f"{len(files)} changed file(s)")
    for path in files:
        console.print(f"  {path}", highlight=False)


def render_results(reports: Mapping[str, ToolReport], *, color: bool, emoji: bool = False) -> None:
    """Print the per-tool table inside a panel."""

    console = get_console_manager().get(color=color, emoji=emoji)
    panel = Panel(
        build_result_table(reports, color=color),
        title="lintdiff results",
        border_style="cyan" if color else "none",
    )
    console.print(panel)


__all__ = ["build_result_table", "render_changed_files", "render_results"]
