# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Report builders: Markdown summaries, review comments, console and CI outputs."""

from __future__ import annotations

from .console import build_result_table, render_changed_files, render_results
from .markdown import COMMENT_MARKER, brief_result, issue_comment, result_table, tool_details
from .outputs import action_outputs, write_action_output, write_step_summary
from .review import clang_format_comments, clang_tidy_comments, review_comments, review_payload

__all__ = [
    "COMMENT_MARKER",
    "action_outputs",
    "brief_result",
    "build_result_table",
    "clang_format_comments",
    "clang_tidy_comments",
    "issue_comment",
    "render_changed_files",
    "render_results",
    "result_table",
    "review_comments",
    "review_payload",
    "tool_details",
    "write_action_output",
    "write_step_summary",
]
