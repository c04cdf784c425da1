# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Parsers that turn raw tool output into structured results."""

from __future__ import annotations

from .clang_format import apply_replacements, line_lengths, offset_to_position, parse_replacements
from .clang_tidy import DiagnosticHeader, parse_diagnostics, parse_header, parse_statistics

__all__ = [
    "DiagnosticHeader",
    "apply_replacements",
    "line_lengths",
    "offset_to_position",
    "parse_diagnostics",
    "parse_header",
    "parse_replacements",
    "parse_statistics",
]
