# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Adapters that run each supported linter against a single file."""

from __future__ import annotations

from .base import LintTool
from .clang_format import REPLACEMENTS_XML_FLAG, ClangFormatTool
from .clang_tidy import ClangTidyTool

__all__ = ["REPLACEMENTS_XML_FLAG", "ClangFormatTool", "ClangTidyTool", "LintTool"]
