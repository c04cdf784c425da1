# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Git diff engine: backend lifecycle, repositories, deltas and hunks."""

from __future__ import annotations

from .backend import GitBackend, backend_session, get_backend
from .diff import Diff, PatchInfo, changed_files, check_hunk_order, hunks, parse_patch
from .models import (
    LINTABLE_STATUSES,
    NULL_OID,
    DeltaStatus,
    DiffFile,
    FileDelta,
    FileFlag,
    FileMode,
    Hunk,
    classify_mode,
    status_from_letter,
)
from .repository import DEFAULT_CONTEXT_LINES, CommitHandle, Repository, diff, open_repository, resolve

__all__ = [
    "DEFAULT_CONTEXT_LINES",
    "LINTABLE_STATUSES",
    "NULL_OID",
    "CommitHandle",
    "DeltaStatus",
    "Diff",
    "DiffFile",
    "FileDelta",
    "FileFlag",
    "FileMode",
    "GitBackend",
    "Hunk",
    "PatchInfo",
    "Repository",
    "backend_session",
    "changed_files",
    "check_hunk_order",
    "classify_mode",
    "diff",
    "get_backend",
    "hunks",
    "open_repository",
    "parse_patch",
    "resolve",
    "status_from_letter",
]
