# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Severity related types and helpers."""

from __future__ import annotations

from enum import Enum
from typing import Final


class Severity(str, Enum):
    """Severity keywords accepted in clang-tidy diagnostic headers."""

    WARNING = "warning"
    INFO = "info"
    ERROR = "error"


SUPPORTED_SEVERITIES: Final[frozenset[str]] = frozenset(member.value for member in Severity)


def severity_from_label(label: str) -> Severity | None:
    """Return the :class:`Severity` for ``label`` or ``None`` when unsupported.

    The label must match exactly once leading whitespace is removed; clang-tidy
    emits ``note`` lines too, but those belong to the preceding diagnostic.
    """

    candidate = label.lstrip()
    if candidate not in SUPPORTED_SEVERITIES:
        return None
    return Severity(candidate)


__all__ = ["SUPPORTED_SEVERITIES", "Severity", "severity_from_label"]
