# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Map absolute file rows onto diff-relative review positions.

Review APIs only accept comments on lines that appear in a file's patch and
address them by a 1-based position counted across all hunks of that patch.
A row is "in" a hunk when it lies within ``[new_start, new_start + new_lines]``;
the upper bound is inclusive, one line wider than the half-open range used
by most diff tooling. Callers can opt into the half-open test with
``strict=True``.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from .git.models import Hunk


@dataclass(frozen=True, slots=True)
class HunkMatch:
    """The hunk containing a row plus the position it maps to."""

    index: int
    hunk: Hunk
    offset: int
    position: int


def row_in_hunk(hunk: Hunk, row: int, *, strict: bool = False) -> bool:
    """Return ``True`` when ``row`` falls inside ``hunk``'s new-side range."""

    end = hunk.new_start + hunk.new_lines
    if strict:
        return hunk.new_start <= row < end
    return hunk.new_start <= row <= end


def locate_hunk(hunks: Sequence[Hunk], row: int, *, strict: bool = False) -> HunkMatch | None:
    """Find the first hunk containing ``row``.

    Args:
        hunks: Hunks of one file ordered by ``new_start``.
        row: 1-based row in the new version of the file.
        strict: Use the half-open ``[new_start, new_start + new_lines)`` test.

    Returns:
        HunkMatch | None: Match details, or ``None`` when the row is outside
        the diff.
    """

    offset = 0
    for index, hunk in enumerate(hunks):
        if row_in_hunk(hunk, row, strict=strict):
            return HunkMatch(index=index, hunk=hunk, offset=offset, position=offset + row - hunk.new_start + 1)
        offset += hunk.new_lines
    return None


def map_to_position(hunks: Sequence[Hunk], row: int, *, strict: bool = False) -> int | None:
    """Return the diff position of ``row`` or ``None`` when it is outside the diff."""

    match = locate_hunk(hunks, row, strict=strict)
    return match.position if match is not None else None


__all__ = ["HunkMatch", "locate_hunk", "map_to_position", "row_in_hunk"]
