# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for mapping file rows onto diff positions."""

from __future__ import annotations

import pytest

from lintdiff.git import Hunk
from lintdiff.position import locate_hunk, map_to_position, row_in_hunk


def _hunk(new_start: int, new_lines: int) -> Hunk:
    return Hunk(
        header=f"@@ -{new_start},{new_lines} +{new_start},{new_lines} @@",
        old_start=new_start,
        old_lines=new_lines,
        new_start=new_start,
        new_lines=new_lines,
    )


def test_row_inside_single_hunk() -> None:
    assert map_to_position([_hunk(10, 5)], 12) == 3


def test_hunk_start_maps_to_first_position() -> None:
    assert map_to_position([_hunk(10, 5)], 10) == 1


def test_inclusive_upper_bound() -> None:
    hunks = [_hunk(10, 5)]

    assert map_to_position(hunks, 15) == 6
    assert map_to_position(hunks, 15, strict=True) is None
    assert map_to_position(hunks, 14, strict=True) == 5


@pytest.mark.parametrize("row", [1, 9, 16, 100])
def test_rows_outside_diff(row: int) -> None:
    assert map_to_position([_hunk(10, 5)], row) is None


def test_offset_accumulates_previous_hunks() -> None:
    hunks = [_hunk(3, 4), _hunk(20, 6), _hunk(40, 2)]

    assert map_to_position(hunks, 22) == 4 + 22 - 20 + 1
    assert map_to_position(hunks, 41) == 4 + 6 + 41 - 40 + 1


def test_first_matching_hunk_wins_on_shared_boundary() -> None:
    hunks = [_hunk(1, 4), _hunk(5, 3)]

    match = locate_hunk(hunks, 5)

    assert match is not None
    assert match.index == 0
    assert match.position == 5
    strict = locate_hunk(hunks, 5, strict=True)
    assert strict is not None
    assert strict.index == 1
    assert strict.offset == 4
    assert strict.position == 5


def test_zero_length_hunk_only_matches_inclusively() -> None:
    hunk = _hunk(8, 0)

    assert row_in_hunk(hunk, 8)
    assert not row_in_hunk(hunk, 8, strict=True)


def test_no_hunks() -> None:
    assert locate_hunk([], 1) is None
