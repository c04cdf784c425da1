# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Materialised diff between two commits and the helpers that build it."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass

from unidiff import PatchSet
from unidiff.errors import UnidiffParseError

from ..errors import RepositoryError
from .models import LINTABLE_STATUSES, FileDelta, Hunk

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PatchInfo:
    """Hunks and binary marker extracted for one path of a unified diff."""

    hunks: tuple[Hunk, ...]
    binary: bool


def _hunk_header(source_start: int, source_length: int, target_start: int, target_length: int, section: str) -> str:
    header = f"@@ -{source_start},{source_length} +{target_start},{target_length} @@"
    return f"{header} {section}" if section else header


def parse_patch(patch_text: str) -> dict[str, PatchInfo]:
    """Parse unified diff text into per-path hunk lists.

    Args:
        patch_text: Output of ``git diff`` between two revisions.

    Returns:
        dict[str, PatchInfo]: Mapping keyed by the post-image path (the
        pre-image path for deletions). Hunks are sorted by ``new_start``;
        binary files carry no hunks.

    Raises:
        RepositoryError: If the text is not a well-formed unified diff.
    """

    if not patch_text.strip():
        return {}
    try:
        patch_set = PatchSet.from_string(patch_text)
    except UnidiffParseError as exc:
        raise RepositoryError(f"cannot parse diff output: {exc}") from exc

    parsed: dict[str, PatchInfo] = {}
    for patched in patch_set:
        binary = bool(patched.is_binary_file)
        hunks: list[Hunk] = []
        if not binary:
            for hunk in patched:
                hunks.append(
                    Hunk(
                        header=_hunk_header(
                            hunk.source_start,
                            hunk.source_length,
                            hunk.target_start,
                            hunk.target_length,
                            (hunk.section_header or "").strip(),
                        ),
                        old_start=hunk.source_start,
                        old_lines=hunk.source_length,
                        new_start=hunk.target_start,
                        new_lines=hunk.target_length,
                    )
                )
        hunks.sort(key=lambda item: item.new_start)
        parsed[patched.path] = PatchInfo(hunks=tuple(hunks), binary=binary)
    return parsed


class Diff:
    """Ordered, immutable collection of :class:`FileDelta` objects.

    Instances are fully materialised on construction and never touch the
    repository again, so they may be shared read-only across threads.
    """

    def __init__(self, deltas: Iterable[FileDelta], *, patch_text: str = "") -> None:
        self._deltas: tuple[FileDelta, ...] = tuple(deltas)
        self._by_path: Mapping[str, FileDelta] = {delta.path: delta for delta in self._deltas}
        self._patch_text = patch_text

    @property
    def deltas(self) -> tuple[FileDelta, ...]:
        return self._deltas

    @property
    def patch_text(self) -> str:
        """Return the unified diff text the hunks were parsed from."""

        return self._patch_text

    def __iter__(self) -> Iterator[FileDelta]:
        return iter(self._deltas)

    def __len__(self) -> int:
        return len(self._deltas)

    def delta(self, path: str) -> FileDelta | None:
        """Return the delta keyed by ``path`` or ``None``."""

        return self._by_path.get(path)

    def changed_files(self) -> tuple[str, ...]:
        """Return paths worth linting, in diff order.

        Added, modified, renamed, copied and type-changed files are included;
        deletions, unreadable and conflicted entries are not.
        """

        seen: dict[str, None] = {}
        for delta in self._deltas:
            if delta.status in LINTABLE_STATUSES:
                seen.setdefault(delta.new_file.path, None)
        return tuple(seen)

    def hunks(self, path: str) -> tuple[Hunk, ...]:
        """Return the ordered hunks for ``path`` (empty when binary or unknown)."""

        delta = self._by_path.get(path)
        if delta is None or delta.is_binary:
            return ()
        return delta.hunks

    def is_binary(self, path: str) -> bool:
        delta = self._by_path.get(path)
        return bool(delta and delta.is_binary)


def changed_files(diff: Diff) -> tuple[str, ...]:
    """Return the lintable paths of ``diff``."""

    return diff.changed_files()


def hunks(diff: Diff, path: str) -> tuple[Hunk, ...]:
    """Return the hunks recorded for ``path`` in ``diff``."""

    return diff.hunks(path)


def check_hunk_order(hunk_list: Sequence[Hunk]) -> bool:
    """Return ``True`` when ``hunk_list`` is sorted by ``new_start`` without overlap."""

    previous_end: int | None = None
    for hunk in hunk_list:
        if previous_end is not None and hunk.new_start < previous_end:
            return False
        previous_end = hunk.new_start + hunk.new_lines
    return True


__all__ = ["Diff", "PatchInfo", "changed_files", "check_hunk_order", "hunks", "parse_patch"]
