# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Value objects describing a tree-to-tree diff."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntFlag
from typing import Final

NULL_OID: Final[str] = "0" * 40


class DeltaStatus(str, Enum):
    """Status of one file within a diff."""

    UNMODIFIED = "unmodified"
    ADDED = "added"
    DELETED = "deleted"
    MODIFIED = "modified"
    RENAMED = "renamed"
    COPIED = "copied"
    IGNORED = "ignored"
    UNTRACKED = "untracked"
    TYPECHANGE = "typechange"
    UNREADABLE = "unreadable"
    CONFLICTED = "conflicted"


LINTABLE_STATUSES: Final[frozenset[DeltaStatus]] = frozenset(
    {
        DeltaStatus.ADDED,
        DeltaStatus.MODIFIED,
        DeltaStatus.RENAMED,
        DeltaStatus.COPIED,
        DeltaStatus.TYPECHANGE,
    }
)

# Status letters emitted by ``git diff --raw``.
_STATUS_LETTERS: Final[dict[str, DeltaStatus]] = {
    "A": DeltaStatus.ADDED,
    "C": DeltaStatus.COPIED,
    "D": DeltaStatus.DELETED,
    "M": DeltaStatus.MODIFIED,
    "R": DeltaStatus.RENAMED,
    "T": DeltaStatus.TYPECHANGE,
    "U": DeltaStatus.CONFLICTED,
    "X": DeltaStatus.UNREADABLE,
}


def status_from_letter(letter: str | None) -> DeltaStatus:
    """Translate a raw diff status letter into a :class:`DeltaStatus`."""

    if not letter:
        return DeltaStatus.UNMODIFIED
    return _STATUS_LETTERS.get(letter[0].upper(), DeltaStatus.UNREADABLE)


class FileMode(str, Enum):
    """Classification of a git tree entry mode."""

    UNREADABLE = "unreadable"
    TREE = "tree"
    BLOB = "blob"
    BLOB_EXECUTABLE = "blob_executable"
    LINK = "link"
    COMMIT = "commit"


_MODE_VALUES: Final[dict[int, FileMode]] = {
    0o040000: FileMode.TREE,
    0o100644: FileMode.BLOB,
    0o100664: FileMode.BLOB,
    0o100755: FileMode.BLOB_EXECUTABLE,
    0o120000: FileMode.LINK,
    0o160000: FileMode.COMMIT,
}


def classify_mode(mode: int | None) -> FileMode:
    """Return the :class:`FileMode` matching a raw octal ``mode``."""

    if not mode:
        return FileMode.UNREADABLE
    return _MODE_VALUES.get(mode, FileMode.UNREADABLE)


class FileFlag(IntFlag):
    """Per-file flags mirroring the information git reports for a side of a delta."""

    NONE = 0
    BINARY = 1
    NOT_BINARY = 2
    VALID_ID = 4
    EXISTS = 8
    VALID_SIZE = 16


@dataclass(frozen=True, slots=True)
class DiffFile:
    """One side (old or new) of a file delta."""

    oid: str
    path: str
    size: int
    flags: FileFlag
    mode: FileMode

    @classmethod
    def empty(cls, path: str) -> DiffFile:
        """Return the zero descriptor used for the missing side of an add/delete."""

        return cls(oid=NULL_OID, path=path, size=0, flags=FileFlag.NONE, mode=FileMode.UNREADABLE)

    @property
    def exists(self) -> bool:
        return bool(self.flags & FileFlag.EXISTS)

    @property
    def is_binary(self) -> bool:
        return bool(self.flags & FileFlag.BINARY)


@dataclass(frozen=True, slots=True)
class Hunk:
    """A contiguous block of changed lines.

    Line numbers are 1-based; counts may be zero for insertions or deletions
    sitting on a file boundary.
    """

    header: str
    old_start: int
    old_lines: int
    new_start: int
    new_lines: int


@dataclass(frozen=True, slots=True)
class FileDelta:
    """Description of one file's change between two trees."""

    status: DeltaStatus
    similarity: int
    old_file: DiffFile
    new_file: DiffFile
    hunks: tuple[Hunk, ...] = field(default_factory=tuple)

    @property
    def path(self) -> str:
        """Return the path used to key this delta (new side unless deleted)."""

        if self.status is DeltaStatus.DELETED:
            return self.old_file.path
        return self.new_file.path

    @property
    def is_binary(self) -> bool:
        return self.old_file.is_binary or self.new_file.is_binary

    def same_file(self) -> bool:
        """Return ``True`` when both sides describe the same logical path."""

        return self.old_file.path == self.new_file.path


__all__ = [
    "LINTABLE_STATUSES",
    "NULL_OID",
    "DeltaStatus",
    "DiffFile",
    "FileDelta",
    "FileFlag",
    "FileMode",
    "Hunk",
    "classify_mode",
    "status_from_letter",
]
