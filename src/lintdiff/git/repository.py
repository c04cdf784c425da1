# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Read-only repository access: revision resolution and commit diffs."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from types import TracebackType

import git
from git.exc import BadName, BadObject, GitCommandError, InvalidGitRepositoryError, NoSuchPathError
from git.objects import Blob, Commit

from ..errors import RepositoryError, RevisionNotFound
from .backend import GitBackend, get_backend
from .diff import Diff, PatchInfo, parse_patch
from .models import DeltaStatus, DiffFile, FileDelta, FileFlag, FileMode, classify_mode, status_from_letter

LOGGER = logging.getLogger(__name__)

DEFAULT_CONTEXT_LINES = 3


@dataclass(frozen=True, slots=True)
class CommitHandle:
    """A revision specification resolved to a concrete commit."""

    revision: str
    sha: str
    summary: str
    commit: Commit = field(repr=False, compare=False)


class Repository:
    """Owned handle on a git repository.

    The handle is released exactly once, either through :meth:`close` or by
    leaving the ``with`` block. Nothing here writes to the working tree or
    index.
    """

    def __init__(self, repo: git.Repo, *, backend: GitBackend | None = None) -> None:
        self._repo: git.Repo | None = repo
        self._backend = backend or get_backend()

    def __enter__(self) -> Repository:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    @property
    def closed(self) -> bool:
        return self._repo is None

    @property
    def path(self) -> Path:
        """Return the working tree directory (or git dir for bare repositories)."""

        repo = self._handle()
        return Path(repo.working_tree_dir or repo.git_dir)

    def close(self) -> None:
        """Release the underlying GitPython handle; further calls are no-ops."""

        if self._repo is None:
            return
        self._repo.close()
        self._repo = None

    def _handle(self) -> git.Repo:
        self._backend.ensure_active()
        if self._repo is None:
            raise RepositoryError("repository handle already released")
        return self._repo

    def resolve(self, revision: str) -> CommitHandle:
        """Resolve ``revision`` (branch, tag, sha, ``HEAD~1``...) to a commit.

        Raises:
            RevisionNotFound: If the specification does not name a commit.
        """

        repo = self._handle()
        if not revision or not revision.strip():
            raise RevisionNotFound(revision, "empty revision")
        try:
            commit = repo.commit(revision)
        except (BadName, BadObject, ValueError, IndexError) as exc:
            raise RevisionNotFound(revision, str(exc) or type(exc).__name__) from exc
        LOGGER.debug("resolved %s to %s", revision, commit.hexsha)
        return CommitHandle(revision=revision, sha=commit.hexsha, summary=str(commit.summary), commit=commit)

    def diff(
        self,
        from_commit: CommitHandle,
        to_commit: CommitHandle,
        *,
        context_lines: int = DEFAULT_CONTEXT_LINES,
    ) -> Diff:
        """Compute the tree-to-tree diff from ``from_commit`` to ``to_commit``.

        Raises:
            RepositoryError: On git failures or unparseable diff output.
        """

        repo = self._handle()
        try:
            raw_index = from_commit.commit.diff(to_commit.commit)
            patch_text = repo.git(c="core.quotePath=false").diff(
                from_commit.sha,
                to_commit.sha,
                "-M",
                "--no-color",
                "--no-ext-diff",
                f"--unified={context_lines}",
                strip_newline_in_stdout=False,
            )
        except (GitCommandError, BadName, BadObject, ValueError) as exc:
            raise RepositoryError(f"cannot diff {from_commit.sha}..{to_commit.sha}: {exc}") from exc

        patches = parse_patch(patch_text)
        deltas = [_build_delta(item, patches) for item in raw_index]
        LOGGER.info("diff %s..%s touches %d file(s)", from_commit.sha[:12], to_commit.sha[:12], len(deltas))
        return Diff(deltas, patch_text=patch_text)

    def read_file(self, commit: CommitHandle, path: str) -> bytes:
        """Return the bytes of ``path`` as recorded in ``commit``.

        Raises:
            RepositoryError: If the path is not a blob in that commit.
        """

        self._handle()
        try:
            entry = commit.commit.tree / path
        except KeyError as exc:
            raise RepositoryError(f"{path} does not exist in {commit.sha}") from exc
        if not isinstance(entry, Blob):
            raise RepositoryError(f"{path} is not a file in {commit.sha}")
        return entry.data_stream.read()


def open_repository(path: str | Path, *, backend: GitBackend | None = None) -> Repository:
    """Open the repository containing ``path``.

    Raises:
        RepositoryError: If ``path`` is missing or not inside a repository.
    """

    active = backend or get_backend()
    active.ensure_active()
    try:
        repo = git.Repo(str(path), search_parent_directories=False)
    except (InvalidGitRepositoryError, NoSuchPathError) as exc:
        raise RepositoryError(f"cannot open repository at {path}: {exc}") from exc
    LOGGER.debug("opened repository %s", repo.git_dir)
    return Repository(repo, backend=active)


def resolve(repository: Repository, revision: str) -> CommitHandle:
    """Functional alias for :meth:`Repository.resolve`."""

    return repository.resolve(revision)


def diff(
    repository: Repository,
    from_commit: CommitHandle,
    to_commit: CommitHandle,
    *,
    context_lines: int = DEFAULT_CONTEXT_LINES,
) -> Diff:
    """Functional alias for :meth:`Repository.diff`."""

    return repository.diff(from_commit, to_commit, context_lines=context_lines)


def _blob_size(blob: Blob, mode: FileMode) -> int | None:
    if mode is FileMode.COMMIT:
        return None
    try:
        return int(blob.size)
    except (ValueError, GitCommandError, BadObject):
        return None


def _describe(blob: Blob | None, path: str, mode: int | None, binary: bool) -> DiffFile:
    if blob is None:
        return DiffFile.empty(path)
    classified = classify_mode(mode)
    size = _blob_size(blob, classified)
    flags = FileFlag.VALID_ID | FileFlag.EXISTS
    flags |= FileFlag.BINARY if binary else FileFlag.NOT_BINARY
    if size is not None:
        flags |= FileFlag.VALID_SIZE
    return DiffFile(oid=blob.hexsha, path=path, size=size or 0, flags=flags, mode=classified)


def _build_delta(item: git.Diff, patches: dict[str, PatchInfo]) -> FileDelta:
    status = status_from_letter(item.change_type)
    old_path = item.a_path or item.b_path or ""
    new_path = item.b_path or item.a_path or ""
    key = old_path if status is DeltaStatus.DELETED else new_path
    patch = patches.get(key, PatchInfo(hunks=(), binary=False))
    similarity = 0
    if status in {DeltaStatus.RENAMED, DeltaStatus.COPIED}:
        similarity = int(getattr(item, "score", None) or 0)
    return FileDelta(
        status=status,
        similarity=similarity,
        old_file=_describe(item.a_blob, old_path, item.a_mode, patch.binary),
        new_file=_describe(item.b_blob, new_path, item.b_mode, patch.binary),
        hunks=() if patch.binary else patch.hunks,
    )


__all__ = ["CommitHandle", "DEFAULT_CONTEXT_LINES", "Repository", "diff", "open_repository", "resolve"]
