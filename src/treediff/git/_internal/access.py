"""Repository access layer - owns pygit2.Repository and exposes read-only facts."""

from __future__ import annotations

from pathlib import Path

import pygit2

from treediff.git._internal.errors import git_operation
from treediff.git.errors import (
    GitError,
    NotARepositoryError,
    RefNotFoundError,
    SubtreeLookupError,
    TreeUnavailableError,
)


class RepoAccess:
    """Owns pygit2.Repository and provides normalized access to its objects."""

    def __init__(self, repo_path: Path | str) -> None:
        self._path = Path(repo_path)
        try:
            self._repo = pygit2.Repository(str(self._path))
        except pygit2.GitError as e:
            raise NotARepositoryError(str(self._path)) from e

    @property
    def repo(self) -> pygit2.Repository:
        return self._repo

    @property
    def path(self) -> Path:
        return Path(self._repo.workdir) if self._repo.workdir else self._path

    @property
    def git_dir(self) -> Path:
        return Path(self._repo.path).resolve()

    def same_repository(self, other: RepoAccess) -> bool:
        return self is other or self.git_dir == other.git_dir

    # =========================================================================
    # Resolution Helpers
    # =========================================================================

    def resolve_commit(self, ref: str) -> pygit2.Commit:
        """Resolve a tag, branch or commit-ish to a commit, peeling annotated tags."""
        try:
            obj = self._repo.revparse_single(ref)
            commit = obj.peel(pygit2.Commit)
        except (pygit2.GitError, KeyError, ValueError) as e:
            raise RefNotFoundError(ref, str(self.path)) from e
        return commit  # type: ignore[no-any-return]

    def commit_tree(self, commit: pygit2.Commit, ref: str | None = None) -> pygit2.Tree:
        try:
            return commit.tree
        except (pygit2.GitError, KeyError) as e:
            raise TreeUnavailableError(ref or str(commit.id), str(e)) from e

    # =========================================================================
    # Object Lookup
    # =========================================================================

    def lookup_tree(self, oid: pygit2.Oid | str, path: str) -> pygit2.Tree:
        """Load the subtree stored at ``path``. Raises SubtreeLookupError."""
        try:
            obj = self._repo.get(oid)
        except (pygit2.GitError, ValueError) as e:
            raise SubtreeLookupError(path, str(oid)) from e
        if not isinstance(obj, pygit2.Tree):
            raise SubtreeLookupError(path, str(oid))
        return obj

    def lookup_blob(self, oid: pygit2.Oid | str) -> pygit2.Blob:
        with git_operation(f"blob lookup {oid}"):
            obj = self._repo.get(oid)
        if not isinstance(obj, pygit2.Blob):
            raise GitError(f"Blob not found: {oid}")
        return obj

    # =========================================================================
    # Diff Primitives
    # =========================================================================

    def diff_trees(
        self, left: pygit2.Tree, right: pygit2.Tree, *, context_lines: int = 3
    ) -> pygit2.Diff:
        """Tree-to-tree diff covering every changed path at once."""
        with git_operation("tree diff"):
            return left.diff_to_tree(right, context_lines=context_lines)

    def diff_blobs(
        self,
        left: pygit2.Blob,
        right: pygit2.Blob,
        path: str,
        *,
        context_lines: int = 3,
    ) -> pygit2.Patch:
        """Blob-to-blob patch; works for blobs owned by different repositories."""
        with git_operation(f"blob diff {path}"):
            return pygit2.Patch.create_from(
                left.data,
                right.data,
                old_as_path=path,
                new_as_path=path,
                context_lines=context_lines,
            )

    def close(self) -> None:
        """Release the handles to the git database."""
        self._repo.free()
