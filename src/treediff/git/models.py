"""Data models for the repository collaborator."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import pygit2

from treediff.git._internal.access import RepoAccess


@dataclass(frozen=True, slots=True)
class RefSpec:
    """A repository path plus a tag, branch or commit-ish inside it."""

    repo_path: Path
    ref: str

    def __str__(self) -> str:
        return f"{self.repo_path}@{self.ref}"


@dataclass(frozen=True, slots=True)
class Snapshot:
    """A root tree loaned from an open repository for one comparison."""

    access: RepoAccess
    tree: pygit2.Tree
    label: str

    @property
    def oid(self) -> str:
        return str(self.tree.id)

    def lookup_tree(self, oid: pygit2.Oid | str, path: str) -> pygit2.Tree:
        return self.access.lookup_tree(oid, path)
