"""Scoped lifecycle for the libgit2 engine and the repositories opened through it."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

import pygit2
import structlog

from treediff.git._internal.access import RepoAccess
from treediff.git.models import RefSpec, Snapshot

log = structlog.get_logger()


class GitSession:
    """Opens each repository once and releases every handle on close.

    Snapshots handed out by a session are only valid until ``close()``.
    """

    def __init__(self) -> None:
        self._repos: dict[Path, RepoAccess] = {}
        self._closed = False

    def open(self, repo_path: Path | str) -> RepoAccess:
        if self._closed:
            raise RuntimeError("Git session is closed")
        key = Path(repo_path).resolve()
        access = self._repos.get(key)
        if access is None:
            access = RepoAccess(key)
            self._repos[key] = access
            log.debug("session.repo_opened", path=str(key))
        return access

    def snapshot(self, spec: RefSpec, label: str) -> Snapshot:
        """Resolve ``spec`` to its commit's root tree.

        Raises:
            NotARepositoryError: repository cannot be opened
            RefNotFoundError: ref does not resolve to a commit
            TreeUnavailableError: commit has no readable tree
        """
        access = self.open(spec.repo_path)
        commit = access.resolve_commit(spec.ref)
        tree = access.commit_tree(commit, spec.ref)
        log.debug("session.snapshot", spec=str(spec), commit=str(commit.id), tree=str(tree.id))
        return Snapshot(access=access, tree=tree, label=label)

    @property
    def open_repositories(self) -> int:
        return len(self._repos)

    def close(self) -> None:
        if self._closed:
            return
        for access in self._repos.values():
            access.close()
        log.debug("session.closed", repositories=len(self._repos))
        self._repos.clear()
        self._closed = True


@contextmanager
def git_session() -> Iterator[GitSession]:
    """Acquire the engine for one run; handles are freed on every exit path."""
    session = GitSession()
    log.debug("session.open", libgit2=pygit2.LIBGIT2_VERSION)
    try:
        yield session
    finally:
        session.close()
