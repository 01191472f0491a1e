"""Root conftest.py for test configuration.

Ensures local src/ directory takes priority over any installed packages and
provides repository fixtures that build arbitrary trees with pygit2.

Tree specs are nested dicts: ``str``/``bytes`` values become blobs, ``dict``
values become subtrees, ``Gitlink`` values become submodule entries and
``Symlink`` values become symbolic links.
"""

from __future__ import annotations

import sys
from collections.abc import Callable, Generator
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import pygit2
import pytest
from pygit2.enums import FileMode, ObjectType

# Insert local src directory at the beginning of sys.path
_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

from treediff.git import RepoAccess, Snapshot  # noqa: E402

TreeSpec = dict[str, Any]


@dataclass(frozen=True)
class Gitlink:
    """Submodule entry pointing at a commit oid."""

    oid: str


@dataclass(frozen=True)
class Symlink:
    """Symbolic link entry; the blob holds the link target."""

    target: str


def init_repo(path: Path) -> pygit2.Repository:
    path.mkdir(parents=True)
    repo = pygit2.init_repository(str(path), initial_head="main")
    repo.config["user.name"] = "Test User"
    repo.config["user.email"] = "test@example.com"
    return repo


def build_tree(repo: pygit2.Repository, spec: TreeSpec) -> pygit2.Oid:
    builder = repo.TreeBuilder()
    for name, value in spec.items():
        if isinstance(value, dict):
            builder.insert(name, build_tree(repo, value), FileMode.TREE)
        elif isinstance(value, Gitlink):
            builder.insert(name, pygit2.Oid(hex=value.oid), FileMode.COMMIT)
        elif isinstance(value, Symlink):
            builder.insert(name, repo.create_blob(value.target.encode()), FileMode.LINK)
        else:
            data = value.encode() if isinstance(value, str) else value
            builder.insert(name, repo.create_blob(data), FileMode.BLOB)
    return builder.write()


def commit_spec(
    repo: pygit2.Repository,
    spec: TreeSpec,
    *,
    tag: str | None = None,
    annotated: bool = False,
    message: str = "commit",
) -> str:
    """Commit ``spec`` on main (optionally tagging it) and return the commit sha."""
    sig = pygit2.Signature("Test User", "test@example.com")
    parents = [] if repo.head_is_unborn else [repo.head.target]
    oid = repo.create_commit("refs/heads/main", sig, sig, message, build_tree(repo, spec), parents)
    if tag and annotated:
        repo.create_tag(tag, oid, ObjectType.COMMIT, sig, f"Release {tag}")
    elif tag:
        repo.references.create(f"refs/tags/{tag}", oid)
    return str(oid)


@pytest.fixture
def repo(tmp_path: Path) -> pygit2.Repository:
    """Empty repository with user configured."""
    return init_repo(tmp_path / "repo")


@pytest.fixture
def repo_path(repo: pygit2.Repository) -> Path:
    return Path(repo.workdir)


@pytest.fixture
def access(repo_path: Path) -> Generator[RepoAccess, None, None]:
    access = RepoAccess(repo_path)
    yield access
    access.close()


@pytest.fixture
def snapshot(
    repo: pygit2.Repository, access: RepoAccess
) -> Callable[..., Snapshot]:
    """Build a tree from a spec and loan it as a Snapshot."""

    def _snapshot(spec: TreeSpec, label: str = "left") -> Snapshot:
        oid = build_tree(repo, spec)
        return Snapshot(access=access, tree=access.lookup_tree(oid, "<root>"), label=label)

    return _snapshot


@pytest.fixture
def commit(repo: pygit2.Repository) -> Callable[..., str]:
    """Commit a tree spec on main; pass tag= to tag the commit."""

    def _commit(spec: TreeSpec, **kwargs: Any) -> str:
        return commit_spec(repo, spec, **kwargs)

    return _commit


@pytest.fixture
def second_repo(tmp_path: Path) -> pygit2.Repository:
    """A separate repository, for cross-repository comparisons."""
    return init_repo(tmp_path / "other")


@pytest.fixture
def gitlink() -> Callable[[str], Gitlink]:
    """Factory for submodule entries in tree specs."""
    return Gitlink


@pytest.fixture
def symlink() -> Callable[[str], Symlink]:
    """Factory for symbolic link entries in tree specs."""
    return Symlink
