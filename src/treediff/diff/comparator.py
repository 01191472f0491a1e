"""Depth-first comparison of two tree snapshots.

The walk keeps an explicit stack of frames instead of recursing, so deep
trees are bounded by ``max_depth`` rather than the interpreter's recursion
limit. Output order is identical to a recursive pre-order walk: names are
visited lexicographically and a subtree's differences appear at the
position of the subtree's name.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass, field

import pygit2
import structlog

from treediff.diff.index import build_entry_index
from treediff.diff.models import DiffStatus, Entry, EntryKind, PathDiff
from treediff.git.errors import TreeDepthExceededError
from treediff.git.models import Snapshot

log = structlog.get_logger()

PatchFn = Callable[[str], str]


def join_path(prefix: str, name: str) -> str:
    return f"{prefix}/{name}" if prefix else name


@dataclass(slots=True)
class _Frame:
    """One level of the walk: the union of names still to visit."""

    prefix: str
    left: dict[str, Entry]
    right: dict[str, Entry]
    names: Iterator[str] = field(init=False)

    def __post_init__(self) -> None:
        self.names = iter(sorted(self.left.keys() | self.right.keys()))


class TreeComparator:
    """Classifies every path present in either of two snapshots.

    Subtrees on both sides are descended without being reported; subtrees
    with equal oids are skipped entirely. A subtree on one side facing a
    blob or gitlink on the other is a type change: reported once as
    MODIFIED, never descended.

    ``patch_fn`` computes patch text for blob changes inline (eager mode).
    When it is None, blob changes are emitted with ``patch=None`` and may
    be filled by a later pass.
    """

    def __init__(
        self,
        left: Snapshot,
        right: Snapshot,
        *,
        patch_fn: PatchFn | None = None,
        max_depth: int = 512,
    ) -> None:
        self._left = left
        self._right = right
        self._patch_fn = patch_fn
        self._max_depth = max_depth
        self.trees_visited = 0

    def compare(self) -> list[PathDiff]:
        return list(self.iter_diffs())

    def iter_diffs(self) -> Iterator[PathDiff]:
        self.trees_visited = 0
        stack = [self._frame("", self._left.tree, self._right.tree)]

        while stack:
            frame = stack[-1]
            name = next(frame.names, None)
            if name is None:
                stack.pop()
                continue

            full_path = join_path(frame.prefix, name)
            left = frame.left.get(name)
            right = frame.right.get(name)

            if left is None:
                yield _only(full_path, DiffStatus.ONLY_IN_RIGHT, right)  # type: ignore[arg-type]
            elif right is None:
                yield _only(full_path, DiffStatus.ONLY_IN_LEFT, left)
            elif left.kind is not right.kind:
                yield _modified(full_path, left, right)
            elif left.oid == right.oid:
                continue
            elif left.kind is EntryKind.BLOB:
                patch = self._patch_fn(full_path) if self._patch_fn is not None else None
                yield _modified(full_path, left, right, patch)
            elif left.kind is EntryKind.TREE:
                depth = len(stack)
                if depth > self._max_depth:
                    raise TreeDepthExceededError(full_path, self._max_depth)
                stack.append(
                    self._frame(
                        full_path,
                        self._left.lookup_tree(left.oid, full_path),
                        self._right.lookup_tree(right.oid, full_path),
                    )
                )
            else:
                # Gitlinks have no content here to diff
                yield _modified(full_path, left, right)

    def _frame(self, prefix: str, left: pygit2.Tree, right: pygit2.Tree) -> _Frame:
        frame = _Frame(
            prefix,
            build_entry_index(left, path=prefix),
            build_entry_index(right, path=prefix),
        )
        self.trees_visited += 1
        log.debug("compare.tree", path=prefix or "/", left=str(left.id), right=str(right.id))
        return frame


def _only(path: str, status: DiffStatus, entry: Entry) -> PathDiff:
    if status is DiffStatus.ONLY_IN_LEFT:
        return PathDiff(path, status, left_kind=entry.kind, left_oid=entry.oid)
    return PathDiff(path, status, right_kind=entry.kind, right_oid=entry.oid)


def _modified(path: str, left: Entry, right: Entry, patch: str | None = None) -> PathDiff:
    return PathDiff(
        path,
        DiffStatus.MODIFIED,
        patch=patch,
        left_kind=left.kind,
        left_oid=left.oid,
        right_kind=right.kind,
        right_oid=right.oid,
    )
