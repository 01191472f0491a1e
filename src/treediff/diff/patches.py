"""Unified-diff text for a single changed blob path."""

from __future__ import annotations

import threading

import pygit2
import structlog

from treediff.git.errors import GitError
from treediff.git.models import Snapshot

log = structlog.get_logger()

# Line origins printed with their marker; EOF-newline origins carry their own text
_PREFIXED_ORIGINS = frozenset(" +-")


def format_hunks(patch: pygit2.Patch) -> str:
    """Concatenate hunk headers and prefixed body lines of ``patch``."""
    parts: list[str] = []
    for hunk in patch.hunks:
        parts.append(hunk.header)
        for line in hunk.lines:
            if line.origin in _PREFIXED_ORIGINS:
                parts.append(line.origin)
            parts.append(line.content)
    return "".join(parts)


class PatchGenerator:
    """Produces patch text for blob paths known to differ between two snapshots.

    For snapshots from one repository the engine's tree-to-tree diff is run
    once, its deltas are indexed by new path, and each request is filtered
    to the matching delta. Snapshots from different repositories are
    patched blob-to-blob, since neither object store holds both sides.

    Failures never propagate: the path gets empty patch text and a
    ``patch.failed`` warning is logged.
    """

    def __init__(self, left: Snapshot, right: Snapshot, *, context_lines: int = 3) -> None:
        self._left = left
        self._right = right
        self._context_lines = context_lines
        self._same_repo = left.access.same_repository(right.access)
        self._diff: pygit2.Diff | None = None
        self._positions: dict[str, list[int]] = {}
        self._lock = threading.Lock()

    def patch_for(self, path: str) -> str:
        """Hunks of every delta for ``path``, in diff order.

        A file that switches between regular file and symlink shows up as a
        deletion plus an addition; both halves are included.
        """
        try:
            if self._same_repo:
                patches = self._tree_patches(path)
            else:
                patches = [self._blob_patch(path)]
        except (GitError, pygit2.GitError, KeyError, ValueError) as e:
            log.warning("patch.failed", path=path, error=str(e))
            return ""

        if not patches:
            log.warning("patch.failed", path=path, error="no delta for path")
            return ""
        text = []
        for patch in patches:
            if patch.delta.is_binary:
                log.debug("patch.binary", path=path)
                continue
            text.append(format_hunks(patch))
        return "".join(text)

    def _tree_patches(self, path: str) -> list[pygit2.Patch]:
        # Patch creation updates delta flags inside the shared diff
        with self._lock:
            diff = self._tree_diff()
            patches = (diff[i] for i in self._positions.get(path, ()))
            return [p for p in patches if p is not None]

    def _tree_diff(self) -> pygit2.Diff:
        if self._diff is None:
            diff = self._left.access.diff_trees(
                self._left.tree, self._right.tree, context_lines=self._context_lines
            )
            for i, delta in enumerate(diff.deltas):
                self._positions.setdefault(delta.new_file.path, []).append(i)
            log.debug("patch.tree_diff", deltas=len(diff), paths=len(self._positions))
            self._diff = diff
        return self._diff

    def _blob_patch(self, path: str) -> pygit2.Patch:
        left_blob = self._left.access.lookup_blob(self._left.tree[path].id)
        right_blob = self._right.access.lookup_blob(self._right.tree[path].id)
        return self._left.access.diff_blobs(
            left_blob, right_blob, path, context_lines=self._context_lines
        )
