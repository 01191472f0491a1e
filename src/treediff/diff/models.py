"""Serializable result models for tree comparison."""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class EntryKind(Enum):
    """Kind of object a tree entry points at."""

    TREE = "tree"
    BLOB = "blob"
    COMMIT = "commit"  # submodule gitlink

    @classmethod
    def from_type_str(cls, type_str: str) -> EntryKind:
        return cls(type_str)


class DiffStatus(Enum):
    """Classification of one differing path."""

    ONLY_IN_LEFT = "only_in_left"
    ONLY_IN_RIGHT = "only_in_right"
    MODIFIED = "modified"


@dataclass(frozen=True, slots=True)
class Entry:
    """Immediate child of a tree snapshot."""

    name: str
    kind: EntryKind
    oid: str
    filemode: int


@dataclass(frozen=True, slots=True)
class PathDiff:
    """Difference at a single full path."""

    path: str
    status: DiffStatus
    patch: str | None = None
    left_kind: EntryKind | None = None
    right_kind: EntryKind | None = None
    left_oid: str | None = None
    right_oid: str | None = None

    @property
    def is_blob_change(self) -> bool:
        """True when both sides are blobs with different content."""
        return (
            self.status is DiffStatus.MODIFIED
            and self.left_kind is EntryKind.BLOB
            and self.right_kind is EntryKind.BLOB
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": self.path,
            "status": self.status.value,
            "patch": self.patch,
            "left": _side(self.left_kind, self.left_oid),
            "right": _side(self.right_kind, self.right_oid),
        }


def _side(kind: EntryKind | None, oid: str | None) -> dict[str, str] | None:
    if kind is None or oid is None:
        return None
    return {"kind": kind.value, "oid": oid}


@dataclass(frozen=True, slots=True)
class DiffReport:
    """Ordered, immutable result of one tree-to-tree comparison."""

    entries: tuple[PathDiff, ...] = ()
    left_tree: str | None = None
    right_tree: str | None = None
    patches_included: bool = True
    _by_path: dict[str, PathDiff] = field(default_factory=dict, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        for entry in self.entries:
            if entry.path in self._by_path:
                raise ValueError(f"Duplicate path in report: {entry.path}")
            self._by_path[entry.path] = entry

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[PathDiff]:
        return iter(self.entries)

    @property
    def count(self) -> int:
        """Number of changed entries, all statuses."""
        return len(self.entries)

    @property
    def is_empty(self) -> bool:
        return not self.entries

    def get(self, path: str) -> PathDiff | None:
        return self._by_path.get(path)

    def paths(self) -> list[str]:
        return [e.path for e in self.entries]

    def counts_by_status(self) -> dict[DiffStatus, int]:
        counts = Counter(e.status for e in self.entries)
        return {status: counts.get(status, 0) for status in DiffStatus}

    def to_dict(self) -> dict[str, Any]:
        return {
            "left_tree": self.left_tree,
            "right_tree": self.right_tree,
            "count": self.count,
            "counts": {s.value: n for s, n in self.counts_by_status().items()},
            "patches_included": self.patches_included,
            "entries": [e.to_dict() for e in self.entries],
        }
