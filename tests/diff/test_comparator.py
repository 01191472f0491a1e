"""Tests for the depth-first tree comparator."""

from __future__ import annotations

from collections.abc import Callable

import pygit2
import pytest
from pygit2.enums import FileMode

from treediff.diff.comparator import TreeComparator, join_path
from treediff.diff.models import DiffStatus, EntryKind
from treediff.git import RepoAccess, Snapshot, SubtreeLookupError, TreeDepthExceededError

SnapshotFactory = Callable[..., Snapshot]


def _compare(left: Snapshot, right: Snapshot, **kwargs) -> list[tuple[str, DiffStatus]]:
    return [(d.path, d.status) for d in TreeComparator(left, right, **kwargs).compare()]


class TestJoinPath:
    @pytest.mark.parametrize(
        ("prefix", "name", "expected"),
        [
            ("", "a", "a"),
            ("dir", "a", "dir/a"),
            ("dir/sub", "a.txt", "dir/sub/a.txt"),
        ],
    )
    def test_join(self, prefix: str, name: str, expected: str) -> None:
        assert join_path(prefix, name) == expected


class TestIdentity:
    def test_identical_snapshots_yield_nothing(self, snapshot: SnapshotFactory) -> None:
        spec = {"a": "x\n", "dir": {"b": "y\n", "deep": {"c": "z\n"}}}

        assert _compare(snapshot(spec), snapshot(spec, "right")) == []

    def test_snapshot_against_itself(self, snapshot: SnapshotFactory) -> None:
        snap = snapshot({"a": "x\n", "dir": {"b": "y\n"}})

        assert _compare(snap, snap) == []

    def test_both_empty(self, snapshot: SnapshotFactory) -> None:
        assert _compare(snapshot({}), snapshot({})) == []


class TestClassification:
    def test_one_sided_paths(self, snapshot: SnapshotFactory) -> None:
        left = snapshot({"gone.txt": "old\n", "keep": "k\n"})
        right = snapshot({"keep": "k\n", "new.txt": "new\n"})

        diffs = TreeComparator(left, right).compare()

        assert [(d.path, d.status) for d in diffs] == [
            ("gone.txt", DiffStatus.ONLY_IN_LEFT),
            ("new.txt", DiffStatus.ONLY_IN_RIGHT),
        ]
        assert all(d.patch is None for d in diffs)
        assert diffs[0].left_kind is EntryKind.BLOB and diffs[0].right_kind is None
        assert diffs[1].right_kind is EntryKind.BLOB and diffs[1].left_kind is None

    def test_one_sided_directory_reported_once(self, snapshot: SnapshotFactory) -> None:
        left = snapshot({"a": "x"})
        right = snapshot({"a": "x", "newdir": {"f1": "1", "f2": "2"}})

        assert _compare(left, right) == [("newdir", DiffStatus.ONLY_IN_RIGHT)]

    def test_modified_blob_uses_patch_fn(self, snapshot: SnapshotFactory) -> None:
        calls: list[str] = []

        def patch_fn(path: str) -> str:
            calls.append(path)
            return f"patch for {path}"

        left = snapshot({"a": "x\n", "same": "s\n"})
        right = snapshot({"a": "x2\n", "same": "s\n"})

        diffs = TreeComparator(left, right, patch_fn=patch_fn).compare()

        assert len(diffs) == 1
        assert diffs[0].status is DiffStatus.MODIFIED
        assert diffs[0].patch == "patch for a"
        assert diffs[0].is_blob_change
        assert calls == ["a"]

    def test_unchanged_blob_never_reaches_patch_fn(self, snapshot: SnapshotFactory) -> None:
        def patch_fn(path: str) -> str:
            raise AssertionError(f"diffed identical content at {path}")

        spec = {"a": "x\n", "dir": {"b": "y\n"}}

        assert TreeComparator(snapshot(spec), snapshot(spec), patch_fn=patch_fn).compare() == []

    def test_without_patch_fn_patch_is_none(self, snapshot: SnapshotFactory) -> None:
        diffs = TreeComparator(snapshot({"a": "1"}), snapshot({"a": "2"})).compare()

        assert diffs[0].status is DiffStatus.MODIFIED
        assert diffs[0].patch is None

    @pytest.mark.parametrize(
        ("left_spec", "right_spec"),
        [
            ({"p": "file\n"}, {"p": {"inner": "file\n"}}),
            ({"p": {"inner": "file\n"}}, {"p": "file\n"}),
        ],
    )
    def test_type_change_is_single_modified_without_recursion(
        self, snapshot: SnapshotFactory, left_spec: dict, right_spec: dict
    ) -> None:
        def patch_fn(path: str) -> str:
            raise AssertionError("type changes have no line patch")

        diffs = TreeComparator(
            snapshot(left_spec), snapshot(right_spec), patch_fn=patch_fn
        ).compare()

        assert [(d.path, d.status, d.patch) for d in diffs] == [
            ("p", DiffStatus.MODIFIED, None)
        ]
        assert not diffs[0].is_blob_change
        assert {diffs[0].left_kind, diffs[0].right_kind} == {EntryKind.BLOB, EntryKind.TREE}

    def test_gitlink_change_is_modified_without_patch(
        self,
        snapshot: SnapshotFactory,
        commit: Callable[..., str],
        gitlink,
    ) -> None:
        first = commit({"f": "1"})
        second = commit({"f": "2"})

        diffs = TreeComparator(
            snapshot({"sub": gitlink(first)}),
            snapshot({"sub": gitlink(second)}),
            patch_fn=lambda path: "unexpected",
        ).compare()

        assert [(d.path, d.status, d.patch) for d in diffs] == [
            ("sub", DiffStatus.MODIFIED, None)
        ]
        assert diffs[0].left_kind is EntryKind.COMMIT


class TestRecursion:
    def test_nested_change_reports_full_path_only(self, snapshot: SnapshotFactory) -> None:
        left = snapshot({"a": {"b": {"c": {"leaf.txt": "old\n"}, "other": "o"}}, "top": "t"})
        right = snapshot({"a": {"b": {"c": {"leaf.txt": "new\n"}, "other": "o"}}, "top": "t"})

        assert _compare(left, right) == [("a/b/c/leaf.txt", DiffStatus.MODIFIED)]

    def test_output_follows_recursive_preorder(self, snapshot: SnapshotFactory) -> None:
        left = snapshot(
            {
                "a.txt": "1",
                "b": {"x": "1", "y": {"z": "1"}},
                "c.txt": "1",
                "d": {"only-left": "1"},
            }
        )
        right = snapshot(
            {
                "a.txt": "2",
                "b": {"x": "2", "y": {"z": "2", "new": "n"}},
                "c.txt": "2",
                "d": {},
            }
        )

        assert _compare(left, right) == [
            ("a.txt", DiffStatus.MODIFIED),
            ("b/x", DiffStatus.MODIFIED),
            ("b/y/new", DiffStatus.ONLY_IN_RIGHT),
            ("b/y/z", DiffStatus.MODIFIED),
            ("c.txt", DiffStatus.MODIFIED),
            ("d/only-left", DiffStatus.ONLY_IN_LEFT),
        ]

    def test_identical_subtrees_are_not_descended(self, snapshot: SnapshotFactory) -> None:
        shared = {"deep": {"deeper": {"f": "same"}}}
        left = snapshot({"shared": shared, "x": "1"})
        right = snapshot({"shared": shared, "x": "2"})
        comparator = TreeComparator(left, right)

        comparator.compare()

        assert comparator.trees_visited == 1

    def test_scenario_from_two_releases(self, snapshot: SnapshotFactory) -> None:
        left = snapshot({"a": "x\n", "dir": {"b": "y\n"}})
        right = snapshot({"a": "x2\n", "dir": {"b": "y\n"}, "c": "z\n"})

        diffs = TreeComparator(left, right, patch_fn=lambda path: f"<{path}>").compare()

        assert [(d.path, d.status, d.patch) for d in diffs] == [
            ("a", DiffStatus.MODIFIED, "<a>"),
            ("c", DiffStatus.ONLY_IN_RIGHT, None),
        ]


class TestFailures:
    def test_subtree_lookup_failure_aborts(
        self, snapshot: SnapshotFactory, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        left = snapshot({"a": "1", "dir": {"f": "1"}, "z": "1"})
        right = snapshot({"a": "2", "dir": {"f": "2"}, "z": "2"})

        def broken_lookup(oid, path):
            raise SubtreeLookupError(path, str(oid))

        monkeypatch.setattr(left.access, "lookup_tree", broken_lookup)

        with pytest.raises(SubtreeLookupError, match="dir") as exc_info:
            TreeComparator(left, right).compare()
        assert exc_info.value.path == "dir"

    def test_depth_guard(self, snapshot: SnapshotFactory) -> None:
        left = snapshot({"a": {"b": {"c": {"f": "1"}}}})
        right = snapshot({"a": {"b": {"c": {"f": "2"}}}})

        with pytest.raises(TreeDepthExceededError) as exc_info:
            TreeComparator(left, right, max_depth=2).compare()
        assert exc_info.value.path == "a/b/c"

        assert _compare(left, right, max_depth=3) == [("a/b/c/f", DiffStatus.MODIFIED)]

    def test_deep_tree_beyond_recursion_limit(
        self, repo: pygit2.Repository, access: RepoAccess
    ) -> None:
        depth = 1200

        def chain(leaf: bytes, label: str) -> Snapshot:
            builder = repo.TreeBuilder()
            builder.insert("leaf", repo.create_blob(leaf), FileMode.BLOB)
            oid = builder.write()
            for _ in range(depth):
                builder = repo.TreeBuilder()
                builder.insert("d", oid, FileMode.TREE)
                oid = builder.write()
            return Snapshot(access=access, tree=access.lookup_tree(oid, "<root>"), label=label)

        diffs = _compare(chain(b"1", "left"), chain(b"2", "right"), max_depth=depth + 1)

        assert diffs == [("/".join(["d"] * depth + ["leaf"]), DiffStatus.MODIFIED)]
