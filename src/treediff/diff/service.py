"""Entry points: compare two snapshots or two repository refs."""

from __future__ import annotations

import time

import structlog

from treediff.config.models import CompareConfig
from treediff.diff.comparator import TreeComparator
from treediff.diff.models import DiffReport
from treediff.diff.patches import PatchGenerator
from treediff.diff.report import build_report, fill_patches
from treediff.git.models import RefSpec, Snapshot
from treediff.git.session import git_session

log = structlog.get_logger()


def compare_trees(
    left: Snapshot,
    right: Snapshot,
    *,
    config: CompareConfig | None = None,
    include_patches: bool = True,
) -> DiffReport:
    """Compare two loaned snapshots.

    Args:
        left: Left side snapshot.
        right: Right side snapshot.
        config: Comparison settings (patch mode, workers, context, depth guard).
        include_patches: False lists changed paths only and never runs the
            line diff.

    Raises:
        TreeUnavailableError: a root snapshot cannot be read
        SubtreeLookupError: a nested subtree cannot be read (aborts the comparison)
        TreeDepthExceededError: nesting exceeds ``config.max_depth``
    """
    config = config or CompareConfig()
    start = time.perf_counter()
    log.info(
        "compare.start",
        left=left.label,
        right=right.label,
        patch_mode=config.patch_mode if include_patches else "none",
    )

    generator = (
        PatchGenerator(left, right, context_lines=config.context_lines)
        if include_patches
        else None
    )
    patch_fn = (
        generator.patch_for if generator is not None and config.patch_mode == "eager" else None
    )
    comparator = TreeComparator(left, right, patch_fn=patch_fn, max_depth=config.max_depth)
    diffs = comparator.compare()

    if generator is not None and patch_fn is None:
        diffs = fill_patches(diffs, generator.patch_for, workers=config.patch_workers)

    report = build_report(
        diffs,
        left_tree=left.oid,
        right_tree=right.oid,
        patches_included=include_patches,
    )
    log.info(
        "compare.done",
        changed=report.count,
        trees_visited=comparator.trees_visited,
        elapsed_s=round(time.perf_counter() - start, 3),
    )
    return report


def compare_refs(
    left: RefSpec,
    right: RefSpec,
    *,
    config: CompareConfig | None = None,
    include_patches: bool = True,
) -> DiffReport:
    """Open both repositories, resolve both refs and compare their trees.

    Raises:
        NotARepositoryError: a repository path cannot be opened
        RefNotFoundError: a ref does not resolve to a commit
        TreeUnavailableError, SubtreeLookupError, TreeDepthExceededError:
            see ``compare_trees``
    """
    config = config or CompareConfig()
    with git_session() as session:
        left_snapshot = session.snapshot(left, config.left_label)
        right_snapshot = session.snapshot(right, config.right_label)
        return compare_trees(
            left_snapshot, right_snapshot, config=config, include_patches=include_patches
        )
