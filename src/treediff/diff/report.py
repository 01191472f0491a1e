"""DiffReport assembly, including the deferred patch pass."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace

import structlog

from treediff.diff.models import DiffReport, PathDiff

log = structlog.get_logger()


def fill_patches(
    diffs: Sequence[PathDiff],
    patch_fn: Callable[[str], str],
    *,
    workers: int = 1,
) -> list[PathDiff]:
    """Compute missing patches for blob changes, keeping the input order.

    Each path's patch is independent; with ``workers > 1`` they run on a
    thread pool and results are placed back by position.
    """
    pending = [i for i, d in enumerate(diffs) if d.is_blob_change and d.patch is None]
    if not pending:
        return list(diffs)

    paths = [diffs[i].path for i in pending]
    if workers > 1 and len(paths) > 1:
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="treediff-patch") as pool:
            patches = list(pool.map(patch_fn, paths))
    else:
        patches = [patch_fn(p) for p in paths]

    filled = list(diffs)
    for i, patch in zip(pending, patches, strict=True):
        filled[i] = replace(filled[i], patch=patch)
    log.debug("report.patches_filled", count=len(pending), workers=workers)
    return filled


def build_report(
    diffs: Sequence[PathDiff],
    *,
    left_tree: str | None = None,
    right_tree: str | None = None,
    patches_included: bool = True,
) -> DiffReport:
    return DiffReport(
        entries=tuple(diffs),
        left_tree=left_tree,
        right_tree=right_tree,
        patches_included=patches_included,
    )
