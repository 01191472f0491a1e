"""Tree comparison: entry index, comparator, patches and report."""

from treediff.diff.comparator import TreeComparator
from treediff.diff.index import build_entry_index
from treediff.diff.models import DiffReport, DiffStatus, Entry, EntryKind, PathDiff
from treediff.diff.patches import PatchGenerator, format_hunks
from treediff.diff.report import build_report, fill_patches
from treediff.diff.service import compare_refs, compare_trees

__all__ = [
    # Entry points
    "compare_refs",
    "compare_trees",
    # Components
    "TreeComparator",
    "PatchGenerator",
    "build_entry_index",
    "build_report",
    "fill_patches",
    "format_hunks",
    # Models
    "DiffReport",
    "DiffStatus",
    "Entry",
    "EntryKind",
    "PathDiff",
]
