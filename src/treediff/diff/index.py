"""Name -> Entry index over the immediate children of one tree."""

from __future__ import annotations

import pygit2

from treediff.diff.models import Entry, EntryKind
from treediff.git.errors import TreeUnavailableError


def build_entry_index(tree: pygit2.Tree, *, path: str = "") -> dict[str, Entry]:
    """Index the immediate (non-recursive) children of ``tree``.

    The returned dict iterates in lexicographic name order.

    Raises:
        TreeUnavailableError: ``tree`` is not a readable tree object.
    """
    where = path or "<root>"
    if not isinstance(tree, pygit2.Tree):
        raise TreeUnavailableError(where, f"expected a tree, got {type(tree).__name__}")

    entries: dict[str, Entry] = {}
    try:
        for obj in tree:
            entries[obj.name] = Entry(
                name=obj.name,
                kind=EntryKind.from_type_str(obj.type_str),
                oid=str(obj.id),
                filemode=int(obj.filemode),
            )
    except (pygit2.GitError, ValueError) as e:
        raise TreeUnavailableError(where, str(e)) from e

    return {name: entries[name] for name in sorted(entries)}
