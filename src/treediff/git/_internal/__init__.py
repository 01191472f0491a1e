"""Internal components for git access - not part of public API."""

from treediff.git._internal.access import RepoAccess
from treediff.git._internal.errors import ErrorMapper, git_operation

__all__ = [
    "ErrorMapper",
    "RepoAccess",
    "git_operation",
]
