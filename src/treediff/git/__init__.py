"""Git collaborator: repository access, snapshots and session lifecycle."""

from treediff.git._internal.access import RepoAccess
from treediff.git.errors import (
    GitError,
    NotARepositoryError,
    RefNotFoundError,
    SubtreeLookupError,
    TreeDepthExceededError,
    TreeUnavailableError,
)
from treediff.git.models import RefSpec, Snapshot
from treediff.git.session import GitSession, git_session

__all__ = [
    # Access
    "RepoAccess",
    "GitSession",
    "git_session",
    # Models
    "RefSpec",
    "Snapshot",
    # Errors
    "GitError",
    "NotARepositoryError",
    "RefNotFoundError",
    "TreeUnavailableError",
    "SubtreeLookupError",
    "TreeDepthExceededError",
]
