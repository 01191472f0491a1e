"""Git module error types."""


class GitError(Exception):
    """Base error for git operations."""

    pass


class NotARepositoryError(GitError):
    """Path is not a git repository."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Not a git repository: {path}")
        self.path = path


class RefNotFoundError(GitError):
    """Reference (branch, tag, commit) not found."""

    def __init__(self, ref: str, repo: str | None = None) -> None:
        where = f" in {repo}" if repo else ""
        super().__init__(f"Reference not found{where}: {ref}")
        self.ref = ref
        self.repo = repo


class TreeUnavailableError(GitError):
    """Commit or snapshot has no readable tree."""

    def __init__(self, ref: str, reason: str | None = None) -> None:
        reason_part = f": {reason}" if reason else ""
        super().__init__(f"Tree unavailable for {ref}{reason_part}")
        self.ref = ref
        self.reason = reason


# =============================================================================
# Traversal Errors
# =============================================================================


class SubtreeLookupError(GitError):
    """A subtree referenced by a snapshot could not be read."""

    def __init__(self, path: str, oid: str) -> None:
        super().__init__(f"Failed to look up subtree {path!r} ({oid})")
        self.path = path
        self.oid = oid


class TreeDepthExceededError(GitError):
    """Subtrees nest deeper than the configured limit."""

    def __init__(self, path: str, max_depth: int) -> None:
        super().__init__(f"Tree nesting exceeds {max_depth} levels at {path!r}")
        self.path = path
        self.max_depth = max_depth
