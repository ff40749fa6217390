"""VCS exceptions for branch-pruner.

Every GitPython error raised while talking to a repository is wrapped in one
of these before it leaves :mod:`branch_pruner.vcs.git`.
"""


class VCSError(Exception):
    """Base exception for all VCS-related errors."""


class NotARepositoryError(VCSError):
    """Raised when a directory is not a valid repository."""


class VCSOperationError(VCSError):
    """Raised when a VCS operation fails."""


class FetchError(VCSOperationError):
    """Raised when fetching or pruning from the remotes fails."""


class RefListingError(VCSOperationError):
    """Raised when refs cannot be listed."""
