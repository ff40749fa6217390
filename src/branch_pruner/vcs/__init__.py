"""Version Control System abstraction for branch-pruner.

The classifier and pruner talk to a :class:`RefSource` and a
:class:`BranchDeleter`; :class:`~branch_pruner.vcs.git.GitManager` is the
Git implementation of both.
"""

from branch_pruner.vcs.base import BranchDeleter, RefSource, VCSManager
from branch_pruner.vcs.exceptions import (
    FetchError,
    NotARepositoryError,
    RefListingError,
    VCSError,
    VCSOperationError,
)

__all__ = [
    "BranchDeleter",
    "FetchError",
    "NotARepositoryError",
    "RefListingError",
    "RefSource",
    "VCSError",
    "VCSManager",
    "VCSOperationError",
]
