"""Abstract collaborators for version control operations.

The classifier and pruner only depend on these interfaces, so local and
remote pruning share one code path and tests can substitute fakes.
"""

from abc import ABC, abstractmethod

from branch_pruner.config.models import BranchScope
from branch_pruner.models import BranchRef


class RefSource(ABC):
    """Lists branch refs with their last commit time."""

    @abstractmethod
    def fetch_and_prune(self) -> None:
        """Update remote tracking refs and drop the ones deleted upstream.

        Raises:
            FetchError: If the remotes cannot be reached
        """

    @abstractmethod
    def namespace_for(self, scope: BranchScope, remote_name: str) -> str:
        """Get the ref namespace that holds the branches of a scope.

        Args:
            scope: Local or remote branches
            remote_name: Remote whose tracking refs are meant in remote scope

        Returns:
            Ref namespace, e.g. 'refs/remotes/origin/'
        """

    @abstractmethod
    def list_refs(self, namespace: str, remote_name: str | None = None) -> list[BranchRef]:
        """List refs in a namespace, most recently committed first.

        Args:
            namespace: Ref namespace to list
            remote_name: Remote prefix to strip from short names, if any

        Returns:
            Branch refs sorted by commit time descending. Unparseable entries
            are skipped.

        Raises:
            RefListingError: If the refs cannot be listed at all
        """


class BranchDeleter(ABC):
    """Deletes a single branch."""

    @abstractmethod
    def delete_branch(self, name: str, remote: str | None = None) -> None:
        """Delete a branch.

        Args:
            name: Branch name without any remote prefix
            remote: Remote to delete from, or None for a local branch

        Raises:
            VCSOperationError: If the branch could not be deleted
        """


class VCSManager(RefSource, BranchDeleter):
    """A repository that can both list and delete branches."""
