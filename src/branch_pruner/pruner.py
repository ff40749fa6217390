"""Best-effort deletion of stale branches."""

import logging
from collections.abc import Iterable

from rich.console import Console
from rich.markup import escape

from branch_pruner.config import BranchPrunerConfig, BranchScope
from branch_pruner.models import BranchRef, DeletionResult
from branch_pruner.vcs.base import BranchDeleter
from branch_pruner.vcs.exceptions import VCSOperationError

logger = logging.getLogger(__name__)


class BranchPruner:
    """Deletes stale branches one by one.

    A failed deletion is reported and the remaining branches are still
    processed. Nothing is retried.
    """

    def __init__(
        self,
        deleter: BranchDeleter,
        config: BranchPrunerConfig,
        console: Console | None = None,
    ) -> None:
        """Initialize the pruner.

        Args:
            deleter: Collaborator that performs the actual deletes
            config: Run configuration (dry run, scope, remote)
            console: Console for status lines
        """
        self.deleter = deleter
        self.config = config
        self.console = console or Console()

    @property
    def remote(self) -> str | None:
        """Remote passed to the deleter, None when pruning local branches."""
        if self.config.scope == BranchScope.LOCAL:
            return None
        return self.config.remote_name

    def target_name(self, ref: BranchRef) -> str:
        """Display name of the ref being deleted."""
        if self.remote is None:
            return ref.name
        return f"{self.remote}/{ref.name}"

    def prune(self, stale: Iterable[BranchRef]) -> list[DeletionResult]:
        """Delete (or preview deleting) each stale branch.

        Args:
            stale: Branches classified as stale

        Returns:
            One DeletionResult per branch, in input order
        """
        return [self._prune_one(ref) for ref in stale]

    def _prune_one(self, ref: BranchRef) -> DeletionResult:
        scope = self.config.scope.display_name
        target = self.target_name(ref)
        shown = escape(target)

        if self.config.dry_run:
            self.console.print(f"[magenta][DRY RUN] Would delete {scope} branch: {shown}[/magenta]")
            return DeletionResult(branch=ref.name, target=target, success=True)

        self.console.print(f"[red]Deleting {scope} branch: {shown}[/red]")
        try:
            self.deleter.delete_branch(ref.name, remote=self.remote)
        except VCSOperationError as e:
            logger.error("Failed to delete %s: %s", target, e)
            self.console.print(f"[red]Failed to delete {shown}[/red]")
            return DeletionResult(branch=ref.name, target=target, success=False, error_message=str(e))

        self.console.print(f"[green]Successfully deleted {shown}[/green]")
        return DeletionResult(branch=ref.name, target=target, success=True)
