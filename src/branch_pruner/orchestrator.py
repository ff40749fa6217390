"""Sweep orchestration: fetch, list, classify, prune, report."""

import logging
from datetime import UTC, datetime

from rich.console import Console
from rich.markup import escape

from branch_pruner.classifier import BranchClassifier
from branch_pruner.config import BranchPrunerConfig, BranchScope
from branch_pruner.models import Classification, ClassifiedBranch, SweepSummary
from branch_pruner.pruner import BranchPruner
from branch_pruner.vcs.base import VCSManager

logger = logging.getLogger(__name__)

SEPARATOR = "-" * 50
DATE_FORMAT = "%a %b %d %H:%M:%S %Y %Z"


class SweepOrchestrator:
    """Runs one sweep over the branches of a repository.

    Coordinates:
    - fetching and pruning remote tracking refs
    - listing refs of the configured scope
    - classification against exclusions and age
    - deletion (or preview) of stale branches
    """

    def __init__(
        self,
        config: BranchPrunerConfig,
        manager: VCSManager,
        console: Console | None = None,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            config: Run configuration
            manager: Repository to sweep
            console: Console for status lines
        """
        self.config = config
        self.manager = manager
        self.console = console or Console()
        self.classifier = BranchClassifier(config)
        self.pruner = BranchPruner(manager, config, self.console)

    def run(self, now: datetime | None = None) -> SweepSummary:
        """Run a sweep.

        Args:
            now: Reference instant (default: current UTC time)

        Returns:
            SweepSummary with every classification and deletion result

        Raises:
            FetchError: If fetching from the remotes fails
            RefListingError: If refs cannot be listed
        """
        now = now or datetime.now(UTC)
        scope = self.config.scope.display_name

        self._display_header()

        if self.config.fetch:
            self.console.print("Fetching updates and pruning remote tracking branches...")
            self.manager.fetch_and_prune()

        cutoff = self.classifier.cutoff(now)
        since = cutoff.astimezone().strftime(DATE_FORMAT)
        self.console.print(f"Scanning for {scope} branches older than: {since}")

        namespace = self.manager.namespace_for(self.config.scope, self.config.remote_name)
        remote_name = self.config.remote_name if self.config.scope == BranchScope.REMOTE else None
        refs = self.manager.list_refs(namespace, remote_name)

        branches = self.classifier.classify_all(refs, now)
        for branch in branches:
            self._display_branch(branch)

        summary = SweepSummary(
            dry_run=self.config.dry_run,
            threshold=self.classifier.threshold,
            branches=branches,
        )

        stale = summary.stale
        if not stale:
            self.console.print(f"\n[green]No old {scope} branches found to delete.[/green]")
            return summary

        self.console.print(f"\n[yellow]Found {len(stale)} {scope} branches to delete.[/yellow]")
        summary.deletions = self.pruner.prune(stale)

        if self.config.dry_run:
            self.console.print("\n[yellow]Dry Run complete. No changes were made.[/yellow]")
            self.console.print("[yellow]Run with '--delete' to actually delete branches.[/yellow]")
        else:
            if summary.has_failures:
                logger.warning("%d of %d deletions failed", summary.failed_count, len(summary.deletions))
            self.console.print("\n[green]Cleanup complete.[/green]")

        return summary

    def _display_header(self) -> None:
        """Display mode, threshold and target of the run."""
        mode_color = "yellow" if self.config.dry_run else "red"
        self.console.print(SEPARATOR)
        self.console.print(f"[bold]{self.config.scope.display_name.upper()} BRANCH CLEANUP[/bold]")
        self.console.print(f"[{mode_color}]Dry Run Mode: {str(self.config.dry_run).lower()}[/{mode_color}]")
        self.console.print(f"Threshold: Older than {self.config.threshold_days} days")
        if self.config.scope == BranchScope.REMOTE:
            self.console.print(f"Remote: {escape(self.config.remote_name)}")
        unprotected = self.config.unprotected_defaults
        if unprotected:
            names = escape(", ".join(sorted(unprotected)))
            self.console.print(
                f"[yellow]Warning: custom exclusions replace the defaults; not protected: {names}[/yellow]"
            )
        self.console.print(SEPARATOR)

    def _display_branch(self, branch: ClassifiedBranch) -> None:
        """Display one classification line.

        Args:
            branch: Classified branch to display
        """
        name = escape(branch.ref.full_ref)
        committed = branch.ref.last_commit_time.astimezone().strftime(DATE_FORMAT)

        if branch.classification == Classification.EXCLUDED:
            self.console.print(f"[bright_black]Skipping excluded branch: {name}[/bright_black]")
        elif branch.classification == Classification.STALE:
            self.console.print(f"[yellow]Found old branch: {name} (Last commit: {committed})[/yellow]")
        else:
            self.console.print(f"[green]Keeping recent branch: {name} (Last commit: {committed})[/green]")
