"""Command-line interface for branch-pruner."""

import logging
import sys
from typing import Any

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from branch_pruner import __version__
from branch_pruner.config import BranchPrunerConfig, BranchScope, ConfigurationError
from branch_pruner.models import SweepSummary
from branch_pruner.orchestrator import SweepOrchestrator
from branch_pruner.vcs import VCSError
from branch_pruner.vcs.git import GitManager

app = typer.Typer(
    name="branch-pruner",
    help="Delete stale git branches older than a given number of days",
    add_completion=False,
)
console = Console()

# Help text constants
VERBOSE_OUTPUT_HELP = "Verbose output"
ENV_FILE_HELP = "Path to custom environment file (default: .env.branchpruner or .env)"


def setup_logging(verbose: bool) -> None:
    """Setup logging configuration.

    Args:
        verbose: If True, enable debug logging
    """
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
    )

    # GitPython logs every command it runs at DEBUG
    if not verbose:
        logging.getLogger("git").setLevel(logging.WARNING)


def build_overrides(
    delete: bool,
    threshold: int | None,
    remote: str | None,
    local: bool,
    exclude: list[str] | None,
    no_fetch: bool,
) -> dict[str, Any]:
    """Translate CLI options into configuration overrides.

    Only options given on the command line are returned, so environment
    variables and env files still apply to everything else.

    Returns:
        Keyword arguments for BranchPrunerConfig
    """
    overrides: dict[str, Any] = {}
    if delete:
        overrides["dry_run"] = False
    if threshold is not None:
        overrides["threshold_days"] = threshold
    if remote is not None:
        overrides["remote_name"] = remote
    if local:
        overrides["scope"] = BranchScope.LOCAL
    if exclude:
        overrides["excluded_branches"] = exclude
    if no_fetch:
        overrides["fetch"] = False
    return overrides


def _display_sweep_results(summary: SweepSummary) -> None:
    """Display sweep results.

    Args:
        summary: Summary of the sweep to display
    """
    console.print("\n[bold]Sweep Summary:[/bold]")
    console.print(f"  Branches scanned: {len(summary.branches)}")
    console.print(f"  Excluded: {len(summary.excluded)}")
    console.print(f"  Kept: {len(summary.kept)}")
    console.print(f"  [yellow]Stale: {len(summary.stale)}[/yellow]")
    if not summary.dry_run:
        console.print(f"  [green]Deleted: {summary.deleted_count}[/green]")
        if summary.has_failures:
            console.print(f"  [red]Failed: {summary.failed_count}[/red]")
            for deletion in summary.deletions:
                if not deletion.success:
                    reason = escape(deletion.error_message or "")
                    console.print(f"      [red]{escape(deletion.target)}: {reason}[/red]")


@app.command()
def sweep(
    delete: bool = typer.Option(
        False,
        "--delete",
        help="Execute deletion (disable dry-run)",
    ),
    threshold: int | None = typer.Option(
        None,
        "--threshold",
        "-t",
        help="Days threshold (default: 90)",
    ),
    remote: str | None = typer.Option(
        None,
        "--remote",
        "-r",
        help="Remote name (default: origin)",
    ),
    local: bool = typer.Option(
        False,
        "--local",
        help="Prune local branches instead of remote ones",
    ),
    exclude: list[str] | None = typer.Option(
        None,
        "--exclude",
        "-x",
        help="Branch name to protect; repeat for several. Replaces the default set, so name main etc. too to keep them",
    ),
    no_fetch: bool = typer.Option(
        False,
        "--no-fetch",
        help="Skip 'git fetch --all --prune' before scanning",
    ),
    repo: str | None = typer.Option(
        None,
        "--repo",
        help="Path to the repository (default: current directory)",
    ),
    env_file: str | None = typer.Option(
        None,
        "--env-file",
        help=ENV_FILE_HELP,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help=VERBOSE_OUTPUT_HELP,
    ),
) -> None:
    """Delete branches whose last commit is older than the threshold.

    Runs as a dry run unless --delete is given.
    """
    setup_logging(verbose)

    try:
        overrides = build_overrides(delete, threshold, remote, local, exclude, no_fetch)
        config = BranchPrunerConfig(env_file=env_file, **overrides)

        manager = GitManager(repo)
        orchestrator = SweepOrchestrator(config, manager, console)

        summary = orchestrator.run()
        _display_sweep_results(summary)

    except ConfigurationError as e:
        console.print(f"[red]Configuration error: {escape(str(e))}[/red]")
        sys.exit(1)
    except VCSError as e:
        console.print(f"[red]Git error: {escape(str(e))}[/red]")
        sys.exit(1)
    except Exception as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        if verbose:
            console.print_exception()
        sys.exit(1)


@app.command()
def config(
    env_file: str | None = typer.Option(
        None,
        "--env-file",
        help=ENV_FILE_HELP,
    ),
) -> None:
    """Show current configuration."""
    try:
        cfg = BranchPrunerConfig(env_file=env_file)
        env_path = BranchPrunerConfig.find_env_file() if env_file is None else env_file
        console.print("[bold]Current Configuration:[/bold]\n")
        console.print(f"  Env file: {env_path or 'None'}")
        console.print(f"  Dry run: {cfg.dry_run}")
        console.print(f"  Threshold: {cfg.threshold_days} days")
        console.print(f"  Scope: {cfg.scope.display_name}")
        console.print(f"  Remote: {cfg.remote_name}")
        console.print(f"  Fetch before scan: {cfg.fetch}")
        console.print(f"  Excluded branches: {', '.join(sorted(cfg.excluded_names)) or 'None'}")
    except ConfigurationError as e:
        console.print(f"[red]Configuration error: {escape(str(e))}[/red]")
        sys.exit(1)


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"branch-pruner version {__version__}")


if __name__ == "__main__":
    app()
