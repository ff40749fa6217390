"""Git operations manager."""

import logging
from datetime import UTC, datetime
from pathlib import Path

import git

from branch_pruner.config.models import BranchScope
from branch_pruner.models import BranchRef
from branch_pruner.vcs.base import VCSManager
from branch_pruner.vcs.exceptions import (
    FetchError,
    NotARepositoryError,
    RefListingError,
    VCSOperationError,
)

logger = logging.getLogger(__name__)

# Symbolic refs such as origin/HEAD carry their target in the first field
REF_FORMAT = "%(symref)%09%(refname:short)|%(committerdate:unix)"


def parse_ref_line(line: str, remote_name: str | None = None) -> BranchRef | None:
    """Parse one line of ``git for-each-ref`` output.

    Args:
        line: A line in ``short_ref|unix_timestamp`` form
        remote_name: Remote prefix to strip from the short name

    Returns:
        The parsed ref, or None if the line is blank or malformed
    """
    line = line.strip()
    if not line:
        return None

    full_ref, sep, timestamp = line.rpartition("|")
    if not sep or not full_ref:
        logger.warning("Skipping malformed ref line (no timestamp): %r", line)
        return None

    try:
        last_commit_time = datetime.fromtimestamp(int(timestamp), tz=UTC)
    except (ValueError, OverflowError, OSError):
        logger.warning("Skipping malformed ref line (bad timestamp): %r", line)
        return None

    name = full_ref
    if remote_name and full_ref.startswith(f"{remote_name}/"):
        name = full_ref[len(remote_name) + 1 :]

    return BranchRef(name=name, full_ref=full_ref, last_commit_time=last_commit_time)


class GitManager(VCSManager):
    """Manages Git operations for branch-pruner."""

    def __init__(self, repo_path: str | Path | None = None) -> None:
        """Initialize Git manager.

        Args:
            repo_path: Path to Git repository (default: current directory)

        Raises:
            NotARepositoryError: If path is not a Git repository
        """
        self.repo_path = Path(repo_path or Path.cwd())

        try:
            self.repo = git.Repo(self.repo_path, search_parent_directories=True)
        except (git.InvalidGitRepositoryError, git.NoSuchPathError) as e:
            msg = f"Not a Git repository: {self.repo_path}"
            raise NotARepositoryError(msg) from e
        except git.GitError as e:
            msg = f"Git error: {e}"
            raise VCSOperationError(msg) from e

    def fetch_and_prune(self) -> None:
        """Fetch all remotes and prune deleted remote tracking branches.

        Raises:
            FetchError: If the fetch fails
        """
        logger.debug("Running git fetch --all --prune in %s", self.repo.working_dir)
        try:
            self.repo.git.fetch("--all", "--prune")
        except git.GitCommandError as e:
            msg = f"Failed to fetch and prune: {e.stderr.strip() if e.stderr else e}"
            raise FetchError(msg) from e

    def namespace_for(self, scope: BranchScope, remote_name: str) -> str:
        """Get the ref namespace that holds the branches of a scope.

        Args:
            scope: Local or remote branches
            remote_name: Remote whose tracking refs are meant in remote scope

        Returns:
            'refs/heads/' or 'refs/remotes/<remote_name>/'
        """
        if scope == BranchScope.LOCAL:
            return "refs/heads/"
        return f"refs/remotes/{remote_name}/"

    def list_refs(self, namespace: str, remote_name: str | None = None) -> list[BranchRef]:
        """List refs in a namespace, most recently committed first.

        Symbolic refs such as ``origin/HEAD`` are aliases, not branches, and
        are left out.

        Args:
            namespace: Ref namespace to list
            remote_name: Remote prefix to strip from short names, if any

        Returns:
            Branch refs sorted by commit time descending

        Raises:
            RefListingError: If git for-each-ref fails
        """
        try:
            output = self.repo.git.for_each_ref("--sort=-committerdate", namespace, f"--format={REF_FORMAT}")
        except git.GitCommandError as e:
            msg = f"Failed to list refs in {namespace}: {e}"
            raise RefListingError(msg) from e

        refs = []
        for line in output.splitlines():
            symref, _, rest = line.rpartition("\t")
            if symref.strip():
                logger.debug("Skipping symbolic ref %s -> %s", rest.partition("|")[0], symref.strip())
                continue
            ref = parse_ref_line(rest, remote_name)
            if ref is not None:
                refs.append(ref)

        logger.debug("Listed %d refs in %s", len(refs), namespace)
        return refs

    def delete_branch(self, name: str, remote: str | None = None) -> None:
        """Delete a branch.

        Remote branches are deleted with ``git push <remote> --delete``, local
        ones with ``git branch -D``.

        Args:
            name: Branch name without any remote prefix
            remote: Remote to delete from, or None for a local branch

        Raises:
            VCSOperationError: If the branch could not be deleted
        """
        try:
            if remote is None:
                self.repo.git.branch("-D", name)
            else:
                self.repo.git.push(remote, "--delete", name)
        except git.GitCommandError as e:
            target = f"{remote}/{name}" if remote else name
            msg = f"Failed to delete {target}: {e.stderr.strip() if e.stderr else e}"
            raise VCSOperationError(msg) from e
