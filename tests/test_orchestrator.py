"""Tests for SweepOrchestrator."""

import os
import time
from collections.abc import Iterator

import pytest
from rich.console import Console

from branch_pruner.config import BranchPrunerConfig, BranchScope
from branch_pruner.models import BranchRef
from branch_pruner.orchestrator import SweepOrchestrator
from branch_pruner.vcs.base import VCSManager
from branch_pruner.vcs.exceptions import FetchError, VCSOperationError
from tests.conftest import day, make_ref


class FakeManager(VCSManager):
    """In-memory repository recording every call."""

    def __init__(
        self,
        refs: list[BranchRef],
        fail_fetch: bool = False,
        fail_delete: set[str] | None = None,
    ) -> None:
        self.refs = refs
        self.fail_fetch = fail_fetch
        self.fail_delete = fail_delete or set()
        self.calls: list[tuple] = []

    def fetch_and_prune(self) -> None:
        self.calls.append(("fetch",))
        if self.fail_fetch:
            raise FetchError("could not read from remote repository")

    def namespace_for(self, scope: BranchScope, remote_name: str) -> str:
        return "refs/heads/" if scope == BranchScope.LOCAL else f"refs/remotes/{remote_name}/"

    def list_refs(self, namespace: str, remote_name: str | None = None) -> list[BranchRef]:
        self.calls.append(("list", namespace, remote_name))
        return self.refs

    def delete_branch(self, name: str, remote: str | None = None) -> None:
        self.calls.append(("delete", name, remote))
        if name in self.fail_delete:
            raise VCSOperationError(f"failed to push some refs: {name}")


@pytest.fixture
def console() -> Console:
    """Recording console."""
    return Console(record=True, width=200)


@pytest.fixture
def refs() -> list[BranchRef]:
    """Remote refs sorted by commit time descending."""
    return [
        make_ref("feature-y", day(920)),
        make_ref("feature-x", day(900)),
        make_ref("bugfix-z", day(500)),
        make_ref("main", day(1)),
    ]


class TestRun:
    """Tests for a full sweep."""

    def test_dry_run(self, refs: list[BranchRef], console: Console) -> None:
        """Test a dry run classifies everything and deletes nothing."""
        manager = FakeManager(refs)

        summary = SweepOrchestrator(BranchPrunerConfig(), manager, console).run(now=day(1000))

        assert [c for c in manager.calls if c[0] == "delete"] == []
        assert manager.calls[0] == ("fetch",)
        assert manager.calls[1] == ("list", "refs/remotes/origin/", "origin")
        assert [r.name for r in summary.stale] == ["feature-x", "bugfix-z"]
        assert [r.name for r in summary.kept] == ["feature-y"]
        assert [r.name for r in summary.excluded] == ["main"]

        output = console.export_text()
        assert "Dry Run Mode: true" in output
        assert "Skipping excluded branch: origin/main" in output
        assert "Found old branch: origin/feature-x" in output
        assert "Keeping recent branch: origin/feature-y" in output
        assert "Found 2 remote branches to delete." in output
        assert "[DRY RUN] Would delete remote branch: origin/bugfix-z" in output
        assert "Dry Run complete. No changes were made." in output

    def test_delete(self, refs: list[BranchRef], console: Console) -> None:
        """Test stale branches are deleted from the remote in listing order."""
        manager = FakeManager(refs)
        config = BranchPrunerConfig(dry_run=False)

        summary = SweepOrchestrator(config, manager, console).run(now=day(1000))

        deletes = [c for c in manager.calls if c[0] == "delete"]
        assert deletes == [("delete", "feature-x", "origin"), ("delete", "bugfix-z", "origin")]
        assert summary.deleted_count == 2
        assert "Cleanup complete." in console.export_text()

    def test_delete_failure_continues(self, refs: list[BranchRef], console: Console) -> None:
        """Test a failed delete does not stop the remaining deletes."""
        manager = FakeManager(refs, fail_delete={"feature-x"})
        config = BranchPrunerConfig(dry_run=False)

        summary = SweepOrchestrator(config, manager, console).run(now=day(1000))

        deletes = [c for c in manager.calls if c[0] == "delete"]
        assert deletes == [("delete", "feature-x", "origin"), ("delete", "bugfix-z", "origin")]
        assert summary.failed_count == 1
        assert summary.deleted_count == 1

    def test_nothing_to_delete(self, console: Console) -> None:
        """Test a sweep without stale branches reports so."""
        manager = FakeManager([make_ref("feature-y", day(999))])

        summary = SweepOrchestrator(BranchPrunerConfig(), manager, console).run(now=day(1000))

        assert summary.stale == []
        assert summary.deletions == []
        assert "No old remote branches found to delete." in console.export_text()

    def test_fetch_failure_is_fatal(self, refs: list[BranchRef], console: Console) -> None:
        """Test a fetch failure aborts before listing refs."""
        manager = FakeManager(refs, fail_fetch=True)

        with pytest.raises(FetchError):
            SweepOrchestrator(BranchPrunerConfig(), manager, console).run(now=day(1000))

        assert manager.calls == [("fetch",)]

    def test_skip_fetch(self, refs: list[BranchRef], console: Console) -> None:
        """Test fetch can be disabled."""
        manager = FakeManager(refs)

        SweepOrchestrator(BranchPrunerConfig(fetch=False), manager, console).run(now=day(1000))

        assert ("fetch",) not in manager.calls

    def test_local_scope(self, console: Console) -> None:
        """Test local scope lists heads and deletes without a remote."""
        manager = FakeManager([make_ref("old-local", day(1), remote=None)])
        config = BranchPrunerConfig(dry_run=False, scope=BranchScope.LOCAL)

        SweepOrchestrator(config, manager, console).run(now=day(1000))

        assert ("list", "refs/heads/", None) in manager.calls
        assert ("delete", "old-local", None) in manager.calls
        assert "Deleting local branch: old-local" in console.export_text()

    def test_destructive_header(self, console: Console) -> None:
        """Test the header reports the mode and threshold."""
        config = BranchPrunerConfig(dry_run=False, threshold_days=30)

        SweepOrchestrator(config, FakeManager([]), console).run(now=day(1000))

        output = console.export_text()
        assert "REMOTE BRANCH CLEANUP" in output
        assert "Dry Run Mode: false" in output
        assert "Threshold: Older than 30 days" in output

    def test_custom_exclusions_warn_about_unprotected_defaults(self, console: Console) -> None:
        """Test replacing the default exclusions names the defaults left unprotected."""
        config = BranchPrunerConfig(dry_run=False, excluded_branches={"keep-me", "main"})

        SweepOrchestrator(config, FakeManager([]), console).run(now=day(1000))

        output = console.export_text()
        assert "custom exclusions replace the defaults" in output
        assert "not protected: develop, master, production, release, test" in output

    def test_default_exclusions_do_not_warn(self, console: Console) -> None:
        """Test the default exclusion set prints no warning."""
        SweepOrchestrator(BranchPrunerConfig(), FakeManager([]), console).run(now=day(1000))

        assert "not protected" not in console.export_text()


@pytest.fixture
def local_timezone() -> Iterator[None]:
    """Run with the process timezone five hours behind UTC, abbreviated BPT."""
    if not hasattr(time, "tzset"):
        pytest.skip("time.tzset is not available on this platform")
    previous = os.environ.get("TZ")
    os.environ["TZ"] = "BPT+05"
    time.tzset()
    yield
    if previous is None:
        del os.environ["TZ"]
    else:
        os.environ["TZ"] = previous
    time.tzset()


class TestDateDisplay:
    """Tests for how commit dates and the cutoff are shown."""

    @pytest.mark.usefixtures("local_timezone")
    def test_dates_shown_in_local_time(self, console: Console) -> None:
        """Test commit dates and the cutoff are printed in the local timezone."""
        manager = FakeManager([make_ref("ancient", day(0))])

        SweepOrchestrator(BranchPrunerConfig(), manager, console).run(now=day(1000))

        output = console.export_text()
        assert "older than: Fri Jun 28 19:00:00 2002 BPT" in output
        assert "Found old branch: origin/ancient (Last commit: Fri Dec 31 19:00:00 1999 BPT)" in output
