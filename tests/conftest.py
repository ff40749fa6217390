"""Shared fixtures for branch-pruner tests."""

from datetime import UTC, datetime, timedelta

import pytest

from branch_pruner.models import BranchRef

EPOCH = datetime(2000, 1, 1, tzinfo=UTC)


def day(n: float) -> datetime:
    """Instant `n` days after a fixed epoch."""
    return EPOCH + timedelta(days=n)


def make_ref(name: str, committed: datetime, remote: str | None = "origin") -> BranchRef:
    """Build a BranchRef the way the git manager lists it."""
    full_ref = f"{remote}/{name}" if remote else name
    return BranchRef(name=name, full_ref=full_ref, last_commit_time=committed)


@pytest.fixture(autouse=True)
def isolated_env(tmp_path_factory: pytest.TempPathFactory, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep developer env files and BRANCH_PRUNER_* variables out of tests."""
    monkeypatch.chdir(tmp_path_factory.mktemp("cwd"))
    for var in [
        "BRANCH_PRUNER_DRY_RUN",
        "BRANCH_PRUNER_THRESHOLD_DAYS",
        "BRANCH_PRUNER_REMOTE_NAME",
        "BRANCH_PRUNER_SCOPE",
        "BRANCH_PRUNER_EXCLUDED_BRANCHES",
        "BRANCH_PRUNER_FETCH",
    ]:
        monkeypatch.delenv(var, raising=False)
