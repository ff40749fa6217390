"""Top-level models for branch-pruner."""

from datetime import datetime, timedelta
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class BranchRef(BaseModel):
    """A branch ref as listed by the VCS, immutable once read."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(description="Short branch name without any remote prefix")
    full_ref: str = Field(description="Short ref as listed, may include the remote prefix")
    last_commit_time: datetime = Field(description="Committer date of the tip commit (UTC)")


class Classification(Enum):
    """Outcome of classifying a single branch."""

    EXCLUDED = "excluded"
    KEPT = "kept"
    STALE = "stale"


class ClassifiedBranch(BaseModel):
    """A branch together with its classification."""

    model_config = ConfigDict(frozen=True)

    ref: BranchRef
    classification: Classification


class DeletionResult(BaseModel):
    """Result of deleting (or previewing the deletion of) one branch."""

    branch: str = Field(description="Branch name passed to the delete command")
    target: str = Field(description="Display name, e.g. 'origin/feature-x'")
    success: bool
    error_message: str | None = None


class SweepSummary(BaseModel):
    """Summary of a sweep run."""

    dry_run: bool
    threshold: timedelta
    branches: list[ClassifiedBranch] = Field(default_factory=list)
    deletions: list[DeletionResult] = Field(default_factory=list)

    def _with(self, classification: Classification) -> list[BranchRef]:
        return [b.ref for b in self.branches if b.classification == classification]

    @property
    def stale(self) -> list[BranchRef]:
        """Branches classified as stale."""
        return self._with(Classification.STALE)

    @property
    def kept(self) -> list[BranchRef]:
        """Branches kept because they are recent enough."""
        return self._with(Classification.KEPT)

    @property
    def excluded(self) -> list[BranchRef]:
        """Branches protected by the exclusion set."""
        return self._with(Classification.EXCLUDED)

    @property
    def deleted_count(self) -> int:
        """Number of branches actually deleted.

        Returns:
            0 in dry-run mode
        """
        if self.dry_run:
            return 0
        return sum(1 for d in self.deletions if d.success)

    @property
    def failed_count(self) -> int:
        """Number of deletions that failed."""
        return sum(1 for d in self.deletions if not d.success)

    @property
    def has_failures(self) -> bool:
        """Check if any deletion failed.

        Returns:
            True if any deletion failed
        """
        return self.failed_count > 0
