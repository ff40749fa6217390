"""Branch classification by exclusion set and age."""

import logging
from collections.abc import Iterable
from datetime import datetime, timedelta

from branch_pruner.config import BranchPrunerConfig, BranchScope
from branch_pruner.models import BranchRef, Classification, ClassifiedBranch

logger = logging.getLogger(__name__)


class BranchClassifier:
    """Classifies branch refs as excluded, kept or stale.

    A branch is stale when its last commit is strictly older than
    ``now - threshold``. A commit exactly at the boundary is kept, and a
    zero-day threshold makes anything committed before ``now`` stale: the
    comparison is on raw durations, not calendar days.
    """

    def __init__(self, config: BranchPrunerConfig) -> None:
        """Initialize the classifier.

        Args:
            config: Run configuration (threshold, exclusions, remote, scope)
        """
        self.config = config
        self.threshold = timedelta(days=config.threshold_days)
        self.excluded_names = config.excluded_names

    def normalize_name(self, full_ref: str) -> str:
        """Strip the remote prefix from a short ref name.

        Args:
            full_ref: Short ref as listed, e.g. 'origin/feature-x'

        Returns:
            Branch name without the remote prefix. Local refs are returned as is.
        """
        if self.config.scope != BranchScope.REMOTE:
            return full_ref
        prefix = f"{self.config.remote_name}/"
        if full_ref.startswith(prefix):
            return full_ref[len(prefix) :]
        return full_ref

    def is_excluded(self, ref: BranchRef) -> bool:
        """Check the exclusion set against the normalized and the full name.

        Args:
            ref: Branch ref to check

        Returns:
            True if either name is an exact member of the exclusion set
        """
        return self.normalize_name(ref.full_ref) in self.excluded_names or ref.full_ref in self.excluded_names

    def cutoff(self, now: datetime) -> datetime:
        """Instant before which a last commit makes a branch stale."""
        return now - self.threshold

    def classify(self, ref: BranchRef, now: datetime) -> Classification:
        """Classify a single branch.

        Args:
            ref: Branch ref to classify
            now: Reference instant for the age computation

        Returns:
            EXCLUDED if protected by name, STALE if older than the threshold,
            KEPT otherwise
        """
        if self.is_excluded(ref):
            return Classification.EXCLUDED

        if ref.last_commit_time < self.cutoff(now):
            return Classification.STALE
        return Classification.KEPT

    def classify_all(self, refs: Iterable[BranchRef], now: datetime) -> list[ClassifiedBranch]:
        """Classify refs, preserving their order.

        Args:
            refs: Branch refs to classify
            now: Reference instant for the age computation

        Returns:
            One ClassifiedBranch per ref
        """
        classified = [ClassifiedBranch(ref=ref, classification=self.classify(ref, now)) for ref in refs]
        logger.debug(
            "Classified %d branches against cutoff %s",
            len(classified),
            self.cutoff(now).isoformat(),
        )
        return classified
