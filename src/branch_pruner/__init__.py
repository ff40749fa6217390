"""branch-pruner: delete stale git branches older than a configurable age."""

__version__ = "0.1.0"
