"""Git VCS implementation for branch-pruner."""

from branch_pruner.vcs.git.manager import GitManager, parse_ref_line

__all__ = [
    "GitManager",
    "parse_ref_line",
]
