"""Configuration management for branch-pruner."""

from branch_pruner.config.exceptions import (
    ConfigurationError,
    InvalidConfigurationError,
)
from branch_pruner.config.models import BranchPrunerConfig, BranchScope

__all__ = [
    "BranchPrunerConfig",
    "BranchScope",
    "ConfigurationError",
    "InvalidConfigurationError",
]
