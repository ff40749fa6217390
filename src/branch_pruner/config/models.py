"""Configuration models."""

from enum import Enum
from pathlib import Path
from typing import Annotated, Any

from pydantic import Field, field_validator
from pydantic_settings import (
    BaseSettings,
    DotEnvSettingsSource,
    NoDecode,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from branch_pruner.config.exceptions import InvalidConfigurationError

ENV_FILES = [".env.branchpruner", ".env"]

# Branch names that are never deleted, per scope. `origin` is what
# for-each-ref shortens the symbolic refs/remotes/origin/HEAD to.
DEFAULT_LOCAL_EXCLUSIONS = frozenset({"main", "master", "develop", "test", "release", "production"})
DEFAULT_REMOTE_EXCLUSIONS = DEFAULT_LOCAL_EXCLUSIONS | {"HEAD", "origin"}


class BranchScope(Enum):
    """Which branches a run operates on."""

    REMOTE = "remote"
    LOCAL = "local"

    @property
    def display_name(self) -> str:
        """Get display name for the scope.

        Returns:
            Human-readable name
        """
        return {
            BranchScope.REMOTE: "remote",
            BranchScope.LOCAL: "local",
        }[self]


class BranchPrunerConfig(BaseSettings):
    """Configuration for a branch-pruner run.

    Loaded once at start and frozen for the rest of the run.
    """

    dry_run: bool = Field(
        default=True,
        description="Preview deletions without touching any repository",
    )
    threshold_days: int = Field(
        default=90,
        description="Branches whose last commit is older than this many days are stale",
    )
    remote_name: str = Field(
        default="origin",
        description="Remote whose tracking branches are pruned",
    )
    scope: BranchScope = Field(
        default=BranchScope.REMOTE,
        description="Prune remote branches or local branches",
    )
    excluded_branches: Annotated[frozenset[str] | None, NoDecode] = Field(
        default=None,
        description="Branch names never deleted (default depends on scope)",
    )
    fetch: bool = Field(
        default=True,
        description="Run 'git fetch --all --prune' before listing refs",
    )

    model_config = SettingsConfigDict(
        env_file=ENV_FILES,
        env_file_encoding="utf-8",
        env_prefix="BRANCH_PRUNER_",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    def __init__(
        self,
        _env_file: str | Path | None = None,
        _settings_customise_sources_was_called: bool = False,
        **kwargs: Any,
    ) -> None:
        """Initialize configuration.

        Args:
            _env_file: Optional path to custom env file (use env_file for public API)
            _settings_customise_sources_was_called: Internal flag
            **kwargs: Additional configuration values

        Raises:
            InvalidConfigurationError: If the env file is specified but does not exist
        """
        env_file = kwargs.pop("env_file", _env_file)

        if env_file is not None:
            env_path = Path(env_file)
            if not env_path.exists():
                raise InvalidConfigurationError(f"Environment file not found: {env_file}")
            kwargs["_custom_env_file"] = env_path

        super().__init__(**kwargs)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Swap the default dotenv source for a custom env file when one was given.

        Args:
            settings_cls: The settings class being instantiated
            init_settings: Settings from __init__ arguments
            env_settings: Settings from environment variables
            dotenv_settings: Settings from .env files
            file_secret_settings: Settings from secret files

        Returns:
            Tuple of settings sources in priority order
        """
        init_kwargs = init_settings.init_kwargs  # type: ignore[attr-defined]
        custom_env_path = init_kwargs.get("_custom_env_file")

        if custom_env_path is not None:
            custom_dotenv = DotEnvSettingsSource(
                settings_cls,
                env_file=custom_env_path,
                env_file_encoding="utf-8",
            )
            return (init_settings, env_settings, custom_dotenv, file_secret_settings)

        return (init_settings, env_settings, dotenv_settings, file_secret_settings)

    @field_validator("threshold_days")
    @classmethod
    def validate_threshold(cls, v: int) -> int:
        """Reject negative thresholds.

        Args:
            v: Threshold in days

        Returns:
            The threshold unchanged

        Raises:
            InvalidConfigurationError: If the threshold is negative
        """
        if v < 0:
            raise InvalidConfigurationError(f"Threshold must be zero or more days, got {v}")
        return v

    @field_validator("scope", mode="before")
    @classmethod
    def parse_scope(cls, v: str | BranchScope) -> BranchScope:
        """Parse scope from string or enum.

        Args:
            v: Scope value

        Returns:
            Parsed BranchScope

        Raises:
            InvalidConfigurationError: If the scope value is invalid
        """
        if isinstance(v, BranchScope):
            return v
        if isinstance(v, str):
            try:
                return BranchScope(v.strip().lower())
            except ValueError as e:
                valid_scopes = [s.value for s in BranchScope]
                raise InvalidConfigurationError(f"Invalid scope: {v}. Valid options: {valid_scopes}") from e
        raise InvalidConfigurationError(f"Invalid scope type: {type(v)}")

    @field_validator("excluded_branches", mode="before")
    @classmethod
    def parse_excluded_branches(cls, v: str | list[str] | set[str] | frozenset[str] | None) -> frozenset[str] | None:
        """Accept a comma-separated string as well as any collection of names.

        Args:
            v: Raw exclusion value

        Returns:
            Frozen set of branch names, or None to use the scope default
        """
        if v is None:
            return None
        if isinstance(v, str):
            return frozenset(name.strip() for name in v.split(",") if name.strip())
        return frozenset(v)

    @field_validator("remote_name")
    @classmethod
    def validate_remote_name(cls, v: str) -> str:
        """Ensure the remote name is usable as a ref prefix.

        Args:
            v: Remote name

        Returns:
            Remote name without surrounding whitespace or slashes

        Raises:
            InvalidConfigurationError: If the remote name is empty
        """
        name = v.strip().strip("/")
        if not name:
            raise InvalidConfigurationError("Remote name must not be empty")
        return name

    @property
    def excluded_names(self) -> frozenset[str]:
        """Effective exclusion set for this run.

        Returns:
            The configured names, or the default for the current scope
        """
        if self.excluded_branches is not None:
            return self.excluded_branches
        if self.scope == BranchScope.LOCAL:
            return DEFAULT_LOCAL_EXCLUSIONS
        return DEFAULT_REMOTE_EXCLUSIONS

    @property
    def unprotected_defaults(self) -> frozenset[str]:
        """Default protected branch names left out by configured exclusions.

        Returns:
            Empty unless excluded_branches replaces the default set
        """
        if self.excluded_branches is None:
            return frozenset()
        return DEFAULT_LOCAL_EXCLUSIONS - self.excluded_branches

    @staticmethod
    def find_env_file() -> Path | None:
        """Find the environment file being used.

        Checks for .env.branchpruner and .env in current directory in that order.

        Returns:
            Path to the env file if found, None otherwise
        """
        for env_file in ENV_FILES:
            path = Path(env_file)
            if path.exists():
                return path.absolute()
        return None
