"""Configuration utilities for cachedfonts.

This module provides cache settings, loaded from environment variables
with pydantic-settings, and project root discovery for resolving a
relative cache directory.
"""

from __future__ import annotations

from datetime import timedelta
from pathlib import Path

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from cachedfonts.core.exceptions import ConfigurationError
from cachedfonts.core.models import (
    DEFAULT_MAX_OBJECTS,
    DEFAULT_STALE_PERIOD,
    RetentionPolicy,
)


ENV_PREFIX = "CACHEDFONTS_"
DEFAULT_CACHE_DIR = Path(".fonts")
DEFAULT_TIMEOUT = 30.0


class CacheSettings(BaseSettings):
    """Settings for a FontCache built with FontCache.from_directory().

    Environment variables:
        CACHEDFONTS_DIR: Cache directory path
        CACHEDFONTS_MAX_OBJECTS: Maximum number of cached fonts
        CACHEDFONTS_STALE_DAYS: Days an unused font is kept
        CACHEDFONTS_TIMEOUT: HTTP timeout in seconds
        CACHEDFONTS_VERBOSE: Enable verbose logging (true/false)

    Attributes:
        cache_dir: Directory for cached fonts; relative paths are resolved
            against the project root.
        max_objects: Maximum number of cached fonts.
        stale_period: How long an unused font is kept.
        timeout: HTTP timeout in seconds.
        verbose: Whether verbose logging starts enabled.
    """

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_ignore_empty=True,
        extra="ignore",
        frozen=True,
        populate_by_name=True,
    )

    cache_dir: Path = Field(
        default=DEFAULT_CACHE_DIR,
        validation_alias="CACHEDFONTS_DIR",
        description="Directory for cached fonts",
    )
    max_objects: int = Field(
        default=DEFAULT_MAX_OBJECTS, ge=1, description="Maximum number of cached fonts"
    )
    stale_period: timedelta = Field(
        default=DEFAULT_STALE_PERIOD,
        validation_alias="CACHEDFONTS_STALE_DAYS",
        description="How long an unused font is kept (whole days in the env)",
    )
    timeout: float = Field(
        default=DEFAULT_TIMEOUT, gt=0.0, description="HTTP timeout in seconds"
    )
    verbose: bool = Field(default=False, description="Enable verbose logging")

    @field_validator("cache_dir")
    @classmethod
    def expand_user(cls, v: Path) -> Path:
        """Expand a leading ~ in the cache directory."""
        return v.expanduser()

    @field_validator("stale_period", mode="before")
    @classmethod
    def parse_stale_days(cls, v: object) -> object:
        """Read a bare number, as set through the env, as whole days."""
        if isinstance(v, str | int) and not isinstance(v, bool):
            return timedelta(days=int(v))
        return v

    @field_validator("stale_period")
    @classmethod
    def validate_stale_period(cls, v: timedelta) -> timedelta:
        """Ensure the stale period is positive."""
        if v <= timedelta(0):
            raise ValueError("stale period must be positive")
        return v

    @property
    def retention(self) -> RetentionPolicy:
        """Retention policy built from max_objects and stale_period."""
        return RetentionPolicy(
            max_objects=self.max_objects, stale_period=self.stale_period
        )

    @classmethod
    def from_env(cls) -> CacheSettings:
        """Load settings from CACHEDFONTS_* environment variables.

        Returns:
            CacheSettings with defaults for unset or empty variables.

        Raises:
            ConfigurationError: If a variable has a malformed value.
        """
        try:
            return cls()
        except ValidationError as e:
            raise ConfigurationError(_describe(e)) from e


def _describe(error: ValidationError) -> str:
    """Name each offending environment variable and its value."""
    problems = []
    for item in error.errors():
        name = str(item["loc"][0]).upper() if item["loc"] else ""
        if not name.startswith(ENV_PREFIX):
            name = f"{ENV_PREFIX}{name}"
        problems.append(f"{name} has an invalid value: {item.get('input')!r}")
    return "; ".join(problems)


def find_project_root(start: Path | None = None) -> Path:
    """Find the project root directory by walking up from start directory.

    Searches for marker files in the following priority order:
    1. .cachedfonts - Explicit project marker
    2. pyproject.toml - Python project root
    3. .git - Version control root

    Args:
        start: Directory to start searching from. If None, uses current directory.

    Returns:
        Path to project root directory. Returns start directory if no markers found.

    Example:
        >>> from cachedfonts.config import find_project_root
        >>> root = find_project_root()
        >>> cache_dir = root / ".fonts"
    """
    if start is None:
        start = Path.cwd()

    markers = [".cachedfonts", "pyproject.toml", ".git"]
    current = start.resolve()

    for parent in [current, *current.parents]:
        for marker in markers:
            if (parent / marker).exists():
                return parent

    return start.resolve()
