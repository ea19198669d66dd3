"""Unit tests for configuration utilities.

These tests verify CacheSettings loading from environment variables and
find_project_root discovery from marker files.
"""

from __future__ import annotations

from datetime import timedelta
from pathlib import Path

import pytest

from cachedfonts.config import CacheSettings, find_project_root
from cachedfonts.core.exceptions import ConfigurationError


ENV_NAMES = (
    "CACHEDFONTS_DIR",
    "CACHEDFONTS_MAX_OBJECTS",
    "CACHEDFONTS_STALE_DAYS",
    "CACHEDFONTS_TIMEOUT",
    "CACHEDFONTS_VERBOSE",
)


@pytest.fixture
def env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    """Monkeypatch with every CACHEDFONTS_* variable cleared."""
    for name in ENV_NAMES:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.mark.core
@pytest.mark.tier(0)
class TestCacheSettingsFromEnv:
    """Tests for CacheSettings.from_env()."""

    def test_defaults_when_unset(self, env: pytest.MonkeyPatch) -> None:
        """An empty environment should give the defaults."""
        settings = CacheSettings.from_env()

        assert settings.cache_dir == Path(".fonts")
        assert settings.max_objects == 200
        assert settings.stale_period == timedelta(days=365)
        assert settings.timeout == 30.0
        assert settings.verbose is False

    def test_reads_every_variable(self, env: pytest.MonkeyPatch) -> None:
        """Each variable should override its default."""
        env.setenv("CACHEDFONTS_DIR", "/tmp/fonts")
        env.setenv("CACHEDFONTS_MAX_OBJECTS", "10")
        env.setenv("CACHEDFONTS_STALE_DAYS", "7")
        env.setenv("CACHEDFONTS_TIMEOUT", "2.5")
        env.setenv("CACHEDFONTS_VERBOSE", "yes")

        settings = CacheSettings.from_env()

        assert settings.cache_dir == Path("/tmp/fonts")
        assert settings.max_objects == 10
        assert settings.stale_period == timedelta(days=7)
        assert settings.timeout == 2.5
        assert settings.verbose is True

    def test_empty_variables_use_defaults(self, env: pytest.MonkeyPatch) -> None:
        """Variables set to an empty string should be treated as unset."""
        env.setenv("CACHEDFONTS_MAX_OBJECTS", "")
        env.setenv("CACHEDFONTS_VERBOSE", "")

        settings = CacheSettings.from_env()

        assert settings.max_objects == 200
        assert settings.verbose is False

    def test_dir_expands_user(self, env: pytest.MonkeyPatch) -> None:
        """A leading ~ in CACHEDFONTS_DIR should be expanded."""
        env.setenv("CACHEDFONTS_DIR", "~/fonts")
        assert CacheSettings.from_env().cache_dir == Path("~/fonts").expanduser()

    def test_retention_property(self, env: pytest.MonkeyPatch) -> None:
        """retention should combine max_objects and stale_period."""
        settings = CacheSettings(max_objects=3, stale_period=timedelta(days=2))

        assert settings.retention.max_objects == 3
        assert settings.retention.stale_period == timedelta(days=2)

    def test_settings_are_frozen(self, env: pytest.MonkeyPatch) -> None:
        """Settings should not be mutable after loading."""
        from pydantic import ValidationError

        settings = CacheSettings.from_env()
        with pytest.raises(ValidationError):
            settings.max_objects = 5

    def test_model_copy_overrides_cache_dir(self, env: pytest.MonkeyPatch) -> None:
        """model_copy() should replace a single field, as the CLI does."""
        settings = CacheSettings.from_env().model_copy(
            update={"cache_dir": Path("/srv/fonts")}
        )

        assert settings.cache_dir == Path("/srv/fonts")
        assert settings.max_objects == 200

    @pytest.mark.parametrize(
        ("name", "value"),
        [
            ("CACHEDFONTS_MAX_OBJECTS", "many"),
            ("CACHEDFONTS_MAX_OBJECTS", "0"),
            ("CACHEDFONTS_STALE_DAYS", "1.5"),
            ("CACHEDFONTS_STALE_DAYS", "-3"),
            ("CACHEDFONTS_TIMEOUT", "soon"),
            ("CACHEDFONTS_TIMEOUT", "0"),
            ("CACHEDFONTS_VERBOSE", "maybe"),
        ],
    )
    def test_malformed_values_raise(
        self, env: pytest.MonkeyPatch, name: str, value: str
    ) -> None:
        """Malformed values should raise ConfigurationError naming the variable."""
        env.setenv(name, value)

        with pytest.raises(ConfigurationError, match=name) as exc_info:
            CacheSettings.from_env()

        assert exc_info.value.__cause__ is not None


@pytest.mark.core
@pytest.mark.tier(0)
class TestFindProjectRoot:
    """Tests for find_project_root utility."""

    def test_find_project_root_with_cachedfonts_marker(self, tmp_path: Path) -> None:
        """Should find directory containing .cachedfonts marker."""
        (tmp_path / ".cachedfonts").touch()
        subdir = tmp_path / "subdir" / "deeper"
        subdir.mkdir(parents=True)

        assert find_project_root(start=subdir) == tmp_path.resolve()

    def test_find_project_root_with_pyproject_toml(self, tmp_path: Path) -> None:
        """Should find directory containing pyproject.toml marker."""
        (tmp_path / "pyproject.toml").touch()
        subdir = tmp_path / "src" / "myapp"
        subdir.mkdir(parents=True)

        assert find_project_root(start=subdir) == tmp_path.resolve()

    def test_nearest_marker_wins(self, tmp_path: Path) -> None:
        """A marker closer to start should win over one further up."""
        (tmp_path / ".git").mkdir()
        inner = tmp_path / "packages" / "app"
        inner.mkdir(parents=True)
        (inner / "pyproject.toml").touch()

        assert find_project_root(start=inner / ".") == inner.resolve()

    def test_uses_cwd_when_no_start(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Should start from the current directory by default."""
        (tmp_path / ".cachedfonts").touch()
        monkeypatch.chdir(tmp_path)

        assert find_project_root() == tmp_path.resolve()
