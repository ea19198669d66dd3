"""Unit tests for core domain models."""

from datetime import UTC, datetime, timedelta

import pytest

from cachedfonts.core.models import (
    DEFAULT_MAX_OBJECTS,
    DEFAULT_STALE_PERIOD,
    CacheMetadata,
    FormatDescriptor,
    RetentionPolicy,
)


@pytest.mark.core
@pytest.mark.tier(0)
class TestRetentionPolicy:
    """Tests for RetentionPolicy."""

    def test_defaults(self) -> None:
        """Defaults should be 200 objects and 365 days."""
        policy = RetentionPolicy()
        assert policy.max_objects == DEFAULT_MAX_OBJECTS == 200
        assert policy.stale_period == DEFAULT_STALE_PERIOD == timedelta(days=365)

    @pytest.mark.parametrize("max_objects", [0, -1])
    def test_rejects_non_positive_max_objects(self, max_objects: int) -> None:
        """max_objects must be positive."""
        with pytest.raises(ValueError, match="max_objects"):
            RetentionPolicy(max_objects=max_objects)

    def test_rejects_non_positive_stale_period(self) -> None:
        """stale_period must be positive."""
        with pytest.raises(ValueError, match="stale_period"):
            RetentionPolicy(stale_period=timedelta(0))

    def test_is_frozen(self) -> None:
        """RetentionPolicy should be immutable."""
        policy = RetentionPolicy()
        with pytest.raises(AttributeError):
            policy.max_objects = 5  # type: ignore[misc]


@pytest.mark.core
@pytest.mark.tier(0)
class TestFormatDescriptor:
    """Tests for FormatDescriptor."""

    def test_rejects_uppercase_extension(self) -> None:
        """Extensions must be lowercase."""
        with pytest.raises(ValueError, match="lowercase"):
            FormatDescriptor(extension="TTF", magic_number=b"\x00\x01\x00\x00\x00")

    @pytest.mark.parametrize("magic", [b"OTTO", b"OTTO\x00\x00"])
    def test_rejects_wrong_magic_length(self, magic: bytes) -> None:
        """Magic numbers must be exactly 5 bytes."""
        with pytest.raises(ValueError, match="5 bytes"):
            FormatDescriptor(extension="otf", magic_number=magic)

    def test_matches_header(self) -> None:
        """matches_header() should compare the first 5 bytes only."""
        fmt = FormatDescriptor(extension="otf", magic_number=b"OTTO\x00")
        assert fmt.matches_header(b"OTTO\x00anything")
        assert not fmt.matches_header(b"OTTO")
        assert not fmt.matches_header(b"xOTTO\x00")


@pytest.mark.core
@pytest.mark.tier(0)
class TestCacheMetadata:
    """Tests for CacheMetadata."""

    def test_touched_moves_last_accessed_only(self) -> None:
        """touched() should return a copy with a new access time."""
        t0 = datetime(2024, 1, 1, tzinfo=UTC)
        t1 = t0 + timedelta(days=3)
        meta = CacheMetadata(key="k", source="s", size=3, cached_at=t0, last_accessed=t0)

        touched = meta.touched(t1)

        assert touched.last_accessed == t1
        assert touched.cached_at == t0
        assert touched.key == "k"
        assert meta.last_accessed == t0

    def test_is_stale(self) -> None:
        """Entries unused for longer than stale_period should be stale."""
        t0 = datetime(2024, 1, 1, tzinfo=UTC)
        meta = CacheMetadata(key="k", cached_at=t0, last_accessed=t0)
        policy = RetentionPolicy(stale_period=timedelta(days=10))

        assert not meta.is_stale(policy, now=t0 + timedelta(days=10))
        assert meta.is_stale(policy, now=t0 + timedelta(days=10, seconds=1))
