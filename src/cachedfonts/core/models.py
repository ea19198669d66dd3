"""Core domain models for cachedfonts.

These models are pure Python dataclasses with no I/O dependencies.
They represent the core domain concepts of the font cache.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from enum import Enum
from typing import Self


DEFAULT_MAX_OBJECTS = 200
DEFAULT_STALE_PERIOD = timedelta(days=365)

# Length of the leading byte signature compared by the format validator
MAGIC_NUMBER_LENGTH = 5


@dataclass(frozen=True, slots=True)
class RetentionPolicy:
    """Bounds on how many cached fonts are kept and for how long.

    Attributes:
        max_objects: How large the cache is allowed to be. When there are
            more entries, the ones that haven't been used for the longest
            time are removed.
        stale_period: How long an entry may go unused before it is removed.

    Example:
        >>> policy = RetentionPolicy(max_objects=50)
        >>> policy.stale_period.days
        365
    """

    max_objects: int = DEFAULT_MAX_OBJECTS
    stale_period: timedelta = DEFAULT_STALE_PERIOD

    def __post_init__(self) -> None:
        """Validate policy bounds after initialization."""
        if self.max_objects < 1:
            raise ValueError("max_objects must be a positive integer")
        if self.stale_period <= timedelta(0):
            raise ValueError("stale_period must be a positive duration")


@dataclass(frozen=True, slots=True)
class FormatDescriptor:
    """A supported font file format.

    Attributes:
        extension: Lowercase file extension without the dot (e.g., "ttf").
        magic_number: Leading bytes identifying the format.
    """

    extension: str
    magic_number: bytes

    def __post_init__(self) -> None:
        """Validate descriptor fields after initialization."""
        if not self.extension or self.extension != self.extension.lower():
            raise ValueError("extension must be a non-empty lowercase string")
        if len(self.magic_number) != MAGIC_NUMBER_LENGTH:
            raise ValueError(
                f"magic_number must be exactly {MAGIC_NUMBER_LENGTH} bytes"
            )

    def matches_header(self, blob: bytes) -> bool:
        """Check whether blob starts with this format's magic number."""
        if len(blob) < MAGIC_NUMBER_LENGTH:
            return False
        return blob[:MAGIC_NUMBER_LENGTH] == self.magic_number


TRUETYPE = FormatDescriptor(extension="ttf", magic_number=b"\x00\x01\x00\x00\x00")
OPENTYPE = FormatDescriptor(extension="otf", magic_number=b"OTTO\x00")


@dataclass(frozen=True, slots=True)
class CacheMetadata:
    """Metadata stored alongside cached fonts for retention decisions.

    This is persisted as a JSON sidecar file next to the cached font file.

    Attributes:
        key: Cache key the entry was stored under.
        source: Original locator the font was fetched from.
        size: Size of the cached font in bytes.
        cached_at: Timestamp when the font was cached locally.
        last_accessed: Timestamp of the most recent read or write.
    """

    key: str
    source: str = ""
    size: int = 0
    cached_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    last_accessed: datetime = field(default_factory=lambda: datetime.now(UTC))

    def touched(self, when: datetime | None = None) -> Self:
        """Return a copy with last_accessed moved to when (default: now)."""
        return type(self)(
            key=self.key,
            source=self.source,
            size=self.size,
            cached_at=self.cached_at,
            last_accessed=when or datetime.now(UTC),
        )

    def is_stale(self, policy: RetentionPolicy, now: datetime | None = None) -> bool:
        """Check if the entry has gone unused for longer than the policy allows.

        Args:
            policy: Retention policy supplying the stale period.
            now: Reference time. Defaults to the current UTC time.

        Returns:
            True if the entry should be evicted.
        """
        now = now or datetime.now(UTC)
        return now - self.last_accessed > policy.stale_period


@dataclass(frozen=True, slots=True)
class DownloadChunk:
    """A chunk of font bytes received during a streamed download.

    Attributes:
        data: The bytes received in this chunk.
        received: Total bytes received so far, including this chunk.
        progress: Fraction downloaded after this chunk, or None when the
            server did not announce a size.
    """

    data: bytes
    received: int
    progress: float | None = None


class LoadState(Enum):
    """Lifecycle of a one-shot DynamicFont loader."""

    NOT_LOADED = "not_loaded"
    LOADED = "loaded"
