"""File-based cache adapter implementing CachePort."""

from __future__ import annotations

import contextlib
import hashlib
import json
import os
import threading
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from cachedfonts.core.exceptions import CacheCorruptError, CacheEntryNotFoundError
from cachedfonts.core.models import CacheMetadata, RetentionPolicy
from cachedfonts.logging import get_logger


if TYPE_CHECKING:
    from collections.abc import Callable, Iterator
    from pathlib import Path


# Keys longer than this are shortened so "<name>~meta.json~tmp" fits in 255 bytes
MAX_KEY_LENGTH = 200
_KEY_PREFIX_LENGTH = 150

# "~" never appears in a cache key, so these names cannot collide with a font
_META_SUFFIX = "~meta.json"
_TMP_SUFFIX = "~tmp"

logger = get_logger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class FileCache:
    """Local font cache with JSON metadata sidecars.

    Stores each font as one file in a directory with an accompanying
    ~meta.json file recording its source and access times. Retention is
    applied after every write: entries unused for longer than the stale
    period are removed, then the least recently used entries beyond
    max_objects.

    Attributes:
        cache_dir: Directory where cached fonts are stored.
        policy: Default retention policy for writes and evict().
    """

    def __init__(
        self,
        cache_dir: Path,
        policy: RetentionPolicy | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize the cache with a directory path.

        Args:
            cache_dir: Directory where cached fonts will be stored.
            policy: Default retention policy. Defaults to 200 objects / 365 days.
            clock: Returns the current time; injectable for tests.
        """
        self.cache_dir = cache_dir
        self.policy = policy or RetentionPolicy()
        self._clock = clock or _utcnow
        self._lock = threading.RLock()

    @staticmethod
    def _file_name(key: str) -> str:
        """Map a cache key to a file name the filesystem accepts."""
        if len(key) <= MAX_KEY_LENGTH:
            return key
        digest = hashlib.sha256(key.encode()).hexdigest()[:16]
        return f"{key[:_KEY_PREFIX_LENGTH]}-{digest}"

    def _file_path(self, key: str) -> Path:
        """Get the path for a cached font."""
        return self.cache_dir / self._file_name(key)

    def _meta_path(self, key: str) -> Path:
        """Get the path for a metadata sidecar file."""
        return self.cache_dir / f"{self._file_name(key)}{_META_SUFFIX}"

    def _read_meta(self, key: str, meta_path: Path) -> CacheMetadata:
        try:
            with meta_path.open() as f:
                data = json.load(f)
            return CacheMetadata(
                key=data["key"],
                source=data.get("source", ""),
                size=data.get("size", 0),
                cached_at=datetime.fromisoformat(data["cached_at"]),
                last_accessed=datetime.fromisoformat(data["last_accessed"]),
            )
        except (json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
            raise CacheCorruptError(
                f"Cache metadata corrupt for '{key}'",
                key=key,
                path=meta_path,
                cause=e,
            ) from e

    def _write_meta(self, meta: CacheMetadata) -> None:
        data = {
            "key": meta.key,
            "source": meta.source,
            "size": meta.size,
            "cached_at": meta.cached_at.isoformat(),
            "last_accessed": meta.last_accessed.isoformat(),
        }
        meta_path = self._meta_path(meta.key)
        tmp_path = meta_path.with_name(f"{meta_path.name}{_TMP_SUFFIX}")
        with tmp_path.open("w") as f:
            json.dump(data, f)
        os.replace(tmp_path, meta_path)

    def get(self, key: str) -> bytes | None:
        """Get cached font bytes and mark the entry as used.

        Args:
            key: Cache key identifying the font.

        Returns:
            The font bytes if cached, None otherwise.

        Raises:
            CacheCorruptError: If metadata file exists but is corrupt/unreadable.
        """
        with self._lock:
            file_path = self._file_path(key)
            meta_path = self._meta_path(key)

            if not file_path.exists() or not meta_path.exists():
                return None

            meta = self._read_meta(key, meta_path)
            data = file_path.read_bytes()
            self._write_meta(meta.touched(self._clock()))
            return data

    def exists(self, key: str) -> bool:
        """Check whether a font is cached under key."""
        return self._file_path(key).exists() and self._meta_path(key).exists()

    def metadata(self, key: str) -> CacheMetadata | None:
        """Get entry metadata without updating its access time."""
        meta_path = self._meta_path(key)
        if not self._file_path(key).exists() or not meta_path.exists():
            return None
        return self._read_meta(key, meta_path)

    def put(
        self,
        key: str,
        data: bytes,
        *,
        source: str = "",
        policy: RetentionPolicy | None = None,
    ) -> None:
        """Store font bytes in the cache, then apply retention.

        The font is written to a temporary file and renamed into place, so
        readers never see a partially written font.

        Args:
            key: Cache key for the font.
            data: Font bytes to store.
            source: Locator the font was fetched from.
            policy: Retention policy to apply; defaults to self.policy.
        """
        with self._lock:
            self.cache_dir.mkdir(parents=True, exist_ok=True)
            file_path = self._file_path(key)
            tmp_path = file_path.with_name(f"{file_path.name}{_TMP_SUFFIX}")
            try:
                tmp_path.write_bytes(data)
                os.replace(tmp_path, file_path)
            finally:
                tmp_path.unlink(missing_ok=True)

            now = self._clock()
            self._write_meta(
                CacheMetadata(
                    key=key,
                    source=source,
                    size=len(data),
                    cached_at=now,
                    last_accessed=now,
                )
            )
            self.evict(policy)

    def delete(self, key: str) -> None:
        """Remove a font from the cache.

        Args:
            key: Cache key to remove.

        Raises:
            CacheEntryNotFoundError: If nothing is cached under key.
        """
        with self._lock:
            file_path = self._file_path(key)
            if not file_path.exists():
                raise CacheEntryNotFoundError(key)
            file_path.unlink()
            self._meta_path(key).unlink(missing_ok=True)

    def _scan(self) -> tuple[list[CacheMetadata], list[str]]:
        """Read every sidecar.

        Returns:
            Metadata of entries whose font file exists, and the file names
            of entries whose sidecar cannot be read.
        """
        entries: list[CacheMetadata] = []
        corrupt: list[str] = []
        if not self.cache_dir.exists():
            return entries, corrupt
        for meta_path in sorted(self.cache_dir.glob(f"*{_META_SUFFIX}")):
            name = meta_path.name[: -len(_META_SUFFIX)]
            try:
                meta = self._read_meta(name, meta_path)
            except CacheCorruptError as e:
                logger.warning("Skipping cache entry %s: %s", name, e.cause)
                corrupt.append(name)
                continue
            if self._file_path(meta.key).exists():
                entries.append(meta)
        return entries, corrupt

    def _entries(self) -> Iterator[CacheMetadata]:
        """Yield metadata for every readable entry with a font file."""
        yield from self._scan()[0]

    def list_all_keys(self) -> list[str]:
        """List all cache keys.

        Entries with a corrupt sidecar are left out.

        Returns:
            List of all keys currently in the cache.
        """
        return [meta.key for meta in self._entries()]

    def evict(
        self,
        policy: RetentionPolicy | None = None,
        now: datetime | None = None,
    ) -> int:
        """Remove stale entries, then the least recently used beyond the bound.

        Entries whose sidecar cannot be read are removed first.

        Args:
            policy: Retention policy to apply; defaults to self.policy.
            now: Reference time for staleness; defaults to the clock.

        Returns:
            Number of entries removed.
        """
        policy = policy or self.policy
        now = now or self._clock()
        with self._lock:
            entries, corrupt = self._scan()
            for name in corrupt:
                (self.cache_dir / name).unlink(missing_ok=True)
                (self.cache_dir / f"{name}{_META_SUFFIX}").unlink(missing_ok=True)
                logger.warning("Evicted corrupt cache entry %s", name)

            entries.sort(key=lambda m: m.last_accessed)
            doomed = [m for m in entries if m.is_stale(policy, now)]
            fresh = [m for m in entries if not m.is_stale(policy, now)]
            overflow = len(fresh) - policy.max_objects
            if overflow > 0:
                doomed.extend(fresh[:overflow])

            for meta in doomed:
                self._file_path(meta.key).unlink(missing_ok=True)
                self._meta_path(meta.key).unlink(missing_ok=True)
            return len(corrupt) + len(doomed)

    def statistics(self) -> dict[str, int]:
        """Get cache statistics.

        Returns:
            Dictionary with 'total_size' (bytes) and 'file_count' (number of
            cached fonts, sidecars excluded).
        """
        total_size = 0
        file_count = 0

        for meta in self._entries():
            with contextlib.suppress(OSError):
                total_size += self._file_path(meta.key).stat().st_size
                file_count += 1

        return {"total_size": total_size, "file_count": file_count}
