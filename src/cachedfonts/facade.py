"""One-shot loader for a font or font family.

For ready to use, simple interface, create a DynamicFont and call load()
once at startup::

    font = DynamicFont(url="https://example.com/fonts/Lobster.ttf", family="Lobster")
    font.load()

For greater control use the FontCache methods directly: cache_font() to
download a font, can_load_font() to check the cache, load_cached_font() to
load a downloaded font and remove_cached_font() to delete it.
"""

from __future__ import annotations

import threading
from datetime import timedelta
from typing import TYPE_CHECKING

from cachedfonts.core.exceptions import AlreadyLoadedError, MissingFamilyMemberError
from cachedfonts.core.models import (
    DEFAULT_MAX_OBJECTS,
    DEFAULT_STALE_PERIOD,
    LoadState,
    RetentionPolicy,
)


if TYPE_CHECKING:
    from collections.abc import Sequence

    from cachedfonts.core.services import FontCache


class DynamicFont:
    """Loads fonts from urls, downloading them only when not cached.

    Attributes:
        urls: Download urls, one per font file of the family.
        family: Family name the fonts are registered under.
        retention: Cache bounds used when fonts have to be downloaded.
    """

    def __init__(
        self,
        url: str,
        family: str,
        *,
        max_objects: int = DEFAULT_MAX_OBJECTS,
        stale_period: timedelta = DEFAULT_STALE_PERIOD,
        font_cache: FontCache | None = None,
    ) -> None:
        """Create a loader for a single font file.

        Args:
            url: http(s) url of a TrueType or OpenType font.
            family: Family name to register the font under.
            max_objects: How many fonts the cache may hold.
            stale_period: How long an unused font stays cached.
            font_cache: FontCache to use; defaults to
                FontCache.from_directory().

        Raises:
            ValueError: If url or family is empty.
        """
        self._init([url], family, max_objects, stale_period, font_cache)

    def _init(
        self,
        urls: Sequence[str],
        family: str,
        max_objects: int,
        stale_period: timedelta,
        font_cache: FontCache | None,
    ) -> None:
        if not family:
            raise ValueError("family cannot be empty")
        if not urls or any(not url for url in urls):
            raise ValueError("url cannot be empty")

        if font_cache is None:
            from cachedfonts.core.services import FontCache

            font_cache = FontCache.from_directory()

        self._urls = tuple(urls)
        self._family = family
        self._retention = RetentionPolicy(
            max_objects=max_objects, stale_period=stale_period
        )
        self._font_cache = font_cache
        self._state = LoadState.NOT_LOADED
        self._lock = threading.Lock()

    @classmethod
    def family_of(
        cls,
        urls: Sequence[str],
        family: str,
        *,
        max_objects: int = DEFAULT_MAX_OBJECTS,
        stale_period: timedelta = DEFAULT_STALE_PERIOD,
        font_cache: FontCache | None = None,
    ) -> DynamicFont:
        """Create a loader for a family of related font files.

        Each url defines how to render one weight or style of the family.

        Raises:
            ValueError: If fewer than 2 urls are given, or any is empty.
        """
        if len(urls) < 2:
            raise ValueError(
                "At least 2 urls have to be provided. "
                "To load a single font url, use DynamicFont(url=...)"
            )
        loader = cls.__new__(cls)
        loader._init(urls, family, max_objects, stale_period, font_cache)
        return loader

    @classmethod
    def from_bucket(
        cls,
        bucket_url: str,
        family: str,
        *,
        max_objects: int = DEFAULT_MAX_OBJECTS,
        stale_period: timedelta = DEFAULT_STALE_PERIOD,
        font_cache: FontCache | None = None,
    ) -> DynamicFont:
        """Create a loader for a font stored in an S3 bucket.

        The s3://bucket/key url is turned into a download url only when the
        font is not already cached.

        Args:
            bucket_url: S3 uri (s3://bucket/path/font.ttf).
            family: Family name to register the font under.
            font_cache: FontCache with a resolver for s3:// urls; defaults to
                one using S3LocatorResolver.

        Raises:
            ValueError: If bucket_url is not an s3:// uri or family is empty.
        """
        if not bucket_url.startswith("s3://"):
            raise ValueError("bucket_url must be an s3:// uri")

        if font_cache is None:
            from cachedfonts.adapters.resolvers import S3LocatorResolver
            from cachedfonts.core.services import FontCache

            font_cache = FontCache.from_directory(resolver=S3LocatorResolver())
        elif font_cache.resolver is None or not font_cache.resolver.handles(
            bucket_url
        ):
            raise ValueError("font_cache has no resolver for s3:// urls")

        return cls(
            bucket_url,
            family,
            max_objects=max_objects,
            stale_period=stale_period,
            font_cache=font_cache,
        )

    @property
    def urls(self) -> list[str]:
        """Download urls for the font files."""
        return list(self._urls)

    @property
    def family(self) -> str:
        """Family name the fonts are registered under."""
        return self._family

    @property
    def retention(self) -> RetentionPolicy:
        """Cache bounds used when downloading."""
        return self._retention

    @property
    def state(self) -> LoadState:
        """Whether load() has run."""
        return self._state

    @property
    def font_cache(self) -> FontCache:
        """The FontCache this loader reads from and writes to."""
        return self._font_cache

    def load(self) -> list[bytes]:
        """Load the font(s), downloading them first if they are not cached.

        Tries the cache first. If any font is missing, every url is
        downloaded and cached, then the cache is read once more.

        Returns:
            Font bytes in the order of urls.

        Raises:
            AlreadyLoadedError: If load() was already called on this loader.
            FetchError: If a download fails.
            FontFormatError: If a download is not a supported font.
            MissingFamilyMemberError: If a font is still missing after download.
        """
        with self._lock:
            if self._state is LoadState.LOADED:
                raise AlreadyLoadedError(self._family)
            try:
                return self._load_with_fallback()
            finally:
                self._state = LoadState.LOADED

    def cache_font(self, url: str) -> bytes:
        """Download url into this loader's cache using its retention."""
        return self._font_cache.cache_font(url, self._retention)

    def can_load_font(self, url: str) -> bool:
        """Check whether url is cached, without touching the network."""
        return self._font_cache.can_load_font(url)

    def load_cached_font(self, url: str) -> bytes | None:
        """Load a cached url under this loader's family; None if not cached."""
        return self._font_cache.load_cached_font(url, self._family)

    def load_cached_family(self, urls: Sequence[str] | None = None) -> list[bytes]:
        """Load cached urls (default: this loader's urls) under its family."""
        return self._font_cache.load_cached_family(
            self._urls if urls is None else urls, self._family
        )

    def remove_cached_font(self, url: str) -> None:
        """Delete url from this loader's cache."""
        self._font_cache.remove_cached_font(url)

    def _load_with_fallback(self) -> list[bytes]:
        cache = self._font_cache
        try:
            return cache.load_cached_family(self._urls, self._family)
        except MissingFamilyMemberError:
            cache.logger.log("Font is not in cache.", "Loading font now...")

        cache.cache_fonts(self._urls, self._retention)
        return cache.load_cached_family(self._urls, self._family)
