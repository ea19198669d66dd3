"""Core domain services for cachedfonts."""

from __future__ import annotations

import threading
from concurrent.futures import Future
from pathlib import Path
from typing import TYPE_CHECKING

from cachedfonts.core import family_operations
from cachedfonts.core.exceptions import (
    CacheEntryNotFoundError,
    InvalidLocatorError,
    RemovalError,
)
from cachedfonts.core.formats import FormatValidator
from cachedfonts.core.keys import derive_cache_key, short_name_or_locator
from cachedfonts.core.models import DownloadChunk
from cachedfonts.core.ports import NullProgressReporter
from cachedfonts.logging import VerboseLogger


if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence

    from cachedfonts.config import CacheSettings
    from cachedfonts.core.models import RetentionPolicy
    from cachedfonts.core.ports import (
        CachePort,
        DownloadProgressCallback,
        ExecutorPort,
        FetcherPort,
        FontRegistryPort,
        ItemCountProgressCallback,
        LocatorResolverPort,
        ProgressReporter,
    )


class FontCache:
    """Downloads, caches, loads and removes font files.

    Composes a fetcher, a local store and a format validator, and hands
    loaded fonts to a font registry. Every operation addresses a font by
    its locator; the cache key is derived from the full locator.
    """

    def __init__(
        self,
        cache: CachePort,
        fetcher: FetcherPort,
        registry: FontRegistryPort,
        *,
        validator: FormatValidator | None = None,
        resolver: LocatorResolverPort | None = None,
        logger: VerboseLogger | None = None,
        executor: ExecutorPort | None = None,
    ) -> None:
        self._cache = cache
        self._fetcher = fetcher
        self._registry = registry
        self._validator = validator or FormatValidator()
        self._resolver = resolver
        self._logger = logger or VerboseLogger()
        self._executor = executor
        self._inflight: dict[str, tuple[Future[bytes], int]] = {}
        self._inflight_lock = threading.Lock()

    @classmethod
    def from_directory(
        cls,
        directory: Path | None = None,
        settings: CacheSettings | None = None,
        *,
        registry: FontRegistryPort | None = None,
        resolver: LocatorResolverPort | None = None,
        executor: ExecutorPort | None = None,
    ) -> FontCache:
        """Create a FontCache with default adapters under the project root.

        Args:
            directory: Start directory for root discovery (defaults to cwd).
            settings: Cache settings; defaults to CacheSettings.from_env().
                A relative settings.cache_dir is resolved against the root.
            registry: Font registry; defaults to a FontToolsRegistry.
            resolver: Optional resolver for cloud storage locators.
            executor: Optional executor for cache_fonts().

        Returns:
            FontCache with FileCache, HttpFetcher and resolved cache dir.
        """
        from cachedfonts.adapters.cache import FileCache
        from cachedfonts.adapters.http import HttpFetcher
        from cachedfonts.adapters.registry import FontToolsRegistry
        from cachedfonts.config import CacheSettings, find_project_root

        if settings is None:
            settings = CacheSettings.from_env()

        cache_dir = Path(settings.cache_dir)
        if not cache_dir.is_absolute():
            cache_dir = find_project_root(directory) / cache_dir

        return cls(
            cache=FileCache(cache_dir, policy=settings.retention),
            fetcher=HttpFetcher(timeout=settings.timeout),
            registry=registry or FontToolsRegistry(),
            resolver=resolver,
            logger=VerboseLogger(enabled=settings.verbose),
            executor=executor,
        )

    @property
    def cache(self) -> CachePort:
        """The local store fonts are kept in."""
        return self._cache

    @property
    def registry(self) -> FontRegistryPort:
        """The registry loaded fonts are handed to."""
        return self._registry

    @property
    def resolver(self) -> LocatorResolverPort | None:
        """Resolver for cloud storage locators, if any."""
        return self._resolver

    @property
    def logger(self) -> VerboseLogger:
        """Verbose diagnostic output for this cache."""
        return self._logger

    def toggle_verbose_logging(self, enabled: bool) -> None:
        """Enable or disable detailed logs for every operation on this cache."""
        self._logger.toggle(enabled)

    def _download_url(self, locator: str) -> str:
        """Return the url to download locator from."""
        if not locator:
            raise InvalidLocatorError(locator, "empty url")
        if self._resolver is not None and self._resolver.handles(locator):
            url = self._resolver.resolve(locator)
            self._logger.log(f"Resolved {locator} to a download url")
            return url
        return locator

    def _validate_and_store(
        self,
        locator: str,
        key: str,
        data: bytes,
        policy: RetentionPolicy | None,
    ) -> None:
        self._validator.enforce(short_name_or_locator(locator), data)
        self._cache.put(key, data, source=locator, policy=policy)
        self._logger.log(
            f"{short_name_or_locator(locator)} has been cached!",
            f"Key: {key}",
            f"Size: {len(data)} bytes",
        )

    def _claim(self, key: str) -> tuple[Future[bytes] | None, bool]:
        """Become the downloader of key, or find the download to wait for.

        Returns:
            (future, owner). When owner is True the caller downloads and
            resolves future. future is None when the download in flight
            belongs to a stream suspended on the calling thread, which can
            never finish while this thread waits; the caller then downloads
            on its own.
        """
        me = threading.get_ident()
        with self._inflight_lock:
            current = self._inflight.get(key)
            if current is None:
                pending: Future[bytes] = Future()
                self._inflight[key] = (pending, me)
                return pending, True
            pending, thread_id = current
            if thread_id == me:
                return None, True
            return pending, False

    def _release(self, key: str, pending: Future[bytes] | None) -> None:
        if pending is None:
            return
        if not pending.done():
            pending.cancel()
        with self._inflight_lock:
            if self._inflight.get(key, (None, None))[0] is pending:
                del self._inflight[key]

    def cache_font(self, locator: str, policy: RetentionPolicy | None = None) -> bytes:
        """Download a font, check its format and store it in the cache.

        Concurrent calls for the same locator, streamed or not, share a
        single download; the later callers wait for and receive the first
        caller's result or error.

        Args:
            locator: http(s) url of the font, or a locator the resolver handles.
            policy: Retention policy for the write; defaults to the store's.

        Returns:
            The downloaded font bytes.

        Raises:
            InvalidLocatorError: If locator is not a usable url.
            FetchError: On network failure or non-2xx status.
            FontFormatError: If the file is not a supported font.
        """
        key = derive_cache_key(locator)
        pending, owner = self._claim(key)

        if not owner:
            assert pending is not None
            self._logger.log(f"Waiting for in-flight download of {locator}")
            return pending.result()

        try:
            self._logger.log(f"Downloading {short_name_or_locator(locator)}...")
            data = self._fetcher.fetch(self._download_url(locator))
            self._validate_and_store(locator, key, data, policy)
        except Exception as e:
            if pending is not None:
                pending.set_exception(e)
            raise
        else:
            if pending is not None:
                pending.set_result(data)
            return data
        finally:
            self._release(key, pending)

    def cache_font_stream(
        self,
        locator: str,
        policy: RetentionPolicy | None = None,
        on_progress: DownloadProgressCallback | None = None,
    ) -> Iterator[DownloadChunk | bytes]:
        """Download a font chunk by chunk, caching it once complete.

        Yields a DownloadChunk per received chunk. When the download ends,
        the whole file is validated and stored once, and the full font
        bytes are yielded as the final item. A failure mid-download stores
        nothing.

        If another thread is already downloading the same locator, no second
        download is made: once that download completes, a single
        DownloadChunk holding the whole file is yielded, then the bytes.

        Args:
            locator: http(s) url of the font, or a locator the resolver handles.
            policy: Retention policy for the write; defaults to the store's.
            on_progress: Optional callback receiving the fraction downloaded.

        Raises:
            InvalidLocatorError: If locator is not a usable url.
            FetchError: On network failure, including mid-stream.
            FontFormatError: If the completed file is not a supported font.
        """
        key = derive_cache_key(locator)
        pending, owner = self._claim(key)

        if not owner:
            assert pending is not None
            self._logger.log(f"Waiting for in-flight download of {locator}")
            data = pending.result()
            if on_progress is not None:
                on_progress(1.0)
            yield DownloadChunk(data=data, received=len(data), progress=1.0)
            yield data
            return

        buffer = bytearray()
        latest: float | None = None

        # The fetcher reports progress for a chunk just before yielding it
        def report(fraction: float) -> None:
            nonlocal latest
            latest = fraction
            if on_progress is not None:
                on_progress(fraction)

        try:
            url = self._download_url(locator)
            self._logger.log(f"Streaming {short_name_or_locator(locator)}...")
            for chunk in self._fetcher.stream(url, report):
                buffer.extend(chunk)
                yield DownloadChunk(data=chunk, received=len(buffer), progress=latest)

            data = bytes(buffer)
            self._validate_and_store(locator, key, data, policy)
        except Exception as e:
            if pending is not None:
                pending.set_exception(e)
            raise
        else:
            if pending is not None:
                pending.set_result(data)
        finally:
            self._release(key, pending)
        yield data

    def _cache_with_progress(
        self,
        locator: str,
        policy: RetentionPolicy | None,
        progress: ProgressReporter,
    ) -> bytes:
        name = short_name_or_locator(locator)
        callback = progress.start_task(name)
        data = b""
        try:
            for item in self.cache_font_stream(locator, policy, on_progress=callback):
                if isinstance(item, bytes):
                    data = item
        finally:
            progress.finish_task(name)
        return data

    def cache_fonts(
        self,
        locators: Sequence[str],
        policy: RetentionPolicy | None = None,
        max_workers: int | None = None,
        progress: ProgressReporter | None = None,
    ) -> list[bytes]:
        """Download and cache several fonts.

        Downloads run in parallel when an executor is injected and
        max_workers != 1; otherwise they run one after another. Each font
        is streamed with its own progress task.

        Args:
            locators: Fonts to cache.
            policy: Retention policy for the writes.
            max_workers: Use 1 to force sequential downloads.
            progress: Optional progress reporter for download feedback.

        Returns:
            Font bytes in the order of locators.
        """
        if progress is None:
            progress = NullProgressReporter()

        if max_workers == 1 or self._executor is None:
            return [
                self._cache_with_progress(locator, policy, progress)
                for locator in locators
            ]

        futures = [
            self._executor.submit(self._cache_with_progress, locator, policy, progress)
            for locator in locators
        ]
        results: list[bytes] = []
        for future in futures:
            data = future.result()
            assert isinstance(data, bytes)
            results.append(data)
        return results

    def can_load_font(self, locator: str) -> bool:
        """Check whether locator can be loaded directly from cache.

        Never touches the network.
        """
        return self._cache.exists(derive_cache_key(locator))

    def load_cached_font(self, locator: str, family: str) -> bytes | None:
        """Load a cached font into the registry under family.

        Args:
            locator: The locator passed to cache_font().
            family: Family name to register the font under.

        Returns:
            The font bytes, or None if the font is not cached.

        Raises:
            RegistrationError: If the registry rejects the font.
        """
        data = self._cache.get(derive_cache_key(locator))
        if data is None:
            self._logger.log(f"Font {locator} is not in cache.")
            return None

        self._registry.register(data, family)
        self._logger.log("Font has been loaded!")
        return data

    def load_cached_family(
        self,
        locators: Sequence[str],
        family: str,
        on_progress: ItemCountProgressCallback | None = None,
    ) -> list[bytes]:
        """Load a family of cached fonts, all or nothing.

        Every locator should be a related font (weight, style) of the same
        family. If any of them is not cached, nothing is registered.

        Args:
            locators: Locators passed to cache_font(), one per family member.
            family: Family name to register every member under.
            on_progress: Optional callback(fraction, total, loaded).

        Returns:
            Font bytes in the order of locators.

        Raises:
            MissingFamilyMemberError: If any member is not cached.
            RegistrationError: If the registry rejects a member.
        """
        return family_operations.load_family(
            locators,
            family,
            self._cache,
            self._registry,
            self._logger,
            on_progress,
        )

    def load_cached_family_stream(
        self,
        locators: Sequence[str],
        family: str,
        on_progress: ItemCountProgressCallback | None = None,
    ) -> Iterator[bytes]:
        """Load a family of cached fonts one member at a time.

        Each member is registered and yielded as soon as it is read, so
        earlier members can be used before later ones are ready. If a
        member is missing, MissingFamilyMemberError is raised when it is
        reached; members already yielded stay registered.

        Args:
            locators: Locators passed to cache_font(), one per family member.
            family: Family name to register every member under.
            on_progress: Optional callback(fraction, total, loaded) fired
                after each member.

        Yields:
            Font bytes in the order of locators.
        """
        return family_operations.stream_family(
            locators,
            family,
            self._cache,
            self._registry,
            self._logger,
            on_progress,
        )

    def remove_cached_font(self, locator: str) -> None:
        """Remove a cached font.

        Raises:
            RemovalError: If the font is not cached or cannot be deleted.
        """
        key = derive_cache_key(locator)
        try:
            self._cache.delete(key)
        except (CacheEntryNotFoundError, OSError) as e:
            self._logger.log(f"Can't delete font {key}: {e}")
            raise RemovalError(locator, key, cause=e) from e
        self._logger.log(f"Removed {short_name_or_locator(locator)} from cache.")

    def clean(self, policy: RetentionPolicy | None = None) -> int:
        """Apply the retention policy now.

        Returns:
            Number of cached fonts evicted.
        """
        removed = self._cache.evict(policy)
        self._logger.log(f"Evicted {removed} cached fonts.")
        return removed
