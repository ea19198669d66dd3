"""Port interfaces for hexagonal architecture.

Ports define contracts that adapters must implement. The core domain
depends only on these protocols, never on concrete implementations.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Protocol, runtime_checkable


if TYPE_CHECKING:
    import builtins
    from collections.abc import Iterator
    from concurrent.futures import Future

    from cachedfonts.core.models import CacheMetadata, RetentionPolicy

# Called with the fraction (0.0 to 1.0) of bytes downloaded so far
DownloadProgressCallback = Callable[[float], None]

# Called with (fraction, total_items, loaded_items) as family members load
ItemCountProgressCallback = Callable[[float, int, int], None]


@runtime_checkable
class CachePort(Protocol):
    """Local font store with retention applied on write."""

    def get(self, key: str) -> bytes | None:
        """Get cached font bytes, or None if not cached."""
        ...

    def put(
        self,
        key: str,
        data: bytes,
        *,
        source: str = "",
        policy: RetentionPolicy | None = None,
    ) -> None:
        """Store font bytes, then evict entries the policy no longer allows."""
        ...

    def exists(self, key: str) -> bool:
        """Check whether a font is cached under key."""
        ...

    def delete(self, key: str) -> None:
        """Remove a cached font.

        Raises:
            CacheEntryNotFoundError: If nothing is cached under key.
        """
        ...

    def evict(self, policy: RetentionPolicy | None = None) -> int:
        """Apply a retention policy now.

        Returns:
            Number of entries removed.
        """
        ...

    def metadata(self, key: str) -> CacheMetadata | None:
        """Get the metadata sidecar for key without touching access time."""
        ...

    def list_all_keys(self) -> builtins.list[str]:
        """List all cache keys."""
        ...


@runtime_checkable
class FetcherPort(Protocol):
    """Network retrieval of font files."""

    def fetch(self, locator: str) -> bytes:
        """Download the full body of locator.

        Raises:
            InvalidLocatorError: If locator is not a usable url.
            FetchError: On transport failure or non-2xx status.
        """
        ...

    def stream(
        self,
        locator: str,
        on_progress: DownloadProgressCallback | None = None,
    ) -> Iterator[bytes]:
        """Download locator chunk by chunk, reporting progress per chunk."""
        ...


@runtime_checkable
class FontRegistryPort(Protocol):
    """Host font engine that loaded font bytes are handed to."""

    def register(self, data: bytes, family: str) -> None:
        """Register font bytes under a family name.

        Raises:
            RegistrationError: If the engine cannot load the bytes.
        """
        ...


@runtime_checkable
class LocatorResolverPort(Protocol):
    """Turns cloud storage locators into downloadable http(s) urls."""

    def handles(self, locator: str) -> bool:
        """Check whether this resolver understands locator's scheme."""
        ...

    def resolve(self, locator: str) -> str:
        """Return an http(s) download url for locator."""
        ...


@runtime_checkable
class ProgressReporter(Protocol):
    """Reports download progress to the user.

    This protocol defines the contract for progress display adapters.
    The core domain uses this to report progress without depending
    on any specific UI library.
    """

    def start_task(self, name: str) -> DownloadProgressCallback:
        """Start tracking a download task.

        Args:
            name: Human-readable name for the task (font file name).

        Returns:
            A DownloadProgressCallback to call with the downloaded fraction.
        """
        ...

    def finish_task(self, name: str) -> None:
        """Mark a task as complete.

        Args:
            name: The task name passed to start_task().
        """
        ...


class NullProgressReporter:
    """A ProgressReporter that produces no output.

    Used as the default when no progress reporting is desired.
    """

    def start_task(self, name: str) -> DownloadProgressCallback:  # noqa: ARG002
        """Return a no-op callback."""
        return lambda _fraction: None

    def finish_task(self, name: str) -> None:
        """Do nothing."""
        _ = name  # Unused but required by protocol


@runtime_checkable
class ExecutorPort(Protocol):
    """Executor for parallel task execution.

    Abstracts over concurrent.futures executors to allow dependency injection
    and testing. The core domain uses this protocol instead of directly
    importing ThreadPoolExecutor, maintaining "concurrency at the edges".
    """

    def submit(
        self, fn: Callable[..., object], *args: object, **kwargs: object
    ) -> Future[object]:  # type: ignore[name-defined, unused-ignore]
        """Submit a function for execution."""
        ...

    def __enter__(self) -> ExecutorPort:
        """Enter context manager."""
        ...

    def __exit__(
        self, exc_type: object, exc_val: object, exc_tb: object
    ) -> object | None:
        """Exit context manager."""
        ...
