"""Domain exceptions for cachedfonts.

All library errors inherit from CachedFontsError, allowing users to catch
any library exception with a single except clause. Each exception provides
a recovery_hint property with guidance on resolving the error.
"""

from __future__ import annotations

from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from pathlib import Path


class CachedFontsError(Exception):
    """Base class for all cachedfonts exceptions.

    Catch this to handle any error from the library.
    """

    @property
    def recovery_hint(self) -> str | None:
        """Optional guidance on how to resolve this error."""
        return None


class InvalidLocatorError(CachedFontsError):
    """Raised when a font locator cannot be parsed as a download URL.

    Attributes:
        locator: The offending locator string.
    """

    def __init__(self, locator: str, reason: str = "") -> None:
        self.locator = locator
        message = f"Invalid font url: {locator!r}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)

    @property
    def recovery_hint(self) -> str:
        """Suggest the accepted locator shapes."""
        return "Use an absolute http(s):// url, or s3://bucket/key with a resolver"


class FetchError(CachedFontsError):
    """Raised when downloading a font fails.

    Attributes:
        locator: The url that was requested.
        status_code: HTTP status code, if a response was received.
        cause: The underlying exception, if any.
    """

    def __init__(
        self,
        locator: str,
        status_code: int | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.locator = locator
        self.status_code = status_code
        self.cause = cause
        if status_code is not None:
            message = f"Failed to load font with url: {locator} (HTTP {status_code})"
        else:
            message = f"Failed to load font with url: {locator}"
        super().__init__(message)

    @property
    def recovery_hint(self) -> str:
        """Suggest checking the url or connectivity."""
        if self.status_code is not None:
            return f"Verify the font exists at {self.locator}"
        return "Check network connectivity and retry"


class FontFormatError(CachedFontsError):
    """Raised when a downloaded file is not a supported font format.

    Attributes:
        path: File name the check was run against.
        supported: Extensions the validator accepts.
    """

    def __init__(self, path: str, supported: tuple[str, ...]) -> None:
        self.path = path
        self.supported = supported
        names = ", ".join(ext.upper() for ext in supported)
        super().__init__(
            f"Bad file format for '{path}'. "
            f"Only the following font formats are supported: {names}"
        )


class MissingFamilyMemberError(CachedFontsError):
    """Raised when a family load finds a member that is not cached.

    Attributes:
        locator: The first locator with no cached font.
        family: The family being loaded.
    """

    def __init__(self, locator: str, family: str) -> None:
        self.locator = locator
        self.family = family
        super().__init__(
            f"Font '{locator}' of family '{family}' should already be cached "
            "to be loaded"
        )

    @property
    def recovery_hint(self) -> str:
        """Suggest caching the member first."""
        return f"Call cache_font('{self.locator}') before loading the family"


class RemovalError(CachedFontsError):
    """Raised when a cached font cannot be deleted.

    Attributes:
        locator: The locator whose cache entry was targeted.
        key: The derived cache key.
        cause: The underlying exception, if any.
    """

    def __init__(self, locator: str, key: str, cause: Exception | None = None) -> None:
        self.locator = locator
        self.key = key
        self.cause = cause
        super().__init__(f"Can't delete font {key}")

    @property
    def recovery_hint(self) -> str:
        """Suggest checking the entry exists."""
        return "Call can_load_font() first to make sure the font is cached"


class AlreadyLoadedError(CachedFontsError):
    """Raised when DynamicFont.load() is called more than once.

    Attributes:
        family: The family the loader was created for.
    """

    def __init__(self, family: str) -> None:
        self.family = family
        super().__init__(f"Font family '{family}' has already been loaded")


class RegistrationError(CachedFontsError):
    """Raised when the font engine rejects font bytes.

    Attributes:
        family: The family the font was registered under.
        cause: The underlying exception, if any.
    """

    def __init__(
        self,
        message: str,
        family: str,
        cause: Exception | None = None,
    ) -> None:
        self.family = family
        self.cause = cause
        super().__init__(message)

    @property
    def recovery_hint(self) -> str:
        """Suggest removing the unusable file."""
        return "Remove the cached font and re-download it from a trusted source"


class CacheError(CachedFontsError):
    """Base class for cache-related errors."""

    pass


class CacheEntryNotFoundError(CacheError):
    """Raised when deleting a cache entry that does not exist.

    Attributes:
        key: The missing cache key.
    """

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"No cached font for key '{key}'")


class CacheCorruptError(CacheError):
    """Raised when cache metadata is corrupt or unreadable.

    Attributes:
        key: The cache key for the corrupt entry.
        path: The path to the corrupt file.
    """

    def __init__(
        self,
        message: str,
        key: str,
        path: Path,
        cause: Exception | None = None,
    ) -> None:
        self.key = key
        self.path = path
        self.cause = cause
        super().__init__(message)

    @property
    def recovery_hint(self) -> str:
        """Suggest deleting the corrupt cache entry."""
        return f"Delete cache files for '{self.key}' and re-fetch"


class ConfigurationError(CachedFontsError):
    """Raised for configuration problems (malformed settings)."""

    pass
