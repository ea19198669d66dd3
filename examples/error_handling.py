"""Error handling patterns with recovery hints.

This example demonstrates how to handle common errors and use
the recovery_hint property to provide actionable guidance.
"""

from cachedfonts import (
    AlreadyLoadedError,
    CachedFontsError,
    DynamicFont,
    FetchError,
    FontCache,
    FontFormatError,
    MissingFamilyMemberError,
    RemovalError,
)


font_cache = FontCache.from_directory()


# Pattern 1: Handle download failures
def cache_or_none(url: str) -> bytes | None:
    """Download a font, returning None if the server can't provide it."""
    try:
        return font_cache.cache_font(url)
    except FetchError as e:
        print(f"Download failed: {e.locator} (status {e.status_code})")
        print(f"Hint: {e.recovery_hint}")
        return None
    except FontFormatError as e:
        print(f"Not a font: {e.path}. Supported: {', '.join(e.supported)}")
        return None


# Pattern 2: Load a family only when every member is cached
def load_family_if_complete(urls: list[str], family: str) -> list[bytes]:
    """Load a cached family, downloading the first missing member on demand."""
    while True:
        try:
            return font_cache.load_cached_family(urls, family)
        except MissingFamilyMemberError as e:
            print(f"Hint: {e.recovery_hint}")
            font_cache.cache_font(e.locator)


# Pattern 3: Removal of fonts that may already be gone
def forget(url: str) -> None:
    """Delete a font, ignoring fonts that are not cached."""
    try:
        font_cache.remove_cached_font(url)
    except RemovalError as e:
        print(f"{e} ({e.cause})")


# Pattern 4: Catch-all for any library error
def load_once(font: DynamicFont) -> None:
    """Load a DynamicFont, tolerating repeated calls."""
    try:
        font.load()
    except AlreadyLoadedError:
        pass
    except CachedFontsError as e:
        print(f"Error: {e}")
        if e.recovery_hint:
            print(f"Hint: {e.recovery_hint}")
