"""cachedfonts - Download, cache and load fonts at runtime.

This library fetches TrueType and OpenType fonts from remote urls, keeps
them in a bounded local cache and hands them to a font registry, so a
font only has to be downloaded once.

Example:
    >>> from cachedfonts import DynamicFont
    >>> font = DynamicFont(
    ...     url="https://example.com/fonts/Lobster-Regular.ttf",
    ...     family="Lobster",
    ... )
    >>> fonts = font.load()  # Downloads only if not cached
"""

from cachedfonts.adapters.cache import FileCache
from cachedfonts.adapters.executor import SynchronousExecutor, ThreadPoolExecutorAdapter
from cachedfonts.adapters.http import HttpFetcher
from cachedfonts.adapters.registry import FontToolsRegistry, RegisteredFont
from cachedfonts.adapters.resolvers import S3LocatorResolver
from cachedfonts.config import CacheSettings, find_project_root
from cachedfonts.core.exceptions import (
    AlreadyLoadedError,
    CacheCorruptError,
    CachedFontsError,
    CacheEntryNotFoundError,
    CacheError,
    ConfigurationError,
    FetchError,
    FontFormatError,
    InvalidLocatorError,
    MissingFamilyMemberError,
    RegistrationError,
    RemovalError,
)
from cachedfonts.core.formats import FormatValidator
from cachedfonts.core.keys import derive_cache_key, short_name_or_locator
from cachedfonts.core.models import (
    OPENTYPE,
    TRUETYPE,
    CacheMetadata,
    DownloadChunk,
    FormatDescriptor,
    LoadState,
    RetentionPolicy,
)
from cachedfonts.core.ports import (
    CachePort,
    DownloadProgressCallback,
    FetcherPort,
    FontRegistryPort,
    ItemCountProgressCallback,
    LocatorResolverPort,
    NullProgressReporter,
    ProgressReporter,
)
from cachedfonts.core.services import FontCache
from cachedfonts.facade import DynamicFont
from cachedfonts.logging import VerboseLogger, setup_logging
from cachedfonts.progress import RichProgressReporter


__version__ = "0.1.0"

__all__ = [
    "OPENTYPE",
    "TRUETYPE",
    "AlreadyLoadedError",
    "CacheCorruptError",
    "CacheEntryNotFoundError",
    "CacheError",
    "CacheMetadata",
    "CachePort",
    "CacheSettings",
    "CachedFontsError",
    "ConfigurationError",
    "DownloadChunk",
    "DownloadProgressCallback",
    "DynamicFont",
    "FetchError",
    "FetcherPort",
    "FileCache",
    "FontCache",
    "FontFormatError",
    "FontRegistryPort",
    "FontToolsRegistry",
    "FormatDescriptor",
    "FormatValidator",
    "HttpFetcher",
    "InvalidLocatorError",
    "ItemCountProgressCallback",
    "LoadState",
    "LocatorResolverPort",
    "MissingFamilyMemberError",
    "NullProgressReporter",
    "ProgressReporter",
    "RegisteredFont",
    "RegistrationError",
    "RemovalError",
    "RetentionPolicy",
    "RichProgressReporter",
    "S3LocatorResolver",
    "SynchronousExecutor",
    "ThreadPoolExecutorAdapter",
    "VerboseLogger",
    "__version__",
    "derive_cache_key",
    "find_project_root",
    "setup_logging",
    "short_name_or_locator",
]
