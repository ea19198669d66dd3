"""Core domain module for cachedfonts.

This module contains pure Python domain models, key derivation, format
validation and port definitions. It has no I/O dependencies and can be
tested in isolation.
"""

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
from cachedfonts.core.ports import CachePort, FetcherPort, FontRegistryPort


__all__ = [
    "OPENTYPE",
    "TRUETYPE",
    "CacheMetadata",
    "CachePort",
    "DownloadChunk",
    "FetcherPort",
    "FontRegistryPort",
    "FormatDescriptor",
    "FormatValidator",
    "LoadState",
    "RetentionPolicy",
    "derive_cache_key",
    "short_name_or_locator",
]
