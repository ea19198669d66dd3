"""Cache adapters."""

from cachedfonts.adapters.cache.file_cache import FileCache


__all__ = ["FileCache"]
