"""HTTP fetcher adapters."""

from cachedfonts.adapters.http.fetcher import HttpFetcher


__all__ = ["HttpFetcher"]
