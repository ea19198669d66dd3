"""Locator resolver adapters."""

from cachedfonts.adapters.resolvers.s3 import S3LocatorResolver


__all__ = ["S3LocatorResolver"]
