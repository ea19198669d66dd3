"""Font family load implementations for FontCache.

This module contains the internal family loading logic that FontCache
delegates to. These are implementation details and should not be used
directly.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from cachedfonts.core.exceptions import MissingFamilyMemberError
from cachedfonts.core.keys import derive_cache_key


if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence

    from cachedfonts.core.ports import (
        CachePort,
        FontRegistryPort,
        ItemCountProgressCallback,
    )
    from cachedfonts.logging import VerboseLogger


def load_family(
    locators: Sequence[str],
    family: str,
    cache: CachePort,
    registry: FontRegistryPort,
    logger: VerboseLogger,
    on_progress: ItemCountProgressCallback | None = None,
) -> list[bytes]:
    """Read every member, then register them all under family.

    Nothing is registered unless every member is cached.
    """
    fonts: list[bytes] = []
    for locator in locators:
        data = cache.get(derive_cache_key(locator))
        if data is None:
            logger.log(f"Font {locator} is not in cache.")
            raise MissingFamilyMemberError(locator, family)
        fonts.append(data)

    total = len(fonts)
    for index, data in enumerate(fonts, start=1):
        registry.register(data, family)
        if on_progress is not None:
            on_progress(index / total, total, index)

    logger.log(f"Font family {family} has been loaded!", f"Fonts: {total}")
    return fonts


def stream_family(
    locators: Sequence[str],
    family: str,
    cache: CachePort,
    registry: FontRegistryPort,
    logger: VerboseLogger,
    on_progress: ItemCountProgressCallback | None = None,
) -> Iterator[bytes]:
    """Read, register and yield members one at a time, in order.

    A missing member stops the stream with MissingFamilyMemberError.
    Members yielded before it stay registered.
    """
    total = len(locators)
    for index, locator in enumerate(locators, start=1):
        data = cache.get(derive_cache_key(locator))
        if data is None:
            logger.log(
                f"Font {locator} is not in cache.",
                f"{index - 1} of {total} fonts of {family} were loaded.",
            )
            raise MissingFamilyMemberError(locator, family)

        registry.register(data, family)
        logger.log(f"Loaded font {index} of {total} for family {family}")
        if on_progress is not None:
            on_progress(index / total, total, index)
        yield data

    logger.log(f"Font family {family} has been loaded!", f"Fonts: {total}")
