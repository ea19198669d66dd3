"""Pytest configuration and shared fixtures.

This module registers custom markers for CI job separation and provides
shared fixtures for the test suite.
"""

from __future__ import annotations

from io import BytesIO
from typing import TYPE_CHECKING

import httpx
import pytest


if TYPE_CHECKING:
    from collections.abc import Callable, Iterator, Mapping
    from pathlib import Path

    from cachedfonts.adapters.http import HttpFetcher
    from cachedfonts.core.ports import DownloadProgressCallback
    from cachedfonts.core.services import FontCache


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "core: Core models, keys, formats, and services")
    config.addinivalue_line("markers", "cache: File cache adapter")
    config.addinivalue_line("markers", "http: HTTP fetcher adapter")
    config.addinivalue_line("markers", "registry: Font registry adapter")
    config.addinivalue_line("markers", "storage: Cloud storage resolvers (s3)")
    config.addinivalue_line("markers", "progress: Rich progress integration")
    config.addinivalue_line("markers", "cli: CLI tests")
    config.addinivalue_line("markers", "property: Property-based tests (hypothesis)")
    config.addinivalue_line(
        "markers", "tra: Test Responsibility Anchor (TRA) - namespace.Anchor format"
    )
    config.addinivalue_line(
        "markers",
        "tier: Test tier for CI job separation (0=instant, 1=fast, 2=standard, 3=slow, 4=manual)",
    )


def build_font(family: str = "Test Sans", style: str = "Regular") -> bytes:
    """Build a minimal but valid TrueType font with fontTools."""
    from fontTools.fontBuilder import FontBuilder
    from fontTools.pens.ttGlyphPen import TTGlyphPen

    builder = FontBuilder(1000, isTTF=True)
    builder.setupGlyphOrder([".notdef", "A"])
    builder.setupCharacterMap({ord("A"): "A"})
    empty = TTGlyphPen(None).glyph()
    builder.setupGlyf({".notdef": empty, "A": empty})
    builder.setupHorizontalMetrics({".notdef": (500, 0), "A": (500, 0)})
    builder.setupHorizontalHeader(ascent=800, descent=-200)
    builder.setupNameTable({"familyName": family, "styleName": style})
    builder.setupOS2()
    builder.setupPost()

    buffer = BytesIO()
    builder.save(buffer)
    return buffer.getvalue()


# Smallest blob the validator accepts by magic number alone
TTF_HEADER = b"\x00\x01\x00\x00\x00"


@pytest.fixture(scope="session")
def font_bytes() -> bytes:
    """A real TrueType font."""
    return build_font()


@pytest.fixture
def make_font() -> Callable[..., bytes]:
    """Factory for real TrueType fonts with a given family and style."""
    return build_font


class FakeRegistry:
    """FontRegistryPort that records registrations without parsing."""

    def __init__(self, reject: bytes | None = None) -> None:
        self.calls: list[tuple[bytes, str]] = []
        self._reject = reject

    def register(self, data: bytes, family: str) -> None:
        from cachedfonts.core.exceptions import RegistrationError

        if self._reject is not None and data == self._reject:
            raise RegistrationError("rejected", family=family)
        self.calls.append((data, family))


class FakeFetcher:
    """FetcherPort serving bodies from a dict and counting requests."""

    def __init__(self, bodies: Mapping[str, bytes]) -> None:
        self.bodies = dict(bodies)
        self.requests: list[str] = []

    def fetch(self, locator: str) -> bytes:
        from cachedfonts.core.exceptions import FetchError

        self.requests.append(locator)
        if locator not in self.bodies:
            raise FetchError(locator, status_code=404)
        return self.bodies[locator]

    def stream(
        self,
        locator: str,
        on_progress: DownloadProgressCallback | None = None,
    ) -> Iterator[bytes]:
        data = self.fetch(locator)
        half = len(data) // 2
        for received, chunk in ((half, data[:half]), (len(data), data[half:])):
            if on_progress is not None:
                on_progress(received / len(data))
            yield chunk


@pytest.fixture
def fake_registry() -> FakeRegistry:
    """Reusable fake font registry."""
    return FakeRegistry()


@pytest.fixture
def make_font_cache(tmp_path: Path) -> Callable[..., FontCache]:
    """Build a FontCache over a FileCache in tmp_path and a FakeFetcher.

    Usage:
        font_cache = make_font_cache({"https://x/a.ttf": data})
    """

    def factory(
        bodies: Mapping[str, bytes] | None = None,
        registry: object | None = None,
        **kwargs: object,
    ) -> FontCache:
        from cachedfonts.adapters.cache import FileCache
        from cachedfonts.core.services import FontCache

        return FontCache(
            cache=FileCache(tmp_path / "fonts"),
            fetcher=FakeFetcher(bodies or {}),
            registry=registry or FakeRegistry(),
            **kwargs,
        )

    return factory


@pytest.fixture
def mock_fetcher() -> Callable[..., HttpFetcher]:
    """Build an HttpFetcher whose client uses an httpx.MockTransport.

    Usage:
        fetcher = mock_fetcher(lambda request: httpx.Response(200, content=b"x"))
    """

    def factory(
        handler: Callable[[httpx.Request], httpx.Response],
        chunk_size: int = 64 * 1024,
    ) -> HttpFetcher:
        from cachedfonts.adapters.http import HttpFetcher

        client = httpx.Client(transport=httpx.MockTransport(handler))
        return HttpFetcher(client=client, chunk_size=chunk_size)

    return factory
