"""Integration tests for FontCache with the S3 resolver under moto."""

from collections.abc import Callable
from pathlib import Path

import pytest

from cachedfonts.adapters.cache import FileCache
from cachedfonts.adapters.registry import FontToolsRegistry
from cachedfonts.adapters.resolvers import S3LocatorResolver
from cachedfonts.core.services import FontCache
from cachedfonts.facade import DynamicFont


class S3BackedFetcher:
    """Serves presigned urls by reading the object back through boto3.

    moto intercepts botocore, not arbitrary HTTP clients, so the signed
    url is only recorded and the body comes from get_object.
    """

    def __init__(self, s3_client, bucket: str, key: str) -> None:
        self._client = s3_client
        self._bucket = bucket
        self._key = key
        self.requests: list[str] = []

    def fetch(self, locator: str) -> bytes:
        self.requests.append(locator)
        response = self._client.get_object(Bucket=self._bucket, Key=self._key)
        return response["Body"].read()

    def stream(self, locator, on_progress=None):
        yield self.fetch(locator)


@pytest.mark.storage
@pytest.mark.tra("Adapter.S3Resolver")
@pytest.mark.tier(2)
class TestFontCacheWithS3:
    """FontCache wired with the S3 resolver."""

    def test_cache_key_uses_s3_locator(self, s3_client, tmp_path: Path) -> None:
        """The font should be found again by its s3:// locator."""
        body = b"OTTO\x00font"
        s3_client.put_object(Bucket="test-bucket", Key="fonts/b.otf", Body=body)
        fetcher = S3BackedFetcher(s3_client, "test-bucket", "fonts/b.otf")
        font_cache = FontCache(
            cache=FileCache(tmp_path),
            fetcher=fetcher,
            registry=FontToolsRegistry(),
            resolver=S3LocatorResolver(client=s3_client),
        )

        assert font_cache.cache_font("s3://test-bucket/fonts/b.otf") == body
        assert fetcher.requests[0].startswith("https://")
        assert "fonts/b.otf" in fetcher.requests[0]
        assert font_cache.can_load_font("s3://test-bucket/fonts/b.otf")
        assert font_cache.cache.list_all_keys() == ["s3test-bucketfontsb.otf"]

    def test_from_bucket_loads_real_font(
        self, s3_client, tmp_path: Path, make_font: Callable[..., bytes]
    ) -> None:
        """DynamicFont.from_bucket() should download, cache and register."""
        data = make_font(family="Bucket Sans")
        s3_client.put_object(Bucket="test-bucket", Key="fonts/a.ttf", Body=data)
        fetcher = S3BackedFetcher(s3_client, "test-bucket", "fonts/a.ttf")
        registry = FontToolsRegistry()
        font_cache = FontCache(
            cache=FileCache(tmp_path),
            fetcher=fetcher,
            registry=registry,
            resolver=S3LocatorResolver(client=s3_client),
        )

        font = DynamicFont.from_bucket(
            "s3://test-bucket/fonts/a.ttf", "Bucket", font_cache=font_cache
        )

        assert font.load() == [data]
        assert registry.registered("Bucket")[0].internal_family == "Bucket Sans"
        assert len(fetcher.requests) == 1
