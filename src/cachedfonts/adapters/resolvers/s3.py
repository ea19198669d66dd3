"""S3 locator resolver using boto3."""

from __future__ import annotations

from typing import TYPE_CHECKING

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from cachedfonts.core.exceptions import FetchError, InvalidLocatorError


if TYPE_CHECKING:
    from mypy_boto3_s3 import S3Client


# Lifetime of generated download urls in seconds
DEFAULT_EXPIRES_IN = 3600


class S3LocatorResolver:
    """Resolves s3://bucket/key locators into presigned https urls.

    Implements LocatorResolverPort. The cache key is still derived from the
    s3:// locator, so a cached font is found again even though each
    presigned url is different.
    """

    def __init__(
        self,
        client: S3Client | None = None,
        expires_in: int = DEFAULT_EXPIRES_IN,
    ) -> None:
        """Initialize the resolver.

        Args:
            client: Optional boto3 S3 client. If not provided, creates a default client.
            expires_in: Seconds the generated urls stay valid.
        """
        self._client = client or boto3.client("s3")
        self._expires_in = expires_in

    def handles(self, locator: str) -> bool:
        """Check whether locator is an s3:// uri."""
        return locator.startswith("s3://")

    def resolve(self, locator: str) -> str:
        """Generate a download url for an S3 object.

        Args:
            locator: S3 URI (s3://bucket/key).

        Returns:
            Presigned https url for a GET of the object.

        Raises:
            InvalidLocatorError: If locator is not a valid S3 URI.
            FetchError: If boto3 cannot sign the request.
        """
        bucket, key = self._parse_s3_uri(locator)
        try:
            return self._client.generate_presigned_url(
                "get_object",
                Params={"Bucket": bucket, "Key": key},
                ExpiresIn=self._expires_in,
            )
        except (ClientError, BotoCoreError) as e:
            raise FetchError(locator, cause=e) from e

    def _parse_s3_uri(self, uri: str) -> tuple[str, str]:
        """Parse an S3 URI into bucket and key.

        Args:
            uri: S3 URI in format s3://bucket/key.

        Returns:
            Tuple of (bucket, key).

        Raises:
            InvalidLocatorError: If URI is not a valid S3 URI.
        """
        if not self.handles(uri):
            raise InvalidLocatorError(uri, "not an s3:// uri")

        # Remove s3:// prefix and split on first /
        parts = uri[5:].split("/", 1)
        if len(parts) != 2 or not parts[0] or not parts[1]:
            raise InvalidLocatorError(uri, "missing bucket or key")

        bucket, key = parts
        return bucket, key
