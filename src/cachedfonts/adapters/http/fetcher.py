"""HTTP fetcher adapter using httpx."""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx

from cachedfonts.core.exceptions import FetchError, InvalidLocatorError


if TYPE_CHECKING:
    from collections.abc import Iterator

    from cachedfonts.core.ports import DownloadProgressCallback


# Chunk size for streaming downloads (64KB)
_CHUNK_SIZE = 64 * 1024

# Request timeout in seconds
REQUEST_TIMEOUT = 30.0

USER_AGENT = "cachedfonts/0.1"


class HttpFetcher:
    """Fetcher adapter for http(s) font downloads.

    Implements FetcherPort on top of a synchronous httpx client.
    """

    def __init__(
        self,
        client: httpx.Client | None = None,
        timeout: float = REQUEST_TIMEOUT,
        chunk_size: int = _CHUNK_SIZE,
    ) -> None:
        """Initialize the fetcher.

        Args:
            client: Optional httpx client. If not provided, creates one that
                follows redirects.
            timeout: Request timeout in seconds for the default client.
            chunk_size: Bytes per chunk when streaming.
        """
        self._client = client or httpx.Client(
            timeout=timeout,
            follow_redirects=True,
            headers={"User-Agent": USER_AGENT},
        )
        self._chunk_size = chunk_size

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self._client.close()

    @staticmethod
    def _parse_locator(locator: str) -> httpx.URL:
        """Parse locator into an absolute http(s) url.

        Raises:
            InvalidLocatorError: If locator is empty, malformed or not http(s).
        """
        if not locator:
            raise InvalidLocatorError(locator, "empty url")
        try:
            url = httpx.URL(locator)
        except httpx.InvalidURL as e:
            raise InvalidLocatorError(locator, str(e)) from e
        if url.scheme not in ("http", "https"):
            raise InvalidLocatorError(locator, f"unsupported scheme {url.scheme!r}")
        if not url.host:
            raise InvalidLocatorError(locator, "missing host")
        return url

    def fetch(self, locator: str) -> bytes:
        """Download a font file in one request.

        Args:
            locator: http(s) url of the font.

        Returns:
            The response body.

        Raises:
            InvalidLocatorError: If locator is not a usable url.
            FetchError: On transport failure or non-2xx status.
        """
        url = self._parse_locator(locator)
        try:
            response = self._client.get(url)
        except httpx.HTTPError as e:
            raise FetchError(locator, cause=e) from e

        if not response.is_success:
            raise FetchError(locator, status_code=response.status_code)
        return response.content

    def stream(
        self,
        locator: str,
        on_progress: DownloadProgressCallback | None = None,
    ) -> Iterator[bytes]:
        """Download a font file chunk by chunk.

        Progress is reported as bytes received / Content-Length after each
        chunk, counting bytes as sent on the wire so compressed responses
        stay within [0, 1]. When the server sends no usable Content-Length,
        no progress is reported.

        Args:
            locator: http(s) url of the font.
            on_progress: Optional callback receiving the fraction downloaded.

        Yields:
            Chunks of the response body in order.

        Raises:
            InvalidLocatorError: If locator is not a usable url.
            FetchError: On transport failure (including mid-stream) or
                non-2xx status.
        """
        url = self._parse_locator(locator)
        try:
            with self._client.stream("GET", url) as response:
                if not response.is_success:
                    raise FetchError(locator, status_code=response.status_code)

                total = _content_length(response)
                received = 0
                for chunk in response.iter_bytes(self._chunk_size):
                    received += len(chunk)
                    if on_progress is not None and total:
                        # Content-Length counts encoded bytes, chunks are decoded
                        wire = min(received, response.num_bytes_downloaded, total)
                        on_progress(wire / total)
                    yield chunk
        except httpx.HTTPError as e:
            raise FetchError(locator, cause=e) from e


def _content_length(response: httpx.Response) -> int | None:
    """Parse Content-Length; a missing, malformed or zero value is unknown."""
    try:
        total = int(response.headers.get("Content-Length", ""))
    except ValueError:
        return None
    return total if total > 0 else None
