"""Download-once cache for remote product images."""

import logging
from pathlib import Path
from typing import BinaryIO
from urllib.parse import urlsplit

import httpx

from seed.errors import AssetFetchError

logger = logging.getLogger(__name__)


class AssetFetcher:
    """Resolve image URLs to local files under *cache_dir*.

    Files are keyed by the last path segment of the URL.  A file that is
    already present is returned without touching the network.  The client
    should be created with ``follow_redirects=True``.
    """

    def __init__(self, cache_dir: Path, client: httpx.AsyncClient) -> None:
        self.cache_dir = cache_dir
        self._client = client

    def cache_path(self, url: str) -> Path:
        try:
            file_name = urlsplit(url).path.rsplit("/", 1)[-1]
        except ValueError as exc:
            raise AssetFetchError(url, exc) from exc
        if file_name in ("", ".", ".."):
            raise AssetFetchError(url, "URL path has no file name")
        return self.cache_dir / file_name

    async def open(self, url: str) -> BinaryIO:
        """Return *url*'s content as a file opened for binary reading."""
        path = self.cache_path(url)
        if path.exists():
            try:
                return path.open("rb")
            except OSError as exc:
                raise AssetFetchError(url, exc) from exc

        try:
            self.cache_dir.mkdir(parents=True, exist_ok=True)
            async with self._client.stream("GET", url) as response:
                response.raise_for_status()
                with path.open("wb") as fh:
                    async for chunk in response.aiter_bytes():
                        fh.write(chunk)
        except (httpx.HTTPError, httpx.InvalidURL, OSError, ValueError) as exc:
            if path.is_file():
                path.unlink()
            raise AssetFetchError(url, exc) from exc

        logger.info("Downloaded %s", url)
        try:
            return path.open("rb")
        except OSError as exc:
            raise AssetFetchError(url, exc) from exc
