"""Tests for the image download cache.

The ``http_client`` fixture serves fake payloads and records every request,
so a cache hit is observable as "no new request".
"""

from pathlib import Path

import httpx
import pytest

from seed.assets import AssetFetcher
from seed.errors import AssetFetchError

PAYLOAD_PREFIX = b"\x89PNG fake image "


@pytest.mark.asyncio
async def test_first_open_downloads_into_cache(
    fetcher: AssetFetcher, image_requests: list[httpx.Request]
) -> None:
    """A cache miss performs one GET and stores the body under the URL's file name."""
    with await fetcher.open("https://cdn.test/images/coat.jpg") as fh:
        data = fh.read()

    assert data == PAYLOAD_PREFIX + b"/images/coat.jpg"
    assert len(image_requests) == 1
    assert (fetcher.cache_dir / "coat.jpg").read_bytes() == data


@pytest.mark.asyncio
async def test_second_open_is_served_from_cache(
    fetcher: AssetFetcher, image_requests: list[httpx.Request]
) -> None:
    """Opening the same URL twice hits the network once and returns identical bytes."""
    url = "https://cdn.test/images/shirt.png"
    with await fetcher.open(url) as fh:
        first = fh.read()
    with await fetcher.open(url) as fh:
        second = fh.read()

    assert first == second
    assert len(image_requests) == 1


@pytest.mark.asyncio
async def test_existing_file_skips_network(
    fetcher: AssetFetcher, image_requests: list[httpx.Request]
) -> None:
    """A file already in the cache directory is returned unchanged."""
    fetcher.cache_dir.mkdir(parents=True)
    (fetcher.cache_dir / "bag.jpg").write_bytes(b"cached")

    with await fetcher.open("https://cdn.test/anything/bag.jpg") as fh:
        assert fh.read() == b"cached"
    assert image_requests == []


@pytest.mark.asyncio
async def test_redirect_is_followed(
    fetcher: AssetFetcher, image_requests: list[httpx.Request]
) -> None:
    """Redirects are followed; the cache key stays the originally requested name."""
    with await fetcher.open("https://cdn.test/moved/scarf.jpg") as fh:
        data = fh.read()

    assert data == PAYLOAD_PREFIX + b"/images/scarf.jpg"
    assert [r.url.path for r in image_requests] == ["/moved/scarf.jpg", "/images/scarf.jpg"]
    assert (fetcher.cache_dir / "scarf.jpg").exists()


@pytest.mark.asyncio
async def test_http_error_raises_and_leaves_no_cache_file(fetcher: AssetFetcher) -> None:
    """A non-2xx response is a tolerated AssetFetchError and nothing is cached."""
    url = "https://cdn.test/missing/hat.jpg"
    with pytest.raises(AssetFetchError) as exc_info:
        await fetcher.open(url)

    assert exc_info.value.url == url
    assert url in str(exc_info.value)
    assert not (fetcher.cache_dir / "hat.jpg").exists()


@pytest.mark.asyncio
async def test_transport_error_raises_asset_fetch_error(tmp_path: Path) -> None:
    """Connection failures surface as AssetFetchError."""

    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        fetcher = AssetFetcher(tmp_path / "tmp", client)
        with pytest.raises(AssetFetchError):
            await fetcher.open("https://cdn.test/images/boot.jpg")
    assert not (tmp_path / "tmp" / "boot.jpg").exists()


@pytest.mark.asyncio
async def test_cache_path_uses_last_path_segment(fetcher: AssetFetcher) -> None:
    path = fetcher.cache_path("https://cdn.test/a/b/c/photo.jpg?size=large")
    assert path == fetcher.cache_dir / "photo.jpg"


@pytest.mark.asyncio
async def test_cache_path_rejects_url_without_file_name(fetcher: AssetFetcher) -> None:
    with pytest.raises(AssetFetchError):
        fetcher.cache_path("https://cdn.test/images/")


@pytest.mark.asyncio
@pytest.mark.parametrize("url", ["https://cdn.test/images/..", "https://cdn.test/images/."])
async def test_cache_path_rejects_dot_segments(fetcher: AssetFetcher, url: str) -> None:
    with pytest.raises(AssetFetchError):
        fetcher.cache_path(url)


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "url",
    [
        "http://[broken/a.jpg",
        "http://exa mple.com/a.jpg",
        "https://cdn.test/images/..",
    ],
)
async def test_malformed_url_fails_as_asset_fetch_error(fetcher: AssetFetcher, url: str) -> None:
    """Parse and path errors stay in the tolerated tier instead of escaping raw."""
    try:
        fh = await fetcher.open(url)
    except AssetFetchError as exc:
        assert exc.url == url
    else:
        fh.close()


@pytest.mark.asyncio
async def test_unreadable_cache_entry_raises_asset_fetch_error(
    fetcher: AssetFetcher, image_requests: list[httpx.Request]
) -> None:
    """A directory squatting on the cache name is reported, not raised as an OSError."""
    (fetcher.cache_dir / "belt.jpg").mkdir(parents=True)

    with pytest.raises(AssetFetchError):
        await fetcher.open("https://cdn.test/images/belt.jpg")
    assert image_requests == []
    assert (fetcher.cache_dir / "belt.jpg").is_dir()
