"""Shared pytest fixtures for the seeder test suite.

Every test gets its own in-memory SQLite database (aiosqlite keeps a single
shared connection for ``:memory:``), so stages can be exercised in isolation
without a PostgreSQL server.  Network access is replaced by an
``httpx.MockTransport`` that records every request it serves.

Fixture scopes (all function)
-----------------------------
* ``engine``        : async engine with every storefront table created.
* ``session``       : ``AsyncSession`` bound to ``engine``.
* ``sources``       : seeded ``RandomSources``.
* ``image_requests``: list of requests seen by the mock transport.
* ``http_client``   : ``httpx.AsyncClient`` over the mock transport.
* ``fetcher``       : ``AssetFetcher`` caching under ``tmp_path``.
* ``shirt_seeds``   : one category, color, size, and product; no images.
"""

import random
from collections.abc import AsyncGenerator
from pathlib import Path

import httpx
import pytest
from faker import Faker
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

import storefront.models  # noqa: F401  (registers every table on Base.metadata)
from seed.assets import AssetFetcher
from seed.fixtures import Seeds
from seed.randomness import RandomSources
from storefront.database import build_engine, build_session_factory
from storefront.models.base import Base

MEMORY_URL = "sqlite+aiosqlite://"

# ---------------------------------------------------------------------------
# Database
# ---------------------------------------------------------------------------


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    engine = build_engine(MEMORY_URL)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def session(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    async with build_session_factory(engine)() as session:
        yield session


# ---------------------------------------------------------------------------
# Randomness
# ---------------------------------------------------------------------------


@pytest.fixture
def sources() -> RandomSources:
    fake = Faker("en_US")
    fake.seed_instance(42)
    return RandomSources(fake=fake, rng=random.Random(7))


# ---------------------------------------------------------------------------
# Network
# ---------------------------------------------------------------------------


def image_bytes(path: str) -> bytes:
    """Deterministic fake payload served for *path*."""
    return b"\x89PNG fake image " + path.encode()


@pytest.fixture
def image_requests() -> list[httpx.Request]:
    return []


@pytest.fixture
async def http_client(
    image_requests: list[httpx.Request],
) -> AsyncGenerator[httpx.AsyncClient, None]:
    """Mock image host.

    * ``/missing/...``   → 404
    * ``/moved/<name>``  → 302 to ``/images/<name>``
    * anything else      → 200 with :func:`image_bytes`
    """

    def handler(request: httpx.Request) -> httpx.Response:
        image_requests.append(request)
        path = request.url.path
        if path.startswith("/missing/"):
            return httpx.Response(404)
        if path.startswith("/moved/"):
            target = "/images/" + path.rsplit("/", 1)[-1]
            return httpx.Response(302, headers={"Location": target})
        return httpx.Response(200, content=image_bytes(path))

    async with httpx.AsyncClient(
        transport=httpx.MockTransport(handler),
        follow_redirects=True,
    ) as client:
        yield client


@pytest.fixture
def fetcher(tmp_path: Path, http_client: httpx.AsyncClient) -> AssetFetcher:
    return AssetFetcher(tmp_path / "tmp", http_client)


# ---------------------------------------------------------------------------
# Fixture data
# ---------------------------------------------------------------------------


@pytest.fixture
def shirt_seeds() -> Seeds:
    return Seeds.model_validate(
        {
            "categories": [{"name": "Shirts"}],
            "colors": [{"name": "Red", "code": "#FF0000"}],
            "sizes": [{"name": "M", "code": "M"}],
            "products": [
                {
                    "category_name": "Shirts",
                    "name": "Linen Shirt",
                    "name_with_slug": "Linen Shirt",
                    "code": "SHI-100",
                    "price": "45.50",
                    "description": "Relaxed linen shirt.",
                    "made_country": "Portugal",
                    "color_variations": [{"color_name": "Red"}],
                    "size_variations": [{"size_name": "M"}],
                }
            ],
        }
    )
