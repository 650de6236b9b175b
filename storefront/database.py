import ssl as _ssl
from collections.abc import Iterator
from dataclasses import dataclass
from urllib.parse import parse_qs, urlencode, urlsplit, urlunsplit

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine


def _asyncpg_url(url: str) -> tuple[str, dict]:
    """Convert a database URL for asyncpg compatibility.

    asyncpg does not accept ``sslmode`` as a query parameter; it expects
    ``ssl`` to be passed via ``connect_args``.  This helper strips
    ``sslmode`` from the URL and returns the cleaned URL plus any extra
    ``connect_args`` needed.
    """
    parts = urlsplit(url)
    qs = parse_qs(parts.query)
    connect_args: dict = {}

    if "sslmode" in qs:
        mode = qs.pop("sslmode")[0]
        if mode in ("require", "verify-ca", "verify-full"):
            connect_args["ssl"] = _ssl.create_default_context()
        new_query = urlencode(qs, doseq=True)
        url = urlunsplit(parts._replace(query=new_query))

    return url, connect_args


def build_engine(url: str) -> AsyncEngine:
    """Create an async engine for *url*.

    Pool sizing only applies to server databases; SQLite engines keep the
    dialect's default pool (a single shared connection for ``:memory:``).
    """
    url, connect_args = _asyncpg_url(url)
    if url.startswith("sqlite"):
        return create_async_engine(url, connect_args=connect_args)
    return create_async_engine(
        url,
        pool_pre_ping=True,
        pool_size=5,
        max_overflow=10,
        connect_args=connect_args,
    )


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@dataclass
class StorageTargets:
    """The two databases a seed run writes to: ``primary`` and its ``draft`` mirror."""

    primary: AsyncEngine
    draft: AsyncEngine

    @classmethod
    def from_urls(cls, primary_url: str, draft_url: str) -> "StorageTargets":
        return cls(primary=build_engine(primary_url), draft=build_engine(draft_url))

    def items(self) -> Iterator[tuple[str, AsyncEngine]]:
        yield "primary", self.primary
        yield "draft", self.draft

    async def dispose(self) -> None:
        for _, engine in self.items():
            await engine.dispose()

