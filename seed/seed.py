"""Seed script: reset the storefront tables and populate them with sample data.

Run as:
    python -m seed

Requires DATABASE_URL and DRAFT_DATABASE_URL environment variables (or a .env file).
"""

import logging
import re
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import TypeVar

import httpx
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from seed.assets import AssetFetcher
from seed.errors import AssetFetchError, ReferenceNotFoundError, StorageError
from seed.fixtures import Seeds, load_seeds
from seed.randomness import RandomSources
from seed.reset import reset_schema
from storefront.config import Settings
from storefront.database import StorageTargets, build_session_factory
from storefront.models import (
    Address,
    Category,
    Color,
    ColorVariation,
    ColorVariationImage,
    Order,
    OrderItem,
    Product,
    Size,
    SizeVariation,
    Store,
    User,
)

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Generation constants
# ---------------------------------------------------------------------------

USER_COUNT = 500
ORDER_USER_LIMIT = 480
GENDERS = ["Female", "Male"]
SIZE_VARIATION_QUANTITY = 20
ORDER_QUANTITIES = [1, 2, 3, 4, 5]
ORDER_DISCOUNT_RATES = [0, 5, 10, 15, 20, 25]


def slugify(text: str) -> str:
    """Return a lowercase, hyphen-separated slug, e.g. "Men's Coat" -> "mens-coat"."""
    text = re.sub(r"['’]", "", text.lower())
    return re.sub(r"[^a-z0-9]+", "-", text).strip("-")


T = TypeVar("T")


def _lookup(mapping: dict[str, T], kind: str, name: str) -> T:
    try:
        return mapping[name]
    except KeyError:
        raise ReferenceNotFoundError(kind, name) from None


# ---------------------------------------------------------------------------
# Seed functions
# ---------------------------------------------------------------------------


async def create_users(
    session: AsyncSession, sources: RandomSources, count: int = USER_COUNT
) -> list[User]:
    """Create *count* users with alternating gender and back-dated sign-up times."""
    users: list[User] = []
    for i in range(count):
        users.append(
            User(
                email=sources.fake.email(),
                name=sources.fake.name(),
                gender=GENDERS[i % 2],
                created_at=sources.backdated(),
            )
        )
    session.add_all(users)
    await session.flush()
    return users


async def create_addresses(session: AsyncSession, sources: RandomSources) -> None:
    """Give every user one address built from their name and fake contact data."""
    result = await session.execute(select(User).order_by(User.id))
    for user in result.scalars():
        city = sources.fake.city()
        session.add(
            Address(
                user_id=user.id,
                contact_name=user.name,
                phone=sources.fake.phone_number(),
                city=city,
                address1=f"{sources.fake.street_address()}, {city}, {sources.fake.postcode()}",
            )
        )
    await session.flush()


async def create_categories(session: AsyncSession, seeds: Seeds) -> dict[str, Category]:
    """Create fixture categories.  Returns a mapping of name -> Category.

    When a name is declared more than once, the first row is the one returned.
    """
    category_map: dict[str, Category] = {}
    for c in seeds.categories:
        category = Category(name=c.name)
        session.add(category)
        category_map.setdefault(c.name, category)
    await session.flush()
    return category_map


async def create_colors(session: AsyncSession, seeds: Seeds) -> dict[str, Color]:
    """Create fixture colors.  Returns a mapping of name -> Color.

    When a name is declared more than once, the first row is the one returned.
    """
    color_map: dict[str, Color] = {}
    for c in seeds.colors:
        color = Color(name=c.name, code=c.code)
        session.add(color)
        color_map.setdefault(c.name, color)
    await session.flush()
    return color_map


async def create_sizes(session: AsyncSession, seeds: Seeds) -> dict[str, Size]:
    """Create fixture sizes.  Returns a mapping of name -> Size.

    When a name is declared more than once, the first row is the one returned.
    """
    size_map: dict[str, Size] = {}
    for s in seeds.sizes:
        size = Size(name=s.name, code=s.code)
        session.add(size)
        size_map.setdefault(s.name, size)
    await session.flush()
    return size_map


async def _load_image(fetcher: AssetFetcher, url: str) -> bytes | None:
    try:
        with await fetcher.open(url) as fh:
            try:
                return fh.read()
            except OSError as exc:
                raise AssetFetchError(url, exc) from exc
    except AssetFetchError as exc:
        logger.warning("%s", exc)
        return None


async def create_products(
    session: AsyncSession,
    seeds: Seeds,
    category_map: dict[str, Category],
    color_map: dict[str, Color],
    size_map: dict[str, Size],
    fetcher: AssetFetcher,
) -> list[Product]:
    """Create products with their color variations, images, and size variations.

    An unknown category, color, or size name aborts the run.  An image that
    cannot be fetched is logged and left out.
    """
    products: list[Product] = []
    for p in seeds.products:
        category = _lookup(category_map, "category", p.category_name)
        name_with_slug = p.name_with_slug or p.name

        product = Product(
            category_id=category.id,
            name=p.name,
            name_with_slug=name_with_slug,
            slug=slugify(name_with_slug),
            code=p.code,
            price=p.price,
            description=p.description,
            made_country=p.made_country,
        )

        for cv in p.color_variations:
            color = _lookup(color_map, "color", cv.color_name)
            color_variation = ColorVariation(color_id=color.id)
            product.color_variations.append(color_variation)

            for image in cv.images:
                payload = await _load_image(fetcher, image.url)
                if payload is not None:
                    color_variation.images.append(ColorVariationImage(image=payload))

            for sv in p.size_variations:
                size = _lookup(size_map, "size", sv.size_name)
                color_variation.size_variations.append(
                    SizeVariation(size_id=size.id, available_quantity=SIZE_VARIATION_QUANTITY)
                )

        session.add(product)
        await session.flush()
        products.append(product)

    return products


async def create_stores(session: AsyncSession, seeds: Seeds) -> None:
    """Create fixture stores."""
    for s in seeds.stores:
        session.add(
            Store(
                name=s.name,
                phone=s.phone,
                email=s.email,
                country=s.country,
                zip=s.zip,
                city=s.city,
                region=s.region,
                address=s.address,
                latitude=s.latitude,
                longitude=s.longitude,
            )
        )
    await session.flush()


async def create_orders(
    session: AsyncSession, sources: RandomSources, limit: int = ORDER_USER_LIMIT
) -> list[Order]:
    """Create one single-item order for each of the first *limit* users.

    Size variations are assigned round-robin; quantity and discount rate
    cycle through fixed lists by the user's position.
    """
    user_result = await session.execute(
        select(User)
        .options(selectinload(User.addresses))
        .order_by(User.id)
        .limit(limit)
        .execution_options(populate_existing=True)
    )
    users = list(user_result.scalars())

    sv_result = await session.execute(
        select(SizeVariation)
        .options(selectinload(SizeVariation.color_variation).selectinload(ColorVariation.product))
        .order_by(SizeVariation.id)
        .execution_options(populate_existing=True)
    )
    size_variations = list(sv_result.scalars())
    if users and not size_variations:
        raise StorageError("create orders failure, got err no size variations to order")

    orders: list[Order] = []
    for i, user in enumerate(users):
        if not user.addresses:
            raise ReferenceNotFoundError("address for user", user.email)
        address = user.addresses[0]

        size_variation = size_variations[i % len(size_variations)]
        product = size_variation.color_variation.product

        order = Order(
            user_id=user.id,
            shipping_address_id=address.id,
            billing_address_id=address.id,
            created_at=user.created_at + sources.order_offset(),
        )
        order.items.append(
            OrderItem(
                size_variation_id=size_variation.id,
                quantity=ORDER_QUANTITIES[i % len(ORDER_QUANTITIES)],
                price=product.price,
                discount_rate=ORDER_DISCOUNT_RATES[i % len(ORDER_DISCOUNT_RATES)],
            )
        )
        orders.append(order)

    session.add_all(orders)
    await session.flush()
    return orders


# ---------------------------------------------------------------------------
# Orchestration
# ---------------------------------------------------------------------------


@asynccontextmanager
async def _stage(session: AsyncSession, label: str) -> AsyncIterator[None]:
    """Commit the stage's work, turning any database error into a fatal one."""
    try:
        yield
        await session.commit()
    except SQLAlchemyError as exc:
        await session.rollback()
        raise StorageError(f"create {label} failure, got err {exc}") from exc
    print(f"--> Created {label}.")


async def create_records(
    session: AsyncSession,
    seeds: Seeds,
    sources: RandomSources,
    fetcher: AssetFetcher,
    user_count: int = USER_COUNT,
    order_user_limit: int = ORDER_USER_LIMIT,
) -> None:
    print("Start create sample data...")

    async with _stage(session, "users"):
        await create_users(session, sources, user_count)
    async with _stage(session, "addresses"):
        await create_addresses(session, sources)

    async with _stage(session, "categories"):
        category_map = await create_categories(session, seeds)
    async with _stage(session, "colors"):
        color_map = await create_colors(session, seeds)
    async with _stage(session, "sizes"):
        size_map = await create_sizes(session, seeds)
    async with _stage(session, "products"):
        await create_products(session, seeds, category_map, color_map, size_map, fetcher)
    async with _stage(session, "stores"):
        await create_stores(session, seeds)

    async with _stage(session, "orders"):
        await create_orders(session, sources, order_user_limit)

    print("--> Done!")


async def run(settings: Settings, data_glob: str | None = None) -> None:
    """Load fixtures, reset both storage targets, and seed the primary one."""
    seeds = load_seeds(data_glob or settings.seeds_data_glob)
    sources = RandomSources.from_settings(settings)
    targets = StorageTargets.from_urls(settings.database_url, settings.draft_database_url)

    try:
        await reset_schema(targets)

        session_factory = build_session_factory(targets.primary)
        async with (
            httpx.AsyncClient(
                follow_redirects=True,
                timeout=settings.asset_timeout_seconds,
            ) as client,
            session_factory() as session,
        ):
            fetcher = AssetFetcher(Path(settings.asset_cache_dir), client)
            await create_records(
                session,
                seeds,
                sources,
                fetcher,
                user_count=settings.user_count,
                order_user_limit=settings.order_user_limit,
            )
    finally:
        await targets.dispose()

