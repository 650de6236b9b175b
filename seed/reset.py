import logging

from sqlalchemy import Connection, Table
from sqlalchemy.exc import SQLAlchemyError

from seed.errors import SchemaResetError
from storefront.database import StorageTargets
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
from storefront.models.base import Base

logger = logging.getLogger(__name__)

# Creation order; dependants follow the tables they reference.
TABLES: list[type[Base]] = [
    User,
    Address,
    Category,
    Color,
    Size,
    Product,
    ColorVariation,
    ColorVariationImage,
    SizeVariation,
    Store,
    Order,
    OrderItem,
]


def _drop_and_create(connection: Connection, tables: list[Table]) -> None:
    for table in reversed(tables):
        table.drop(connection, checkfirst=True)
    for table in tables:
        table.create(connection, checkfirst=True)


async def reset_schema(targets: StorageTargets, models: list[type[Base]] = TABLES) -> None:
    """Drop and recreate *models*' tables on every storage target."""
    tables = [model.__table__ for model in models]
    for name, engine in targets.items():
        try:
            async with engine.begin() as conn:
                await conn.run_sync(_drop_and_create, tables)
        except SQLAlchemyError as exc:
            raise SchemaResetError(f"reset {name} tables failure, got err {exc}") from exc
        logger.info("Reset %d tables on %s target", len(tables), name)
