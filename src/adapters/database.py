"""Relational catalog schema and async engine (SQLAlchemy 2.x).

This module centralizes database access for the SQL adapter:
- SQLAlchemy Core table metadata for the four catalog relations
- the async engine builder driven by `AppSettings.database_url`
- `create_schema()` / `seed_catalog()` for local setups and tests

It is not a migration system: `create_schema()` only creates missing tables.
"""

from __future__ import annotations

from sqlalchemy import (
    Boolean,
    Column,
    ForeignKey,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    insert,
)
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from core.config import AppSettings
from core.domain.errors import DataSourceError
from core.domain.models import Collection, Product, ProductImage


metadata = MetaData()

collections = Table(
    "collections",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("name", String(255), nullable=False),
    Column("slug", String(255), nullable=False, unique=True),
)

products = Table(
    "products",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("name", String(255), nullable=False),
)

# Many-to-many association; only used as a filter, never materialized.
product_collections = Table(
    "product_collections",
    metadata,
    Column("product_id", Integer, ForeignKey("products.id", ondelete="CASCADE"), primary_key=True),
    Column("collection_id", Integer, ForeignKey("collections.id", ondelete="CASCADE"), primary_key=True),
)

product_images = Table(
    "product_images",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("product_id", Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True),
    Column("url", Text, nullable=False),
    Column("is_primary", Boolean, nullable=False, default=False),
)


def build_async_engine(settings: AppSettings | None = None, *, url: str | None = None) -> AsyncEngine:
    """Create the async engine for the configured catalog database."""

    settings = settings or AppSettings()
    target = url or settings.database_url
    try:
        return create_async_engine(target, pool_pre_ping=True)
    except (SQLAlchemyError, ImportError) as exc:
        # Bad URL, sync-only dialect or missing driver package.
        raise DataSourceError(f"invalid database URL {target!r}: {exc}") from exc


async def create_schema(engine: AsyncEngine) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(metadata.create_all)


async def seed_catalog(
    engine: AsyncEngine,
    *,
    collection_rows: list[Collection],
    product_rows: list[Product],
    memberships: list[tuple[int, int]],
    image_rows: list[ProductImage],
) -> None:
    """Insert a catalog in one transaction. `memberships` holds (collection_id, product_id) pairs."""

    async with engine.begin() as conn:
        if collection_rows:
            await conn.execute(insert(collections), [c.model_dump() for c in collection_rows])
        if product_rows:
            await conn.execute(insert(products), [p.model_dump() for p in product_rows])
        if memberships:
            await conn.execute(
                insert(product_collections),
                [{"collection_id": c, "product_id": p} for c, p in memberships],
            )
        if image_rows:
            await conn.execute(insert(product_images), [i.model_dump() for i in image_rows])
