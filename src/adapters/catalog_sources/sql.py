"""Catalog source: relational database (SQLAlchemy async Core).

Each read is a single query on its own pooled connection, so the pipeline's
concurrent calls never share a cursor.
"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine

from adapters.database import (
    build_async_engine,
    collections,
    product_collections,
    product_images,
    products,
)
from core.config import AppSettings
from core.domain.errors import DataSourceError
from core.domain.models import Collection, Product, ProductImage


class SqlCatalogSource:
    """Reads collections, sampled products and primary images from SQL.

    Ordering is explicit (by primary key) so repeated runs over unchanged
    data return identical sequences.
    """

    def __init__(self, engine: AsyncEngine, *, owns_engine: bool = False) -> None:
        self._engine = engine
        self._owns_engine = owns_engine

    @classmethod
    def from_settings(cls, settings: AppSettings | None = None) -> "SqlCatalogSource":
        return cls(build_async_engine(settings), owns_engine=True)

    async def fetch_collections(self) -> list[Collection]:
        stmt = select(collections.c.id, collections.c.name, collections.c.slug).order_by(collections.c.id)
        rows = await self._fetch_all(stmt, what="collections")
        return [Collection(id=r.id, name=r.name, slug=r.slug) for r in rows]

    async def fetch_products(self, collection_id: int, limit: int) -> list[Product]:
        stmt = (
            select(products.c.id, products.c.name)
            .select_from(product_collections)
            .join(products, product_collections.c.product_id == products.c.id)
            .where(product_collections.c.collection_id == collection_id)
            .order_by(products.c.id)
            .limit(limit)
        )
        rows = await self._fetch_all(stmt, what=f"products of collection {collection_id}")
        return [Product(id=r.id, name=r.name) for r in rows]

    async def fetch_primary_image(self, product_id: int) -> ProductImage | None:
        stmt = (
            select(
                product_images.c.id,
                product_images.c.product_id,
                product_images.c.url,
                product_images.c.is_primary,
            )
            .where(product_images.c.product_id == product_id)
            .where(product_images.c.is_primary.is_(True))
            # Lowest id wins when several images are flagged primary.
            .order_by(product_images.c.id)
            .limit(1)
        )
        rows = await self._fetch_all(stmt, what=f"primary image of product {product_id}")
        if not rows:
            return None
        row = rows[0]
        return ProductImage(id=row.id, product_id=row.product_id, url=row.url, is_primary=row.is_primary)

    async def _fetch_all(self, stmt, *, what: str) -> list:
        try:
            async with self._engine.connect() as conn:
                result = await conn.execute(stmt)
                return list(result.all())
        except SQLAlchemyError as exc:
            raise DataSourceError(f"database query failed ({what}): {exc}") from exc

    async def aclose(self) -> None:
        if self._owns_engine:
            await self._engine.dispose()

    async def __aenter__(self) -> "SqlCatalogSource":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
