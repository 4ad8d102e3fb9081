"""
Pytest fixtures shared by the collections-view test suite.

`FakeCatalogSource` implements the `CatalogSource` protocol in memory and can
be told to fail or to delay individual calls, which is how the isolation and
ordering properties of the pipeline are exercised without a database.
"""
from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from core.domain.errors import DataSourceError
from core.domain.models import Collection, Product, ProductImage


SAMPLES_DIR = Path(__file__).resolve().parents[1] / "samples"


class FakeCatalogSource:
    def __init__(
        self,
        collections: list[Collection],
        products: dict[int, list[Product]] | None = None,
        images: dict[int, str] | None = None,
        *,
        fail_listing: bool = False,
        failing_collections: set[int] | None = None,
        failing_products: set[int] | None = None,
        delays: dict[tuple[str, int], float] | None = None,
    ) -> None:
        self.collections = collections
        self.products = products or {}
        self.images = images or {}
        self.fail_listing = fail_listing
        self.failing_collections = failing_collections or set()
        self.failing_products = failing_products or set()
        self.delays = delays or {}
        self.in_flight = 0
        self.max_in_flight = 0

    async def _enter(self, key: tuple[str, int]) -> None:
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delays.get(key, 0))
        finally:
            self.in_flight -= 1

    async def fetch_collections(self) -> list[Collection]:
        if self.fail_listing:
            raise DataSourceError("database unreachable")
        return list(self.collections)

    async def fetch_products(self, collection_id: int, limit: int) -> list[Product]:
        await self._enter(("collection", collection_id))
        if collection_id in self.failing_collections:
            raise DataSourceError(f"timeout sampling collection {collection_id}")
        return list(self.products.get(collection_id, []))[:limit]

    async def fetch_primary_image(self, product_id: int) -> ProductImage | None:
        await self._enter(("product", product_id))
        if product_id in self.failing_products:
            raise DataSourceError(f"timeout loading image of product {product_id}")
        url = self.images.get(product_id)
        if url is None:
            return None
        return ProductImage(id=product_id * 10, product_id=product_id, url=url, is_primary=True)


@pytest.fixture
def summer_source():
    """The Summer / Tee / Cap scenario: one primary image, one product without."""
    return FakeCatalogSource(
        collections=[Collection(id=1, name="Summer", slug="summer")],
        products={1: [Product(id=10, name="Tee"), Product(id=11, name="Cap")]},
        images={10: "img10.png"},
    )


@pytest.fixture
def three_collections_source():
    """Three collections, each with two products and images on every product."""
    return FakeCatalogSource(
        collections=[
            Collection(id=1, name="Summer", slug="summer"),
            Collection(id=2, name="Winter", slug="winter"),
            Collection(id=3, name="Basics", slug="basics"),
        ],
        products={
            1: [Product(id=10, name="Tee"), Product(id=11, name="Cap")],
            2: [Product(id=20, name="Coat"), Product(id=21, name="Scarf")],
            3: [Product(id=30, name="Socks"), Product(id=31, name="Belt")],
        },
        images={pid: f"img{pid}.png" for pid in (10, 11, 20, 21, 30, 31)},
    )


@pytest.fixture
def sample_catalog_path():
    return SAMPLES_DIR / "catalog.json"
