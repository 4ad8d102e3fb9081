"""Catalog source: JSON snapshot file.

Format:
    {
      "collections": [{"id": 1, "name": "Summer", "slug": "summer"}],
      "products":    [{"id": 10, "name": "Tee"}],
      "memberships": [{"collection_id": 1, "product_id": 10}],
      "images":      [{"id": 100, "product_id": 10, "url": "img10.png", "is_primary": true}]
    }

Product order inside a collection is the order of `memberships` in the file.
Used for offline demos, `init-db` seeding and tests.
"""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError, model_validator

from core.domain.errors import DataSourceError
from core.domain.models import Collection, Product, ProductImage


class Membership(BaseModel):
    collection_id: int
    product_id: int


class CatalogSnapshot(BaseModel):
    collections: list[Collection] = Field(default_factory=list)
    products: list[Product] = Field(default_factory=list)
    memberships: list[Membership] = Field(default_factory=list)
    images: list[ProductImage] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_unique_keys(self) -> "CatalogSnapshot":
        keys = {
            "collection id": [c.id for c in self.collections],
            "collection slug": [c.slug for c in self.collections],
            "product id": [p.id for p in self.products],
            "image id": [i.id for i in self.images],
        }
        for label, values in keys.items():
            seen: set[object] = set()
            for value in values:
                if value in seen:
                    raise ValueError(f"duplicate {label}: {value!r}")
                seen.add(value)
        return self


def load_snapshot(path: Path) -> CatalogSnapshot:
    try:
        raw = path.read_text(encoding="utf-8")
        data = json.loads(raw)
        return CatalogSnapshot.model_validate(data)
    except (OSError, ValueError, ValidationError) as exc:
        raise DataSourceError(f"cannot load catalog snapshot {path}: {exc}") from exc


class SnapshotCatalogSource:
    """Serves the three catalog reads from an in-memory `CatalogSnapshot`."""

    def __init__(self, snapshot: CatalogSnapshot) -> None:
        self._snapshot = snapshot
        self._products = {p.id: p for p in snapshot.products}

    @classmethod
    def from_path(cls, path: Path) -> "SnapshotCatalogSource":
        return cls(load_snapshot(path))

    async def fetch_collections(self) -> list[Collection]:
        return list(self._snapshot.collections)

    async def fetch_products(self, collection_id: int, limit: int) -> list[Product]:
        out: list[Product] = []
        for link in self._snapshot.memberships:
            if len(out) >= limit:
                break
            if link.collection_id != collection_id:
                continue
            product = self._products.get(link.product_id)
            if product is not None:
                out.append(product)
        return out

    async def fetch_primary_image(self, product_id: int) -> ProductImage | None:
        primary = [
            img for img in self._snapshot.images if img.product_id == product_id and img.is_primary
        ]
        if not primary:
            return None
        return min(primary, key=lambda img: img.id)

    async def aclose(self) -> None:
        return None

    async def __aenter__(self) -> "SnapshotCatalogSource":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
