"""Catalog query-service contract.

Why Protocol:
- Structural contract (duck typing) without rigid inheritance.
- SQL, HTTP and snapshot adapters stay interchangeable, and tests can plug
  in in-memory fakes without touching the core.
"""

from __future__ import annotations

from typing import Protocol, Sequence, runtime_checkable

from core.domain.models import Collection, Product, ProductImage


@runtime_checkable
class CatalogSource(Protocol):
    """The three read operations the aggregation pipeline needs.

    Design rules:
    - Every method is async because it typically performs I/O.
    - Backend failures are raised as `core.domain.errors.DataSourceError`.
    - Results keep the backend's order, which must be stable for unchanged data.
    """

    async def fetch_collections(self) -> Sequence[Collection]:
        """Every collection, in listing order."""

        ...

    async def fetch_products(self, collection_id: int, limit: int) -> Sequence[Product]:
        """At most `limit` products associated with `collection_id`."""

        ...

    async def fetch_primary_image(self, product_id: int) -> ProductImage | None:
        """The product's primary image; lowest image id wins when several are flagged."""

        ...
