"""Catalog source: REST catalog service (httpx).

Endpoints (relative to `AppSettings.api_base_url`):
- GET /collections
- GET /collections/{id}/products?limit=N
- GET /products/{id}/images?primary=true&limit=1

Every endpoint answers a JSON list. Transport errors, non-2xx statuses and
malformed payloads all surface as `DataSourceError`.
"""

from __future__ import annotations

from typing import Any

import httpx
from pydantic import TypeAdapter, ValidationError

from adapters.http_client import build_async_client
from core.config import AppSettings
from core.domain.errors import DataSourceError
from core.domain.models import Collection, Product, ProductImage

_COLLECTIONS = TypeAdapter(list[Collection])
_PRODUCTS = TypeAdapter(list[Product])
_IMAGES = TypeAdapter(list[ProductImage])


class HttpCatalogSource:
    """Reads the catalog relations from a REST service."""

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    @classmethod
    def from_settings(cls, settings: AppSettings | None = None) -> "HttpCatalogSource":
        return cls(build_async_client(settings))

    async def fetch_collections(self) -> list[Collection]:
        data = await self._get_json("/collections")
        return self._validate(_COLLECTIONS, data, what="collections")

    async def fetch_products(self, collection_id: int, limit: int) -> list[Product]:
        data = await self._get_json(f"/collections/{collection_id}/products", params={"limit": limit})
        return self._validate(_PRODUCTS, data, what=f"products of collection {collection_id}")[:limit]

    async def fetch_primary_image(self, product_id: int) -> ProductImage | None:
        data = await self._get_json(
            f"/products/{product_id}/images",
            params={"primary": "true", "limit": 1},
        )
        images = self._validate(_IMAGES, data, what=f"images of product {product_id}")
        primary = [img for img in images if img.is_primary]
        if not primary:
            return None
        return min(primary, key=lambda img: img.id)

    async def _get_json(self, path: str, *, params: dict[str, Any] | None = None) -> Any:
        try:
            resp = await self._client.get(path, params=params)
            resp.raise_for_status()
            return resp.json()
        except httpx.HTTPError as exc:
            raise DataSourceError(f"GET {path} failed: {exc}") from exc
        except ValueError as exc:
            raise DataSourceError(f"GET {path} returned invalid JSON: {exc}") from exc

    @staticmethod
    def _validate(adapter: TypeAdapter, data: Any, *, what: str) -> list:
        try:
            return adapter.validate_python(data)
        except ValidationError as exc:
            raise DataSourceError(f"unexpected payload for {what}: {exc.error_count()} error(s)") from exc

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "HttpCatalogSource":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
