"""
Tests for HttpCatalogSource using httpx.MockTransport.
"""
from __future__ import annotations

import asyncio

import httpx
import pytest

from adapters.catalog_sources import HttpCatalogSource
from adapters.http_client import build_async_client
from core.config import AppSettings
from core.domain.errors import DataSourceError
from core.domain.models import PageStatus
from core.services.collections_pipeline import load_collections_page

BASE_URL = "http://catalog.test/api"


def _catalog_handler(request: httpx.Request) -> httpx.Response:
    path = request.url.path
    if path == "/api/collections":
        return httpx.Response(200, json=[{"id": 1, "name": "Summer", "slug": "summer"}])
    if path == "/api/collections/1/products":
        limit = int(request.url.params["limit"])
        products = [{"id": 10, "name": "Tee"}, {"id": 11, "name": "Cap"}]
        return httpx.Response(200, json=products[:limit])
    if path == "/api/products/10/images":
        assert request.url.params["primary"] == "true"
        return httpx.Response(
            200,
            json=[{"id": 100, "product_id": 10, "url": "img10.png", "is_primary": True}],
        )
    if path == "/api/products/11/images":
        return httpx.Response(503, json={"detail": "unavailable"})
    return httpx.Response(404)


def _source(handler) -> HttpCatalogSource:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url=BASE_URL)
    return HttpCatalogSource(client)


def _run(handler, fn):
    async def scenario():
        async with _source(handler) as source:
            return await fn(source)

    return asyncio.run(scenario())


class TestHttpCatalogSource:
    """REST adapter"""

    def test_fetch_collections(self):
        collections = _run(_catalog_handler, lambda s: s.fetch_collections())

        assert [c.slug for c in collections] == ["summer"]

    def test_fetch_products_sends_limit(self):
        products = _run(_catalog_handler, lambda s: s.fetch_products(1, 1))

        assert [p.name for p in products] == ["Tee"]

    def test_fetch_primary_image(self):
        image = _run(_catalog_handler, lambda s: s.fetch_primary_image(10))

        assert image.url == "img10.png"

    def test_no_images_means_none(self):
        def handler(request):
            return httpx.Response(200, json=[])

        assert _run(handler, lambda s: s.fetch_primary_image(10)) is None

    def test_http_error_status(self):
        with pytest.raises(DataSourceError):
            _run(_catalog_handler, lambda s: s.fetch_primary_image(11))

    def test_transport_error(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(DataSourceError):
            _run(handler, lambda s: s.fetch_collections())

    def test_malformed_payload(self):
        def handler(request):
            return httpx.Response(200, json=[{"id": "not-a-number"}])

        with pytest.raises(DataSourceError):
            _run(handler, lambda s: s.fetch_collections())

    def test_invalid_json(self):
        def handler(request):
            return httpx.Response(200, content=b"<html>oops</html>")

        with pytest.raises(DataSourceError):
            _run(handler, lambda s: s.fetch_collections())

    def test_page_degrades_on_image_failure(self):
        page = _run(_catalog_handler, lambda s: load_collections_page(source=s))

        assert page.status is PageStatus.READY
        assert [p.image_url for p in page.collections[0].products] == ["img10.png", None]
        assert len(page.warnings) == 1


class TestBuildAsyncClient:
    def test_uses_settings(self):
        settings = AppSettings(user_agent="tests/1.0", api_base_url="http://catalog.test/api")
        client = build_async_client(settings)
        try:
            assert client.headers["User-Agent"] == "tests/1.0"
            assert str(client.base_url).startswith("http://catalog.test/api")
        finally:
            asyncio.run(client.aclose())
