"""Collections aggregation orchestration.

This module turns the three flat catalog relations (collections, the
collection-to-product association and product images) into the nested view
model consumed by the presentation layer. Side-effects (printing, progress)
stay out of here; callers observe degraded branches through `PipelineHooks`
and the returned warnings.

Fan-out is a three-level tree: one listing call, one sampling call per
collection, one image lookup per sampled product. Every edge below the root
is wrapped by `isolate`, so a failure only blanks its immediate parent's
field and never the siblings.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Awaitable, Callable, TypeVar

from core.config import DEFAULT_SAMPLE_SIZE
from core.domain.errors import (
    CatalogError,
    DataSourceError,
    ImageResolutionError,
    SampleError,
)
from core.domain.models import (
    Collection,
    CollectionsPage,
    CollectionView,
    ImageLookup,
    PageStatus,
    Product,
    ProductView,
)
from core.interfaces.catalog_source import CatalogSource

T = TypeVar("T")


@dataclass
class PipelineHooks:
    """Optional callbacks for UI layers."""

    warning: Callable[[str], None] | None = None


@dataclass
class AggregationResult:
    """Output of one aggregation run."""

    collections: list[CollectionView]
    warnings: list[str] = field(default_factory=list)


async def isolate(
    operation: Awaitable[T],
    *,
    fallback: Callable[[Exception], T],
    on_error: Callable[[Exception], None] | None = None,
) -> T:
    """Await `operation`; on failure report it and return `fallback(exc)` instead."""

    try:
        return await operation
    except Exception as exc:
        if on_error:
            on_error(exc)
        return fallback(exc)


async def list_collections(source: CatalogSource) -> list[Collection]:
    """Root of the tree. Failures are not isolated here."""

    try:
        collections = await source.fetch_collections()
    except CatalogError:
        raise
    except Exception as exc:
        raise DataSourceError(f"failed to list collections: {exc}") from exc
    return list(collections)


async def sample_products(source: CatalogSource, collection_id: int, limit: int) -> list[Product]:
    """Up to `limit` products of a collection, in source order."""

    if limit < 1:
        raise ValueError(f"limit must be a positive integer, got {limit}")
    try:
        products = await source.fetch_products(collection_id, limit)
    except Exception as exc:
        raise SampleError(collection_id, str(exc)) from exc
    # Adapters are expected to honour the limit; the slice keeps the bound regardless.
    return list(products)[:limit]


async def resolve_primary_image(source: CatalogSource, product_id: int) -> ImageLookup:
    """Primary image of a product as an explicit found/missing lookup."""

    try:
        image = await source.fetch_primary_image(product_id)
    except Exception as exc:
        raise ImageResolutionError(product_id, str(exc)) from exc
    if image is None:
        return ImageLookup.missing()
    return ImageLookup.found(image.url)


async def aggregate(
    *,
    source: CatalogSource,
    sample_size: int = DEFAULT_SAMPLE_SIZE,
    hooks: PipelineHooks | None = None,
) -> AggregationResult:
    """Build every `CollectionView` and collect the warnings of degraded branches.

    Raises `DataSourceError` only when the top-level listing fails; in that
    case no partial views are produced.
    """

    if sample_size < 1:
        raise ValueError(f"sample_size must be a positive integer, got {sample_size}")

    hooks = hooks or PipelineHooks()
    warnings: list[str] = []

    def report(message: str) -> None:
        warnings.append(message)
        if hooks.warning:
            hooks.warning(message)

    async def build_product(product: Product) -> ProductView:
        lookup = await isolate(
            resolve_primary_image(source, product.id),
            fallback=lambda exc: ImageLookup.failed(str(exc)),
            on_error=lambda exc: report(f"Error fetching image for product {product.id}: {exc}"),
        )
        return ProductView(id=product.id, name=product.name, image_url=lookup.image_url)

    async def build_collection(collection: Collection) -> CollectionView:
        products = await isolate(
            sample_products(source, collection.id, sample_size),
            fallback=lambda exc: [],
            on_error=lambda exc: report(f"Error fetching products for collection {collection.id}: {exc}"),
        )
        product_views = await asyncio.gather(*(build_product(p) for p in products))
        return CollectionView(
            id=collection.id,
            name=collection.name,
            slug=collection.slug,
            products=list(product_views),
        )

    collections = await list_collections(source)
    if not collections:
        return AggregationResult(collections=[], warnings=warnings)

    # gather keeps argument order, independent of completion order.
    views = await asyncio.gather(*(build_collection(c) for c in collections))
    return AggregationResult(collections=list(views), warnings=warnings)


async def build_collection_views(
    *,
    source: CatalogSource,
    sample_size: int = DEFAULT_SAMPLE_SIZE,
    hooks: PipelineHooks | None = None,
) -> list[CollectionView]:
    """Same as `aggregate`, without the warnings."""

    result = await aggregate(source=source, sample_size=sample_size, hooks=hooks)
    return result.collections


async def load_collections_page(
    *,
    source: CatalogSource,
    sample_size: int = DEFAULT_SAMPLE_SIZE,
    hooks: PipelineHooks | None = None,
) -> CollectionsPage:
    """Top-level render boundary: map a run to READY, EMPTY or FAILED."""

    try:
        result = await aggregate(source=source, sample_size=sample_size, hooks=hooks)
    except DataSourceError as exc:
        return CollectionsPage(status=PageStatus.FAILED, error=str(exc))

    if not result.collections:
        return CollectionsPage(status=PageStatus.EMPTY, warnings=result.warnings)
    return CollectionsPage(
        status=PageStatus.READY,
        collections=result.collections,
        warnings=result.warnings,
    )
