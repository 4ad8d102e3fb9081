"""Error taxonomy of the catalog core.

Only `DataSourceError` raised by the top-level listing escapes the pipeline.
`SampleError` and `ImageResolutionError` are recovered at their own fan-out
boundary and reported as warnings.
"""

from __future__ import annotations


class CatalogError(Exception):
    """Base class for every catalog failure."""


class DataSourceError(CatalogError):
    """The backing query service is unreachable or answered with an error."""


class SampleError(CatalogError):
    """Product sampling failed for one collection."""

    def __init__(self, collection_id: int, message: str) -> None:
        super().__init__(f"collection {collection_id}: {message}")
        self.collection_id = collection_id


class ImageResolutionError(CatalogError):
    """Primary-image lookup failed for one product."""

    def __init__(self, product_id: int, message: str) -> None:
        super().__init__(f"product {product_id}: {message}")
        self.product_id = product_id
