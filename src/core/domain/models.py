"""Domain models (Pydantic v2).

Why Pydantic in the domain:
- Strict validation and self-documenting fields (Field) without coupling the
  core to any I/O library.
- Snapshots from SQL rows, JSON payloads and snapshot files all normalize
  into the same shapes.

Note:
- These models describe *what* the catalog is, not *how* it is fetched.
- Every model is frozen: one aggregation run reads snapshots, never mutates them.
"""

from __future__ import annotations

from enum import Enum
from typing import Literal

from pydantic import BaseModel, Field, computed_field
from pydantic.config import ConfigDict


class _Snapshot(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")


class Collection(_Snapshot):
    """A named grouping of products (seasonal or thematic set)."""

    id: int = Field(..., description="Unique collection identifier.")
    name: str = Field(..., min_length=1, max_length=255, description="Display name.")
    slug: str = Field(..., min_length=1, max_length=255, description="URL-safe slug.")


class Product(_Snapshot):
    """A product as seen through the collection-to-product association."""

    id: int = Field(..., description="Unique product identifier.")
    name: str = Field(..., min_length=1, max_length=255, description="Display name.")


class ProductImage(_Snapshot):
    """An image owned by exactly one product."""

    id: int = Field(..., description="Unique image identifier (tie-break key).")
    product_id: int = Field(..., description="Owning product.")
    url: str = Field(..., min_length=1, description="Public image URL.")
    is_primary: bool = Field(default=False, description="Representative image flag.")


class ImageLookup(_Snapshot):
    """Outcome of a primary-image lookup.

    Why not a bare ``None``:
    - "no primary image" and "lookup failed" must stay distinguishable inside
      the pipeline even though both render as a missing image.
    """

    status: Literal["found", "missing", "failed"]
    url: str | None = None
    error: str | None = None

    @classmethod
    def found(cls, url: str) -> "ImageLookup":
        return cls(status="found", url=url)

    @classmethod
    def missing(cls) -> "ImageLookup":
        return cls(status="missing")

    @classmethod
    def failed(cls, error: str) -> "ImageLookup":
        return cls(status="failed", error=error)

    @property
    def image_url(self) -> str | None:
        return self.url if self.status == "found" else None


class ProductView(_Snapshot):
    """Product card: product fields plus its primary image, if any."""

    id: int
    name: str
    image_url: str | None = Field(
        default=None,
        description="Primary image URL; None when missing or when the lookup failed.",
    )


class CollectionView(_Snapshot):
    """Collection card with its ordered product sample."""

    id: int
    name: str
    slug: str
    products: list[ProductView] = Field(default_factory=list)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def link(self) -> str:
        """Storefront listing for the whole collection."""

        return f"/products?collection={self.slug}"

    @computed_field  # type: ignore[prop-decorator]
    @property
    def blurb(self) -> str:
        return f"Explore our {self.name.lower()} collection"


class PageStatus(str, Enum):
    """Caller-visible outcome of a collections render."""

    READY = "ready"
    EMPTY = "empty"
    FAILED = "failed"


class CollectionsPage(BaseModel):
    """What the presentation layer receives.

    `EMPTY` and `FAILED` are two distinct signals: an empty catalog is not an
    error, and a failed listing never carries partial collections.
    """

    status: PageStatus
    collections: list[CollectionView] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    error: str | None = None
