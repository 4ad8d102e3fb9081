"""Catalog sources (concrete query-service adapters).

Why a package:
- Groups one module per backend (SQL, REST, snapshot file).
- Each module implements `core.interfaces.catalog_source.CatalogSource`.
"""

from __future__ import annotations

from adapters.catalog_sources.http import HttpCatalogSource
from adapters.catalog_sources.snapshot import (
    CatalogSnapshot,
    SnapshotCatalogSource,
    load_snapshot,
)
from adapters.catalog_sources.sql import SqlCatalogSource
from core.config import AppSettings, SourceKind
from core.domain.errors import DataSourceError

CatalogSourceAdapter = SqlCatalogSource | HttpCatalogSource | SnapshotCatalogSource


def build_catalog_source(settings: AppSettings) -> CatalogSourceAdapter:
    """Instantiate the adapter selected by `settings.source`.

    The caller owns the returned adapter and must `aclose()` it
    (or use it as an async context manager).
    """

    if settings.source is SourceKind.SQL:
        return SqlCatalogSource.from_settings(settings)
    if settings.source is SourceKind.HTTP:
        return HttpCatalogSource.from_settings(settings)
    if settings.snapshot_path is None:
        raise DataSourceError("source=snapshot requires a snapshot path")
    return SnapshotCatalogSource.from_path(settings.snapshot_path)


__all__ = [
    "CatalogSnapshot",
    "CatalogSourceAdapter",
    "HttpCatalogSource",
    "SnapshotCatalogSource",
    "SqlCatalogSource",
    "build_catalog_source",
    "load_snapshot",
]
