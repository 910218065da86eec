"""App Store Connect catalog: API client, detail loading, aggregation."""

from release_desk.core.catalog.aggregator import (
    CatalogAggregator,
    CatalogSnapshot,
)
from release_desk.core.catalog.client import RemoteCatalogClient
from release_desk.core.catalog.detail import AppDetailLoader, DetailLoadResult

__all__ = [
    "AppDetailLoader",
    "CatalogAggregator",
    "CatalogSnapshot",
    "DetailLoadResult",
    "RemoteCatalogClient",
]
