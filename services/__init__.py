"""
Songline Services

Application services for event handling, song catalogs and catalog tooling.
"""

from services.event_bus import EventBus
from services.catalog import (
    HttpCatalogProvider,
    JsonCatalogProvider,
    StaticCatalogProvider,
    parse_catalog,
)

__all__ = [
    "EventBus",
    "HttpCatalogProvider",
    "JsonCatalogProvider",
    "StaticCatalogProvider",
    "parse_catalog",
]
