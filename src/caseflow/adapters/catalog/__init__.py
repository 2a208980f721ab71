"""Catalog source adapter: JSON files validated with pydantic."""

from __future__ import annotations

from .loader import DEFAULT_CATALOG_PATH, CatalogLoadError, load_catalog, load_configured_catalog

__all__ = ["DEFAULT_CATALOG_PATH", "CatalogLoadError", "load_catalog", "load_configured_catalog"]
