"""Catalog data - packaged CSV price tables and their loader."""
from .catalog import Catalog, CatalogStore, build_catalog, load_catalog

__all__ = ['Catalog', 'CatalogStore', 'build_catalog', 'load_catalog']
