"""Utility helpers for guitarsleuth: configuration, logging and catalog files."""

from guitarsleuth.utils.catalog_store import (
    CatalogError,
    load_catalog,
    load_quiz_categories,
)
from guitarsleuth.utils.config import resolve_setting

__all__ = ["CatalogError", "load_catalog", "load_quiz_categories", "resolve_setting"]
