"""Catalog API: taxonomy, products and variants admin plus the public storefront."""

__version__ = "0.1.0"
