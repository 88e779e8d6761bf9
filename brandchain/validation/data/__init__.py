"""Bundled brand dictionary."""

from .brands import load_brands, get_brands

__all__ = ["load_brands", "get_brands"]
