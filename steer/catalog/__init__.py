"""Catalog index parsing and validation."""

from .loader import load_catalog
from .parser import extract_section, parse_index

__all__ = ["load_catalog", "extract_section", "parse_index"]
