"""Vendor inventory export adapter."""

from __future__ import annotations

from .decoder import decode_xml
from .parser import (
    ITEM_PATH_STRATEGIES,
    ItemPathStrategy,
    derive_file_name,
    find_items,
    parse_line_item,
    parse_vendor_export,
)

__all__ = [
    "ITEM_PATH_STRATEGIES",
    "ItemPathStrategy",
    "decode_xml",
    "derive_file_name",
    "find_items",
    "parse_line_item",
    "parse_vendor_export",
]
