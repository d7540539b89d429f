"""Rebrickable catalog adapter."""

from __future__ import annotations

from .client import CatalogClientState, RebrickableAPIError, RebrickableClient
from .translator import dedupe_remote_parts, normalize_set_number

__all__ = [
    "CatalogClientState",
    "RebrickableAPIError",
    "RebrickableClient",
    "dedupe_remote_parts",
    "normalize_set_number",
]
