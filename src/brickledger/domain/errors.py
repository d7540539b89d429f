"""Domain-level exceptions."""

from __future__ import annotations


class ImportInputError(ValueError):
    """The caller supplied nothing importable; raised before any transaction."""


class VendorExportError(ImportInputError):
    """The vendor export is empty or not parseable XML."""


class EmptyImportError(ImportInputError):
    """The export parsed but produced zero line items."""
