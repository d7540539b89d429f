"""Public domain model surface."""

from __future__ import annotations

from brickledger.domain.model.catalog import (
    CanonicalColor,
    CanonicalPart,
    ColorCrossReference,
    ColorSourceId,
    PartCrossReference,
    PartSourceId,
    utcnow,
)
from brickledger.domain.model.enums import CatalogSource, ComponentKind, Condition, ImportMode
from brickledger.domain.model.inventory import (
    ImportBatch,
    InventoryLot,
    LotKey,
    VENDOR_ID_PADDING,
    VendorLineItem,
    vendor_key,
)
from brickledger.domain.model.remote import (
    RemoteMinifig,
    RemotePart,
    RemotePartSearchHit,
    RemoteSetMetadata,
)

__all__ = [  # noqa: RUF022
    # enums
    "CatalogSource",
    "ComponentKind",
    "Condition",
    "ImportMode",
    # catalog
    "CanonicalPart",
    "CanonicalColor",
    "PartSourceId",
    "ColorSourceId",
    "PartCrossReference",
    "ColorCrossReference",
    "utcnow",
    # inventory
    "ImportBatch",
    "InventoryLot",
    "LotKey",
    "VendorLineItem",
    "VENDOR_ID_PADDING",
    "vendor_key",
    # remote catalog
    "RemotePart",
    "RemoteMinifig",
    "RemoteSetMetadata",
    "RemotePartSearchHit",
]
