"""Inventory lots, import batches and vendor line items."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime  # noqa: TC003
from typing import NamedTuple

from brickledger.domain.model.catalog import utcnow
from brickledger.domain.model.enums import Condition


class LotKey(NamedTuple):
    """Business key of an inventory lot."""

    part_id: str
    color_id: int
    condition: Condition


@dataclass(eq=False, kw_only=True)
class ImportBatch:
    source: str
    file_name: str | None = None
    created_at: datetime = field(default_factory=utcnow)
    lot_count: int = 0
    piece_count: int = 0
    id: int | None = None

    def record_totals(self, *, lots: int, pieces: int) -> None:
        self.lot_count = lots
        self.piece_count = pieces


@dataclass(eq=False, kw_only=True)
class InventoryLot:
    canonical_part_id: str
    canonical_color_id: int
    quantity: int
    condition: Condition = Condition.USED
    source: str | None = None
    import_batch_id: int | None = None
    notes: str | None = None
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)
    id: int | None = None

    @property
    def key(self) -> LotKey:
        return LotKey(self.canonical_part_id, self.canonical_color_id, self.condition)


@dataclass(frozen=True, slots=True, kw_only=True)
class VendorLineItem:
    """One normalized row of a vendor inventory export."""

    item_type: str | None
    vendor_part_id: str
    vendor_color_id: str
    quantity: int
    condition: Condition | None = None
    comments: str | None = None
    remarks: str | None = None


VENDOR_ID_PADDING = " \t\r\n"


def vendor_key(vendor_id: str) -> str:
    """Form of a vendor part/color id used as a cross-reference lookup key."""

    return vendor_id.strip(VENDOR_ID_PADDING)
