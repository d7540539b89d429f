"""Records passed between the reconciliation stages."""

from __future__ import annotations

from dataclasses import dataclass, field

from brickledger.domain.model import Condition, LotKey, VendorLineItem


@dataclass(frozen=True, slots=True, kw_only=True)
class ResolvedLineItem:
    """A vendor line item with both canonical ids resolved."""

    item: VendorLineItem
    part_id: str
    color_id: int

    @property
    def key(self) -> LotKey:
        return LotKey(self.part_id, self.color_id, self.item.condition or Condition.USED)


@dataclass(slots=True)
class ResolutionResult:
    mapped: list[ResolvedLineItem] = field(default_factory=list)
    unmapped: list[VendorLineItem] = field(default_factory=list)


@dataclass(slots=True, kw_only=True)
class AggregatedLot:
    """One business key's summed quantity and joined notes within a batch."""

    key: LotKey
    quantity: int
    notes: str | None = None


@dataclass(frozen=True, slots=True)
class CommitResult:
    batch_id: int
    lot_count: int
    piece_count: int


@dataclass(frozen=True, slots=True, kw_only=True)
class ImportSummary:
    """Outcome of one import.

    ``total_*`` count the raw parsed rows; ``mapped_*`` count the aggregated
    lots that were written, so they differ when duplicate rows collapse.
    """

    batch_id: int
    file_name: str | None
    total_lots: int
    total_pieces: int
    mapped_lots: int
    mapped_pieces: int
    unmapped_lots: int
    unmapped_items: tuple[VendorLineItem, ...] = ()
