"""Collapse resolved items sharing a business key within one batch."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

from .contracts import AggregatedLot
from .notes import combine_notes, merge_notes

if TYPE_CHECKING:
    from collections.abc import Iterable

    from brickledger.domain.model import LotKey

    from .contracts import ResolvedLineItem


class AggregateLineItems(Protocol):
    def __call__(self, resolved: Iterable[ResolvedLineItem]) -> list[AggregatedLot]: ...


def aggregate_line_items(resolved: Iterable[ResolvedLineItem]) -> list[AggregatedLot]:
    """Sum quantities and join notes per (part, color, condition), in encounter order."""

    lots: dict[LotKey, AggregatedLot] = {}
    for entry in resolved:
        notes = combine_notes(entry.item.comments, entry.item.remarks)
        lot = lots.get(entry.key)
        if lot is None:
            lots[entry.key] = AggregatedLot(
                key=entry.key, quantity=entry.item.quantity, notes=notes
            )
            continue
        lot.quantity += entry.item.quantity
        lot.notes = merge_notes(lot.notes, notes)
    return list(lots.values())
