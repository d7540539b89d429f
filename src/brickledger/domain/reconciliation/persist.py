"""Commit aggregated lots inside the caller's unit of work.

Responsibilities of this stage:
- record the import batch
- merge into preloaded lots (``merge`` mode) or accumulate through the
  store's conflict upsert
- record the batch totals and commit
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol

from brickledger.domain.model import ImportBatch, ImportMode, InventoryLot

from .contracts import CommitResult
from .notes import merge_notes

if TYPE_CHECKING:
    from collections.abc import Sequence

    from brickledger.domain.model import LotKey
    from brickledger.domain.ports.unit_of_work import ImportUnitOfWork

    from .contracts import AggregatedLot

log = logging.getLogger(__name__)


class CommitImport(Protocol):
    def __call__(
        self,
        uow: ImportUnitOfWork,
        *,
        batch_source: str,
        file_name: str | None,
        lots: Sequence[AggregatedLot],
        mode: ImportMode,
    ) -> CommitResult: ...


def commit_import(
    uow: ImportUnitOfWork,
    *,
    batch_source: str,
    file_name: str | None,
    lots: Sequence[AggregatedLot],
    mode: ImportMode,
) -> CommitResult:
    repositories = uow.repositories
    batch = ImportBatch(source=batch_source, file_name=file_name)
    repositories.batches.add(batch)
    if batch.id is None:
        raise RuntimeError("Import batch was not assigned an id")

    existing: dict[LotKey, InventoryLot] = {}
    if mode is ImportMode.MERGE and lots:
        existing = {lot.key: lot for lot in repositories.lots.all()}

    merged = 0
    for entry in lots:
        current = existing.get(entry.key)
        if current is not None:
            current.quantity += entry.quantity
            current.notes = merge_notes(current.notes, entry.notes)
            repositories.lots.update(current)
            merged += 1
            continue
        repositories.lots.accumulate(
            InventoryLot(
                canonical_part_id=entry.key.part_id,
                canonical_color_id=entry.key.color_id,
                condition=entry.key.condition,
                quantity=entry.quantity,
                source=batch_source,
                import_batch_id=batch.id,
                notes=entry.notes,
            )
        )

    pieces = sum(entry.quantity for entry in lots)
    batch.record_totals(lots=len(lots), pieces=pieces)
    uow.commit()
    log.debug(f"Batch {batch.id}: merged {merged} lots in place, upserted {len(lots) - merged}")
    return CommitResult(batch_id=batch.id, lot_count=len(lots), piece_count=pieces)
