"""Orchestrator for vendor inventory imports.

Stages run strictly in order: resolve, aggregate, commit. Resolve and
aggregate are pure and work on an in-memory snapshot of the cross-reference
tables; the commit runs in the same unit of work, so a failure anywhere
rolls the whole batch back.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from brickledger.domain.errors import EmptyImportError
from brickledger.domain.model import ImportMode

from .aggregate import AggregateLineItems, aggregate_line_items
from .contracts import ImportSummary
from .persist import CommitImport, commit_import
from .resolve import CrossReferenceIndex, CrossReferenceResolver, ResolveLineItems

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from brickledger.domain.model import VendorLineItem
    from brickledger.domain.ports.unit_of_work import ImportUnitOfWork

log = logging.getLogger(__name__)


@dataclass(slots=True)
class ReconciliationEngine:
    """Resolve, aggregate and commit vendor line items."""

    unit_of_work_factory: Callable[[], ImportUnitOfWork]
    resolve: ResolveLineItems = field(default_factory=CrossReferenceResolver)
    aggregate: AggregateLineItems = aggregate_line_items
    persist: CommitImport = commit_import

    def reconcile_and_import(
        self,
        batch_source: str,
        file_name: str | None,
        items: Iterable[VendorLineItem],
        mode: ImportMode = ImportMode.ADD,
    ) -> ImportSummary:
        line_items = list(items)
        if not line_items:
            raise EmptyImportError("No items found in the vendor export")

        total_pieces = sum(item.quantity for item in line_items)
        log.info(
            f"Importing {len(line_items)} vendor rows ({total_pieces} pieces) "
            f"from {file_name or batch_source} in {mode.value} mode"
        )

        with self.unit_of_work_factory() as uow:
            index = CrossReferenceIndex.from_repository(uow.repositories.cross_references)
            resolution = self.resolve(line_items, lookup=index)
            lots = self.aggregate(resolution.mapped)
            result = self.persist(
                uow,
                batch_source=batch_source,
                file_name=file_name,
                lots=lots,
                mode=mode,
            )

        summary = ImportSummary(
            batch_id=result.batch_id,
            file_name=file_name,
            total_lots=len(line_items),
            total_pieces=total_pieces,
            mapped_lots=result.lot_count,
            mapped_pieces=result.piece_count,
            unmapped_lots=len(resolution.unmapped),
            unmapped_items=tuple(resolution.unmapped),
        )
        log.info(
            f"Import batch {summary.batch_id} done: {summary.mapped_lots} lots "
            f"({summary.mapped_pieces} pieces) written, {summary.unmapped_lots} unmapped"
        )
        return summary
