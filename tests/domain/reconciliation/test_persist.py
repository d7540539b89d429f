from __future__ import annotations

from brickledger.domain.model import Condition, ImportMode, InventoryLot, LotKey
from brickledger.domain.reconciliation import AggregatedLot, commit_import
from tests.helpers.fakes import FakeImportUnitOfWork, FakeLots

KEY = LotKey("42", 7, Condition.USED)


def _uow_with_existing_lot() -> tuple[FakeImportUnitOfWork, FakeLots]:
    uow = FakeImportUnitOfWork()
    lots = uow.repositories.lots
    assert isinstance(lots, FakeLots)
    lots.add(
        InventoryLot(canonical_part_id="42", canonical_color_id=7, quantity=8, notes="box 4")
    )
    return uow, lots


def test_merge_mode_updates_existing_lots_in_place() -> None:
    uow, lots = _uow_with_existing_lot()

    result = commit_import(
        uow,
        batch_source="brickstore",
        file_name="bricks.bsx",
        lots=[
            AggregatedLot(key=KEY, quantity=8, notes="box 5"),
            AggregatedLot(key=LotKey("43", 7, Condition.NEW), quantity=1),
        ],
        mode=ImportMode.MERGE,
    )

    assert lots.updated == 1
    assert lots.accumulated == 1
    stored = lots.get_by_key(KEY)
    assert stored is not None
    assert stored.quantity == 16
    assert stored.notes == "box 4\nbox 5"
    assert (result.lot_count, result.piece_count) == (2, 9)
    assert uow.commits == 1


def test_add_mode_accumulates_through_the_store() -> None:
    uow, lots = _uow_with_existing_lot()

    result = commit_import(
        uow,
        batch_source="brickstore",
        file_name=None,
        lots=[AggregatedLot(key=KEY, quantity=8)],
        mode=ImportMode.ADD,
    )

    assert lots.updated == 0
    assert lots.accumulated == 1
    stored = lots.get_by_key(KEY)
    assert stored is not None
    assert stored.quantity == 16
    assert stored.import_batch_id == result.batch_id


def test_commit_records_batch_totals() -> None:
    uow = FakeImportUnitOfWork()

    result = commit_import(
        uow,
        batch_source="brickstore",
        file_name="bricks.bsx",
        lots=[
            AggregatedLot(key=KEY, quantity=3),
            AggregatedLot(key=LotKey("1", 1, Condition.NEW), quantity=4),
        ],
        mode=ImportMode.ADD,
    )

    batch = uow.repositories.batches.get(result.batch_id)
    assert batch is not None
    assert batch.source == "brickstore"
    assert batch.file_name == "bricks.bsx"
    assert (batch.lot_count, batch.piece_count) == (2, 7)
