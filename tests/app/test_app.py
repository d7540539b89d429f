from __future__ import annotations

from collections.abc import Callable  # noqa: TC003
from pathlib import Path  # noqa: TC003

import pytest

from brickledger import app
from brickledger.adapters.sqlalchemy.unit_of_work import (  # noqa: TC001
    SqlAlchemyCatalogUnitOfWork,
    SqlAlchemyImportUnitOfWork,
)
from brickledger.app import import_vendor_export, search_catalog, sync_set_catalog
from brickledger.domain.errors import EmptyImportError, VendorExportError
from brickledger.domain.model import (
    CatalogSource,
    ImportMode,
    RemoteMinifig,
    RemotePart,
    RemotePartSearchHit,
)
from brickledger.domain.reconciliation import no_color_fallback
from tests.helpers.fakes import FakeCatalogUnitOfWork, FakeImportUnitOfWork
from tests.helpers.vendor_exports import (
    SCENARIO_EXPORT,
    Row,
    bsx,
    seed_cross_references,
    stored_lots,
)


class FakeSetFetcher:
    def __init__(self, parts: list[RemotePart]) -> None:
        self.parts = parts
        self.calls: list[tuple[str, bool]] = []

    def fetch_set_inventory(
        self, set_id: str, *, include_minifigs: bool = True
    ) -> list[RemotePart]:
        self.calls.append((set_id, include_minifigs))
        return self.parts

    def fetch_set_minifigs(self, set_id: str) -> list[RemoteMinifig]:  # noqa: ARG002
        return []


class FakePartSearch:
    def __init__(self, hits: list[RemotePartSearchHit]) -> None:
        self.hits = hits
        self.queries: list[str] = []

    def search_parts(self, query: str) -> list[RemotePartSearchHit]:
        self.queries.append(query)
        return self.hits


def _write(tmp_path: Path, xml: str, name: str = "bricks.bsx") -> Path:
    path = tmp_path / name
    path.write_text(xml, encoding="utf-8")
    return path


def test_import_vendor_export_from_file(
    tmp_path: Path, import_unit_of_work: Callable[[], SqlAlchemyImportUnitOfWork]
) -> None:
    seed_cross_references(import_unit_of_work, parts={"3001": "42"}, colors={"11": 7})
    path = _write(tmp_path, SCENARIO_EXPORT)

    first = import_vendor_export(path, unit_of_work_factory=import_unit_of_work)
    second = import_vendor_export(str(path), "merge", unit_of_work_factory=import_unit_of_work)

    assert first.file_name == "bricks.bsx"
    assert second.mapped_pieces == 8
    (lot,) = stored_lots(import_unit_of_work)
    assert lot.quantity == 16


def test_import_vendor_export_with_strict_colors(
    tmp_path: Path, import_unit_of_work: Callable[[], SqlAlchemyImportUnitOfWork]
) -> None:
    path = _write(tmp_path, bsx(Row("3001", "11", "2")))

    summary = import_vendor_export(
        path,
        ImportMode.ADD,
        unit_of_work_factory=import_unit_of_work,
        color_fallback=no_color_fallback,
    )

    assert summary.unmapped_lots == 1
    assert stored_lots(import_unit_of_work) == []


def test_import_vendor_export_rejects_bad_input(
    tmp_path: Path, import_unit_of_work: Callable[[], SqlAlchemyImportUnitOfWork]
) -> None:
    with pytest.raises(VendorExportError):
        import_vendor_export(
            _write(tmp_path, "<Inventory><Item>"), unit_of_work_factory=import_unit_of_work
        )
    with pytest.raises(EmptyImportError):
        import_vendor_export(
            _write(tmp_path, "<Inventory/>", "empty.xml"), unit_of_work_factory=import_unit_of_work
        )
    with pytest.raises(ValueError, match="replace"):
        import_vendor_export(
            _write(tmp_path, SCENARIO_EXPORT), "replace", unit_of_work_factory=import_unit_of_work
        )


def test_sync_set_catalog(
    catalog_unit_of_work: Callable[[], SqlAlchemyCatalogUnitOfWork],
) -> None:
    fetcher = FakeSetFetcher(
        [
            RemotePart(
                design_id="3001",
                display_name="Brick 2 x 4",
                quantity=2,
                color_external_id="4",
                color_name="Red",
                color_rgb="C91A09",
            )
        ]
    )

    result = sync_set_catalog(
        "6000", client=fetcher, unit_of_work_factory=catalog_unit_of_work, include_minifigs=False
    )

    assert fetcher.calls == [("6000", False)]
    assert (result.parts, result.colors) == (1, 1)


def test_search_catalog_falls_back_to_remote_search(
    catalog_unit_of_work: Callable[[], SqlAlchemyCatalogUnitOfWork],
) -> None:
    client = FakePartSearch(
        [
            RemotePartSearchHit(
                design_id="3001", display_name="Brick 2 x 4", external_ids={"BrickLink": ("3001",)}
            )
        ]
    )

    hits = search_catalog(
        "3001", "bricklink", client=client, unit_of_work_factory=catalog_unit_of_work
    )
    local = search_catalog(
        "brick", CatalogSource.REBRICKABLE, client=client, unit_of_work_factory=catalog_unit_of_work
    )

    assert [(hit.shape_key, hit.source_id) for hit in hits] == [("3001", "3001")]
    assert [hit.shape_key for hit in local] == ["3001"]
    assert client.queries == ["3001"]


def test_injected_unit_of_work_does_not_touch_default_storage(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    started: list[bool] = []
    monkeypatch.setattr(app, "is_started", lambda: False)
    monkeypatch.setattr(app, "startup", lambda: started.append(True))
    import_uow = FakeImportUnitOfWork()
    catalog_uow = FakeCatalogUnitOfWork()
    fetcher = FakeSetFetcher([RemotePart(design_id="3001", display_name="Brick 2 x 4", quantity=1)])

    summary = import_vendor_export(
        _write(tmp_path, bsx(Row("3001", "11", "2"))), unit_of_work_factory=lambda: import_uow
    )
    sync_set_catalog("6000", client=fetcher, unit_of_work_factory=lambda: catalog_uow)
    hits = search_catalog(
        "3001", client=FakePartSearch([]), unit_of_work_factory=lambda: catalog_uow
    )

    assert started == []
    assert summary.mapped_pieces == 2
    assert import_uow.commits == 1
    assert [hit.shape_key for hit in hits] == ["3001"]


def test_default_unit_of_work_starts_storage_once(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    started: list[bool] = []
    import_uow = FakeImportUnitOfWork()
    monkeypatch.setattr(app, "is_started", lambda: bool(started))
    monkeypatch.setattr(app, "startup", lambda: started.append(True))
    monkeypatch.setattr(app, "SqlAlchemyImportUnitOfWork", lambda: import_uow)
    path = _write(tmp_path, bsx(Row("3001", "11", "2")))

    import_vendor_export(path)
    import_vendor_export(path)

    assert started == [True]
    assert import_uow.commits == 2
