from __future__ import annotations

import pytest

from brickledger.domain.catalog import CanonicalCatalog
from brickledger.domain.model import (
    CatalogSource,
    ComponentKind,
    RemotePart,
    RemotePartSearchHit,
)
from tests.helpers.fakes import FakeCatalogUnitOfWork, FakeColors, FakeParts


class StubSearchClient:
    def __init__(self, hits: list[RemotePartSearchHit] | None = None) -> None:
        self.hits = hits or []
        self.queries: list[str] = []

    def search_parts(self, query: str) -> list[RemotePartSearchHit]:
        self.queries.append(query)
        return self.hits


class FailingSearchClient:
    def search_parts(self, query: str) -> list[RemotePartSearchHit]:
        raise RuntimeError(f"remote search failed for {query}")


@pytest.fixture
def uow() -> FakeCatalogUnitOfWork:
    return FakeCatalogUnitOfWork()


@pytest.fixture
def catalog(uow: FakeCatalogUnitOfWork) -> CanonicalCatalog:
    return CanonicalCatalog(lambda: uow)


def _parts(uow: FakeCatalogUnitOfWork) -> FakeParts:
    parts = uow.repositories.parts
    assert isinstance(parts, FakeParts)
    return parts


def _colors(uow: FakeCatalogUnitOfWork) -> FakeColors:
    colors = uow.repositories.colors
    assert isinstance(colors, FakeColors)
    return colors


def test_upsert_part_is_idempotent(catalog: CanonicalCatalog, uow: FakeCatalogUnitOfWork) -> None:
    first = catalog.upsert_part("3001", "Brick 2 x 4")
    second = catalog.upsert_part(" 3001 ", "Brick 2 x 4")

    assert first == second
    assert len(_parts(uow).items) == 1
    assert list(_parts(uow).source_ids) == [(CatalogSource.REBRICKABLE, "3001")]
    assert uow.commits == 2


def test_upsert_part_renames_with_latest_display_name(
    catalog: CanonicalCatalog, uow: FakeCatalogUnitOfWork
) -> None:
    catalog.upsert_part("3001", "Brick 2 x 4")
    catalog.upsert_part("3001", "Brick 2 x 4 (new)")

    assert _parts(uow).items[0].name_generic == "Brick 2 x 4 (new)"


@pytest.mark.parametrize(("source_id", "name"), [("", "Brick"), ("3001", "  ")])
def test_upsert_part_requires_id_and_name(
    catalog: CanonicalCatalog, source_id: str, name: str
) -> None:
    with pytest.raises(ValueError, match="must not be empty"):
        catalog.upsert_part(source_id, name)


def test_upsert_color_matches_by_source_id_then_name(
    catalog: CanonicalCatalog, uow: FakeCatalogUnitOfWork
) -> None:
    red = catalog.upsert_color("4", "Red")
    same = catalog.upsert_color("4", "Red", "C91A09")
    by_name = catalog.upsert_color("5", "Red", source=CatalogSource.BRICKLINK)

    assert red == same == by_name
    colors = _colors(uow)
    assert len(colors.items) == 1
    assert colors.items[0].rgb_hex == "C91A09"
    assert set(colors.source_ids) == {
        (CatalogSource.REBRICKABLE, "4"),
        (CatalogSource.BRICKLINK, "5"),
    }


def test_upsert_color_never_overwrites_rgb(
    catalog: CanonicalCatalog, uow: FakeCatalogUnitOfWork
) -> None:
    catalog.upsert_color("4", "Red", "C91A09")
    catalog.upsert_color("4", "Red", "FF0000")

    assert _colors(uow).items[0].rgb_hex == "C91A09"


def test_hydrate_upserts_parts_and_colors_once(
    catalog: CanonicalCatalog, uow: FakeCatalogUnitOfWork
) -> None:
    remote = [
        RemotePart(
            design_id="3001",
            display_name="Brick 2 x 4",
            quantity=2,
            color_external_id="4",
            color_name="Red",
            color_rgb="C91A09",
        ),
        RemotePart(
            design_id="3001",
            display_name="Brick 2 x 4",
            quantity=1,
            is_spare=True,
            color_external_id="4",
            color_name="Red",
        ),
        RemotePart(
            design_id="fig-001", display_name="Luke", quantity=1, kind=ComponentKind.MINIFIG
        ),
        RemotePart(design_id=" ", display_name="Nothing", quantity=1),
    ]

    result = catalog.hydrate(remote)

    assert result.parts == 2
    assert result.colors == 1
    assert result.skipped == 1
    assert len(_parts(uow).items) == 2
    assert len(_colors(uow).items) == 1
    assert uow.commits == 1


def test_search_distinguishes_ids_from_names(catalog: CanonicalCatalog) -> None:
    catalog.upsert_part("3001", "Brick 2 x 4")
    catalog.upsert_part("3003", "Brick 2 x 2")
    catalog.upsert_part("98138", "Tile Round 1 x 1")

    assert [hit.shape_key for hit in catalog.search("300")] == ["3001", "3003"]
    assert [hit.shape_key for hit in catalog.search("brick 2")] == ["3001", "3003"]
    assert catalog.search("   ") == []


def test_search_reports_preferred_source_id(catalog: CanonicalCatalog) -> None:
    catalog.upsert_part("3001", "Brick 2 x 4")

    (hit,) = catalog.search("3001", CatalogSource.REBRICKABLE)
    (no_bricklink,) = catalog.search("3001", CatalogSource.BRICKLINK)

    assert hit.source_id == "3001"
    assert no_bricklink.source_id is None


def test_search_with_fallback_prefers_local_hits(catalog: CanonicalCatalog) -> None:
    catalog.upsert_part("3001", "Brick 2 x 4")
    client = StubSearchClient()

    hits = catalog.search_with_fallback("3001", CatalogSource.BRICKLINK, client)

    assert [hit.shape_key for hit in hits] == ["3001"]
    assert client.queries == []


def test_search_with_fallback_hydrates_remote_hits(
    catalog: CanonicalCatalog, uow: FakeCatalogUnitOfWork
) -> None:
    client = StubSearchClient(
        [
            RemotePartSearchHit(
                design_id="3001",
                display_name="Brick 2 x 4",
                external_ids={"BrickLink": ("3001",), "BrickOwl": ("771344",), "LDraw": ("3001",)},
            )
        ]
    )

    hits = catalog.search_with_fallback(" 3001 ", CatalogSource.BRICKOWL, client)

    assert client.queries == ["3001"]
    assert [(hit.shape_key, hit.source_id) for hit in hits] == [("3001", "771344")]
    assert set(_parts(uow).source_ids) == {
        (CatalogSource.REBRICKABLE, "3001"),
        (CatalogSource.BRICKLINK, "3001"),
        (CatalogSource.BRICKOWL, "771344"),
    }


def test_search_with_fallback_without_remote_hits(catalog: CanonicalCatalog) -> None:
    assert catalog.search_with_fallback("3001", CatalogSource.BRICKLINK, StubSearchClient()) == []


def test_search_with_fallback_propagates_remote_errors(catalog: CanonicalCatalog) -> None:
    with pytest.raises(RuntimeError, match="remote search failed"):
        catalog.search_with_fallback("3001", CatalogSource.BRICKLINK, FailingSearchClient())
