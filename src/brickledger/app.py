"""Application orchestration entry points."""

from __future__ import annotations

from collections.abc import Callable
from functools import cache
from logging import getLogger
from pathlib import Path
from typing import TYPE_CHECKING

from brickledger.adapters.rebrickable import RebrickableClient
from brickledger.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyCatalogUnitOfWork,
    SqlAlchemyImportUnitOfWork,
    is_started,
    startup,
)
from brickledger.adapters.vendor_export import derive_file_name, parse_vendor_export
from brickledger.domain.catalog import CanonicalCatalog, CatalogHydrationResult, CatalogSearchHit
from brickledger.domain.model import CatalogSource, ImportMode
from brickledger.domain.ports.unit_of_work import CatalogUnitOfWork, ImportUnitOfWork
from brickledger.domain.reconciliation import (
    CrossReferenceResolver,
    ImportSummary,
    ReconciliationEngine,
)
from brickledger.domain.reconciliation.policy import integer_color_fallback

if TYPE_CHECKING:
    from brickledger.domain.model import RemotePartSearchHit
    from brickledger.domain.ports.fetching import PartSearchClient, SetInventoryFetcher
    from brickledger.domain.reconciliation.policy import ColorFallback

ImportUnitOfWorkFactory = Callable[[], ImportUnitOfWork]
CatalogUnitOfWorkFactory = Callable[[], CatalogUnitOfWork]

BRICKSTORE_BATCH_SOURCE = "brickstore"

log = getLogger(__name__)


def _ensure_started() -> None:
    if not is_started():
        startup()


def _import_uow_factory(factory: ImportUnitOfWorkFactory | None) -> ImportUnitOfWorkFactory:
    # injected factories bring their own database
    if factory is not None:
        return factory
    _ensure_started()
    return SqlAlchemyImportUnitOfWork


def _catalog_uow_factory(factory: CatalogUnitOfWorkFactory | None) -> CatalogUnitOfWorkFactory:
    if factory is not None:
        return factory
    _ensure_started()
    return SqlAlchemyCatalogUnitOfWork


@cache
def default_rebrickable_client() -> RebrickableClient:
    """Process-wide client, so the minifig detail cache and cooldown are shared."""

    return RebrickableClient()


class _DefaultPartSearch:
    """Defer building the Rebrickable client until a remote search is needed."""

    def search_parts(self, query: str) -> list[RemotePartSearchHit]:
        return default_rebrickable_client().search_parts(query)


def import_vendor_export(
    path: str | Path,
    mode: ImportMode | str = ImportMode.ADD,
    *,
    unit_of_work_factory: ImportUnitOfWorkFactory | None = None,
    color_fallback: ColorFallback = integer_color_fallback,
) -> ImportSummary:
    """Import a BrickStore/BrickLink XML export into the inventory."""

    import_mode = ImportMode(mode)
    file_path = Path(path)
    log.info(f"Reading vendor export {file_path}")
    items = parse_vendor_export(file_path.read_bytes())

    engine = ReconciliationEngine(
        unit_of_work_factory=_import_uow_factory(unit_of_work_factory),
        resolve=CrossReferenceResolver(color_fallback=color_fallback),
    )
    return engine.reconcile_and_import(
        BRICKSTORE_BATCH_SOURCE,
        derive_file_name(file_path.as_posix()),
        items,
        import_mode,
    )


def sync_set_catalog(
    set_id: str,
    *,
    client: SetInventoryFetcher | None = None,
    unit_of_work_factory: CatalogUnitOfWorkFactory | None = None,
    include_minifigs: bool = True,
) -> CatalogHydrationResult:
    """Fetch a set inventory from Rebrickable and hydrate the canonical catalog."""

    fetcher = client or default_rebrickable_client()
    log.info(f"Fetching inventory of set {set_id}")
    parts = fetcher.fetch_set_inventory(set_id, include_minifigs=include_minifigs)
    catalog = CanonicalCatalog(_catalog_uow_factory(unit_of_work_factory))
    return catalog.hydrate(parts)


def search_catalog(
    query: str,
    preferred_source: CatalogSource | str = CatalogSource.BRICKLINK,
    *,
    client: PartSearchClient | None = None,
    unit_of_work_factory: CatalogUnitOfWorkFactory | None = None,
) -> list[CatalogSearchHit]:
    """Search the local catalog, falling back to a Rebrickable part search."""

    catalog = CanonicalCatalog(_catalog_uow_factory(unit_of_work_factory))
    return catalog.search_with_fallback(
        query,
        CatalogSource(preferred_source),
        client or _DefaultPartSearch(),
    )
