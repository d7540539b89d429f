"""Ports for persisting catalog and inventory state."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from brickledger.domain.model import (
    CanonicalColor,
    CanonicalPart,
    ImportBatch,
    InventoryLot,
)

if TYPE_CHECKING:
    from collections.abc import Mapping

    from brickledger.domain.model import (
        CatalogSource,
        ColorCrossReference,
        LotKey,
        PartCrossReference,
    )


@runtime_checkable
class Repository[TEntity](Protocol):
    """Minimal repository contract for a persistent aggregate store."""

    def add(self, entity: TEntity) -> None: ...


@runtime_checkable
class PartRepository(Repository[CanonicalPart], Protocol):
    """Canonical parts plus their per-source identifier rows."""

    def get_by_shape_key(self, shape_key: str) -> CanonicalPart | None: ...

    def upsert_source_id(self, part: CanonicalPart, source: CatalogSource, source_id: str) -> None:
        ...

    def search(
        self,
        query: str,
        *,
        id_like: bool,
        preferred_source: CatalogSource,
        limit: int,
    ) -> list[tuple[CanonicalPart, str | None]]: ...


@runtime_checkable
class ColorRepository(Repository[CanonicalColor], Protocol):
    """Canonical colors plus their per-source identifier rows."""

    def get_by_source_id(self, source: CatalogSource, source_id: str) -> CanonicalColor | None:
        ...

    def get_by_name(self, generic_name: str) -> CanonicalColor | None: ...

    def upsert_source_id(
        self,
        color: CanonicalColor,
        source: CatalogSource,
        source_id: str,
        name: str | None,
    ) -> None: ...


@runtime_checkable
class CrossReferenceRepository(Protocol):
    """Vendor-to-canonical id mappings; read-only for the import pipeline."""

    def find_part_mapping(self, vendor_part_id: str) -> str | None: ...

    def find_color_mapping(self, vendor_color_id: str) -> int | None: ...

    def part_map(self) -> Mapping[str, str]: ...

    def color_map(self) -> Mapping[str, int]: ...

    def add_part(self, reference: PartCrossReference) -> None: ...

    def add_color(self, reference: ColorCrossReference) -> None: ...


@runtime_checkable
class ImportBatchRepository(Repository[ImportBatch], Protocol):
    def get(self, batch_id: int) -> ImportBatch | None: ...


@runtime_checkable
class InventoryLotRepository(Protocol):
    """Lots keyed by (part, color, condition); the key is unique in storage."""

    def all(self) -> list[InventoryLot]: ...

    def get_by_key(self, key: LotKey) -> InventoryLot | None: ...

    def update(self, lot: InventoryLot) -> None: ...

    def accumulate(self, lot: InventoryLot) -> None:
        """Insert the lot, or add its quantity and notes onto an existing row."""
        ...
