"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import and_, case, func, or_, select
from sqlalchemy.dialects.sqlite import insert as sqlite_insert

from brickledger.adapters.sqlalchemy.mappings import (
    color_crossref_table,
    color_source_id_table,
    color_table,
    inventory_lot_table,
    part_crossref_table,
    part_source_id_table,
    part_table,
)
from brickledger.domain.model import (
    CanonicalColor,
    CanonicalPart,
    ColorCrossReference,
    ImportBatch,
    InventoryLot,
    PartCrossReference,
    VENDOR_ID_PADDING,
    utcnow,
    vendor_key,
)

if TYPE_CHECKING:
    from sqlalchemy import ColumnElement
    from sqlalchemy.orm import Session

    from brickledger.domain.model import CatalogSource, LotKey


class SqlAlchemyPartRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: CanonicalPart) -> None:
        # callers need the generated id straight away
        self.session.add(entity)
        self.session.flush([entity])

    def get_by_shape_key(self, shape_key: str) -> CanonicalPart | None:
        stmt = select(CanonicalPart).where(part_table.c.shape_key == shape_key)
        return self.session.execute(stmt).scalar_one_or_none()

    def upsert_source_id(self, part: CanonicalPart, source: CatalogSource, source_id: str) -> None:
        if part.id is None:
            self.session.flush([part])
        stmt = sqlite_insert(part_source_id_table).values(
            part_id=part.id,
            source=source,
            source_id=source_id,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[part_source_id_table.c.source, part_source_id_table.c.source_id],
            set_={"part_id": stmt.excluded.part_id},
        )
        self.session.execute(stmt)

    def search(
        self,
        query: str,
        *,
        id_like: bool,
        preferred_source: CatalogSource,
        limit: int,
    ) -> list[tuple[CanonicalPart, str | None]]:
        source_ids = part_source_id_table.alias("preferred")
        stmt = select(CanonicalPart, source_ids.c.source_id).outerjoin(
            source_ids,
            and_(
                source_ids.c.part_id == part_table.c.id,
                source_ids.c.source == preferred_source,
            ),
        )
        if id_like:
            stmt = stmt.where(part_table.c.shape_key.startswith(query, autoescape=True))
            stmt = stmt.order_by(part_table.c.shape_key)
        else:
            stmt = stmt.where(
                or_(
                    part_table.c.name_generic.contains(query, autoescape=True),
                    part_table.c.shape_key.contains(query, autoescape=True),
                )
            )
            stmt = stmt.order_by(part_table.c.name_generic)
        stmt = stmt.limit(limit)

        hits: list[tuple[CanonicalPart, str | None]] = []
        seen: set[int] = set()
        for part, source_id in self.session.execute(stmt).tuples():
            # several mapping rows of the preferred source would repeat the part
            if part.id in seen:
                continue
            if part.id is not None:
                seen.add(part.id)
            hits.append((part, source_id))
        return hits


class SqlAlchemyColorRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: CanonicalColor) -> None:
        self.session.add(entity)
        self.session.flush([entity])

    def get_by_source_id(self, source: CatalogSource, source_id: str) -> CanonicalColor | None:
        stmt = (
            select(CanonicalColor)
            .join(color_source_id_table, color_source_id_table.c.color_id == color_table.c.id)
            .where(color_source_id_table.c.source == source)
            .where(color_source_id_table.c.source_id == source_id)
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def get_by_name(self, generic_name: str) -> CanonicalColor | None:
        stmt = select(CanonicalColor).where(color_table.c.generic_name == generic_name)
        return self.session.execute(stmt).scalar_one_or_none()

    def upsert_source_id(
        self,
        color: CanonicalColor,
        source: CatalogSource,
        source_id: str,
        name: str | None,
    ) -> None:
        if color.id is None:
            self.session.flush([color])
        stmt = sqlite_insert(color_source_id_table).values(
            color_id=color.id,
            source=source,
            source_id=source_id,
            name=name,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[color_source_id_table.c.source, color_source_id_table.c.source_id],
            set_={"color_id": stmt.excluded.color_id, "name": stmt.excluded.name},
        )
        self.session.execute(stmt)


def _trimmed(column: ColumnElement[str]) -> ColumnElement[str]:
    # same characters as vendor_key strips
    return func.trim(column, VENDOR_ID_PADDING)


class SqlAlchemyCrossReferenceRepository:
    """Lookups keyed by the trimmed BrickLink columns of the cross-reference tables."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def find_part_mapping(self, vendor_part_id: str) -> str | None:
        key = vendor_key(vendor_part_id)
        stmt = (
            select(part_crossref_table.c.canonical_part_id)
            .where(_trimmed(part_crossref_table.c.bricklink_part_id) == key)
            .order_by(part_crossref_table.c.id)
            .limit(1)
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def find_color_mapping(self, vendor_color_id: str) -> int | None:
        key = vendor_key(vendor_color_id)
        stmt = (
            select(color_crossref_table.c.canonical_color_id)
            .where(_trimmed(color_crossref_table.c.bricklink_color_id) == key)
            .order_by(color_crossref_table.c.id)
            .limit(1)
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def part_map(self) -> dict[str, str]:
        stmt = (
            select(
                _trimmed(part_crossref_table.c.bricklink_part_id),
                part_crossref_table.c.canonical_part_id,
            )
            .where(part_crossref_table.c.bricklink_part_id.is_not(None))
            .order_by(part_crossref_table.c.id.desc())
        )
        # lowest id wins for duplicated vendor ids, as in find_part_mapping
        return {vendor_id: canonical_id for vendor_id, canonical_id in self.session.execute(stmt)}

    def color_map(self) -> dict[str, int]:
        stmt = (
            select(
                _trimmed(color_crossref_table.c.bricklink_color_id),
                color_crossref_table.c.canonical_color_id,
            )
            .where(color_crossref_table.c.bricklink_color_id.is_not(None))
            .order_by(color_crossref_table.c.id.desc())
        )
        return {vendor_id: canonical_id for vendor_id, canonical_id in self.session.execute(stmt)}

    def add_part(self, reference: PartCrossReference) -> None:
        self.session.add(reference)

    def add_color(self, reference: ColorCrossReference) -> None:
        self.session.add(reference)


class SqlAlchemyImportBatchRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: ImportBatch) -> None:
        self.session.add(entity)
        self.session.flush([entity])

    def get(self, batch_id: int) -> ImportBatch | None:
        return self.session.get(ImportBatch, batch_id)


def _merged_notes(existing: ColumnElement[str], incoming: ColumnElement[str]) -> ColumnElement[str]:
    return case(
        (or_(existing.is_(None), existing == ""), incoming),
        (or_(incoming.is_(None), incoming == ""), existing),
        else_=existing + "\n" + incoming,
    )


class SqlAlchemyInventoryLotRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def all(self) -> list[InventoryLot]:
        return list(self.session.execute(select(InventoryLot)).scalars())

    def get_by_key(self, key: LotKey) -> InventoryLot | None:
        stmt = (
            select(InventoryLot)
            .where(inventory_lot_table.c.canonical_part_id == key.part_id)
            .where(inventory_lot_table.c.canonical_color_id == key.color_id)
            .where(inventory_lot_table.c.condition == key.condition)
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def update(self, lot: InventoryLot) -> None:
        lot.updated_at = utcnow()
        self.session.add(lot)

    def accumulate(self, lot: InventoryLot) -> None:
        now = utcnow()
        stmt = sqlite_insert(inventory_lot_table).values(
            canonical_part_id=lot.canonical_part_id,
            canonical_color_id=lot.canonical_color_id,
            quantity=lot.quantity,
            condition=lot.condition,
            source=lot.source,
            import_batch_id=lot.import_batch_id,
            notes=lot.notes,
            created_at=now,
            updated_at=now,
        )
        excluded = stmt.excluded
        stmt = stmt.on_conflict_do_update(
            index_elements=[
                inventory_lot_table.c.canonical_part_id,
                inventory_lot_table.c.canonical_color_id,
                inventory_lot_table.c.condition,
            ],
            set_={
                "quantity": inventory_lot_table.c.quantity + excluded.quantity,
                "notes": _merged_notes(inventory_lot_table.c.notes, excluded.notes),
                "updated_at": excluded.updated_at,
                "import_batch_id": excluded.import_batch_id,
            },
        )
        self.session.execute(stmt)
