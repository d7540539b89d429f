"""SQLAlchemy mapping metadata for the brickledger domain model."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from enum import StrEnum
from functools import cache

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Dialect,
    Enum,
    ForeignKey,
    Integer,
    String,
    Table,
    TypeDecorator,
    UniqueConstraint,
    orm,
)

from brickledger.domain.model import (
    CanonicalColor,
    CanonicalPart,
    CatalogSource,
    ColorCrossReference,
    ColorSourceId,
    Condition,
    ImportBatch,
    InventoryLot,
    PartCrossReference,
    PartSourceId,
    utcnow,
)

log = logging.getLogger(__name__)


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


def _value_enum(enum_cls: type[StrEnum], length: int) -> Enum:
    # store member values ("N", "rebrickable"), not member names
    return Enum(
        enum_cls,
        native_enum=False,
        length=length,
        values_callable=lambda members: [member.value for member in members],
    )


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_N_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

# Canonical catalog -----------------------------------------------------------

part_table = Table(
    "catalog_part",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("shape_key", String, nullable=False, unique=True),
    Column("name_generic", String, nullable=False),
    Column("category_id", Integer, nullable=True),
    Column("is_printed", Boolean, nullable=False, default=False),
    Column("is_minifig_part", Boolean, nullable=False, default=False),
    Column("created_at", UTCDateTime(), nullable=False, default=utcnow),
    Column("updated_at", UTCDateTime(), nullable=False, default=utcnow),
)

part_source_id_table = Table(
    "catalog_part_source_id",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("part_id", Integer, ForeignKey("catalog_part.id"), nullable=False),
    Column("source", _value_enum(CatalogSource, 16), nullable=False),
    Column("source_id", String, nullable=False),
    UniqueConstraint("source", "source_id"),
)

color_table = Table(
    "catalog_color",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("generic_name", String, nullable=False, unique=True),
    Column("rgb_hex", String(16), nullable=True),
    Column("created_at", UTCDateTime(), nullable=False, default=utcnow),
    Column("updated_at", UTCDateTime(), nullable=False, default=utcnow),
)

color_source_id_table = Table(
    "catalog_color_source_id",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("color_id", Integer, ForeignKey("catalog_color.id"), nullable=False),
    Column("source", _value_enum(CatalogSource, 16), nullable=False),
    Column("source_id", String, nullable=False),
    Column("name", String, nullable=True),
    UniqueConstraint("source", "source_id"),
)

# Vendor cross-references -----------------------------------------------------

part_crossref_table = Table(
    "part_crossref",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("canonical_part_id", String, nullable=False, unique=True),
    Column("rebrickable_part_id", String, nullable=True),
    Column("bricklink_part_id", String, nullable=True, index=True),
    Column("brickowl_part_id", String, nullable=True),
)

color_crossref_table = Table(
    "color_crossref",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("canonical_color_id", Integer, nullable=False, unique=True),
    Column("rebrickable_color_id", String, nullable=True),
    Column("bricklink_color_id", String, nullable=True, index=True),
    Column("brickowl_color_id", String, nullable=True),
)

# Inventory -------------------------------------------------------------------

import_batch_table = Table(
    "import_batch",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("source", String, nullable=False),
    Column("file_name", String, nullable=True),
    Column("created_at", UTCDateTime(), nullable=False, default=utcnow),
    Column("lot_count", Integer, nullable=False, default=0),
    Column("piece_count", Integer, nullable=False, default=0),
)

inventory_lot_table = Table(
    "inventory_lot",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("canonical_part_id", String, nullable=False),
    Column("canonical_color_id", Integer, nullable=False),
    Column("quantity", Integer, nullable=False, default=0),
    Column(
        "condition",
        _value_enum(Condition, 1),
        nullable=False,
        default=Condition.USED,
        server_default=Condition.USED.value,
    ),
    Column("source", String, nullable=True),
    Column("import_batch_id", Integer, ForeignKey("import_batch.id"), nullable=True),
    Column("notes", String, nullable=True),
    Column("created_at", UTCDateTime(), nullable=False, default=utcnow),
    Column("updated_at", UTCDateTime(), nullable=False, default=utcnow),
    UniqueConstraint("canonical_part_id", "canonical_color_id", "condition"),
)


@cache
def start_mappers() -> orm.registry:
    """Configure SQLAlchemy mappers for the domain model."""

    log.info("Starting SQLAlchemy mappers")

    mapper_registry.map_imperatively(CanonicalPart, part_table)
    mapper_registry.map_imperatively(PartSourceId, part_source_id_table)
    mapper_registry.map_imperatively(CanonicalColor, color_table)
    mapper_registry.map_imperatively(ColorSourceId, color_source_id_table)
    mapper_registry.map_imperatively(PartCrossReference, part_crossref_table)
    mapper_registry.map_imperatively(ColorCrossReference, color_crossref_table)
    mapper_registry.map_imperatively(ImportBatch, import_batch_table)
    mapper_registry.map_imperatively(InventoryLot, inventory_lot_table)

    orm.configure_mappers()
    return mapper_registry

