"""SQLAlchemy adapter package for brickledger."""

from __future__ import annotations

from .mappings import mapper_registry, start_mappers
from .repositories import (
    SqlAlchemyColorRepository,
    SqlAlchemyCrossReferenceRepository,
    SqlAlchemyImportBatchRepository,
    SqlAlchemyInventoryLotRepository,
    SqlAlchemyPartRepository,
)

__all__ = [
    "SqlAlchemyColorRepository",
    "SqlAlchemyCrossReferenceRepository",
    "SqlAlchemyImportBatchRepository",
    "SqlAlchemyInventoryLotRepository",
    "SqlAlchemyPartRepository",
    "mapper_registry",
    "start_mappers",
]
