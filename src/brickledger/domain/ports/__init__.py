"""Domain port definitions for adapters."""

from __future__ import annotations

from .fetching import PartSearchClient, SetInventoryFetcher
from .persistence import (
    ColorRepository,
    CrossReferenceRepository,
    ImportBatchRepository,
    InventoryLotRepository,
    PartRepository,
    Repository,
)
from .unit_of_work import (
    CatalogRepositories,
    CatalogUnitOfWork,
    ImportRepositories,
    ImportUnitOfWork,
    RepositoryCollection,
    UnitOfWork,
)

__all__ = [
    "CatalogRepositories",
    "CatalogUnitOfWork",
    "ColorRepository",
    "CrossReferenceRepository",
    "ImportBatchRepository",
    "ImportRepositories",
    "ImportUnitOfWork",
    "InventoryLotRepository",
    "PartRepository",
    "PartSearchClient",
    "Repository",
    "RepositoryCollection",
    "SetInventoryFetcher",
    "UnitOfWork",
]
