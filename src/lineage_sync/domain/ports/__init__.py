"""Domain port definitions for catalog adapters."""

from __future__ import annotations

from .catalog import (
    AssetRepository,
    DataFlowRepository,
    ProcessRepository,
    SchemaFieldRepository,
    SchemaStructureRepository,
)
from .unit_of_work import (
    CatalogRepositories,
    CatalogUnitOfWork,
    RepositoryCollection,
    UnitOfWork,
)

__all__ = [
    "AssetRepository",
    "CatalogRepositories",
    "CatalogUnitOfWork",
    "DataFlowRepository",
    "ProcessRepository",
    "RepositoryCollection",
    "SchemaFieldRepository",
    "SchemaStructureRepository",
    "UnitOfWork",
]
