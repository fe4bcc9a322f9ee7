"""SQLAlchemy adapter package for the lineage-sync catalog."""

from __future__ import annotations

from .mappings import metadata
from .repositories import (
    SqlAlchemyAssetRepository,
    SqlAlchemyDataFlowRepository,
    SqlAlchemyProcessRepository,
    SqlAlchemySchemaFieldRepository,
    SqlAlchemySchemaStructureRepository,
)
from .unit_of_work import (
    SqlAlchemyCatalogUnitOfWork,
    StartupError,
    configured_engine,
    is_started,
    shutdown,
    startup,
)

__all__ = [
    "SqlAlchemyAssetRepository",
    "SqlAlchemyCatalogUnitOfWork",
    "SqlAlchemyDataFlowRepository",
    "SqlAlchemyProcessRepository",
    "SqlAlchemySchemaFieldRepository",
    "SqlAlchemySchemaStructureRepository",
    "StartupError",
    "configured_engine",
    "is_started",
    "metadata",
    "shutdown",
    "startup",
]
