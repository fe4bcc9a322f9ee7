"""Unit-of-work abstractions for coordinating catalog repositories."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from types import TracebackType

    from lineage_sync.domain.ports.catalog import (
        AssetRepository,
        DataFlowRepository,
        ProcessRepository,
        SchemaFieldRepository,
        SchemaStructureRepository,
    )


@runtime_checkable
class RepositoryCollection(Protocol):
    """Marker protocol for groups of repositories managed together."""


@runtime_checkable
class UnitOfWork[TRepositories: RepositoryCollection](Protocol):
    """Generic unit-of-work boundary around a repository collection."""

    @property
    def repositories(self) -> TRepositories: ...

    def __enter__(self) -> UnitOfWork[TRepositories]: ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> bool: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...


@dataclass(slots=True)
class CatalogRepositories(RepositoryCollection):
    """Repositories the lineage reconciler needs, one per element kind."""

    assets: AssetRepository
    processes: ProcessRepository
    schema_structures: SchemaStructureRepository
    schema_fields: SchemaFieldRepository
    data_flows: DataFlowRepository


type CatalogUnitOfWork = UnitOfWork[CatalogRepositories]
