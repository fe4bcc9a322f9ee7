"""Ports for the metadata catalog the reconciler writes to.

Each repository covers one element kind. Every method may raise a
``lineage_sync.domain.errors.CatalogError``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from lineage_sync.domain.model import (
        Asset,
        AssetProperties,
        DataFlowEdge,
        DataFlowProperties,
        Process,
        ProcessProperties,
        ProcessStatus,
        SchemaField,
        SchemaFieldProperties,
        SchemaStructure,
        SchemaStructureProperties,
    )


@runtime_checkable
class AssetRepository(Protocol):
    """Catalog operations on data assets."""

    def find_by_name(self, qualified_name: str) -> list[Asset]:
        """Return every asset with ``qualified_name``; the catalog allows duplicates."""
        ...

    def get(self, guid: str) -> Asset: ...

    def create(self, properties: AssetProperties) -> str: ...

    def update(self, guid: str, properties: AssetProperties) -> None: ...


@runtime_checkable
class ProcessRepository(Protocol):
    """Catalog operations on processes."""

    def find_by_name(self, qualified_name: str) -> list[Process]: ...

    def create(self, properties: ProcessProperties, status: ProcessStatus) -> str: ...

    def update(self, guid: str, properties: ProcessProperties) -> None: ...


@runtime_checkable
class SchemaStructureRepository(Protocol):
    """Catalog operations on schema structures attached to assets."""

    def find_for_asset(self, asset_guid: str, asset_type_name: str) -> SchemaStructure | None:
        """Return the structure attached to the asset, if any."""
        ...

    def create(self, properties: SchemaStructureProperties) -> str: ...

    def update(self, guid: str, properties: SchemaStructureProperties) -> None: ...

    def delete(self, guid: str) -> None:
        """Remove the structure; catalogs that cascade also remove its fields."""
        ...

    def attach_to_asset(self, structure_guid: str, asset_guid: str, asset_type_name: str) -> None:
        ...


@runtime_checkable
class SchemaFieldRepository(Protocol):
    """Catalog operations on the fields nested under a schema structure."""

    def list_for_structure(self, structure_guid: str) -> list[SchemaField]: ...

    def create(self, structure_guid: str, properties: SchemaFieldProperties) -> str: ...

    def update(self, guid: str, properties: SchemaFieldProperties) -> None: ...

    def delete(self, guid: str) -> None: ...


@runtime_checkable
class DataFlowRepository(Protocol):
    """Catalog operations on directed data-flow edges."""

    def find(self, source_guid: str, target_guid: str) -> DataFlowEdge | None: ...

    def create(self, source_guid: str, target_guid: str, properties: DataFlowProperties) -> str:
        ...

    def update(self, guid: str, properties: DataFlowProperties) -> None: ...
