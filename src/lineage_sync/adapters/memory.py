"""In-memory metadata catalog.

Backs tests and ``--dry-run`` replays. It behaves like a remote catalog in the
ways the reconciler depends on: guids are assigned on create, name lookups may
return duplicates in creation order, unknown guids are rejected, and the
one-edge-per-pair and one-structure-per-asset rules are enforced.
"""

from __future__ import annotations

import dataclasses
import uuid
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Literal

from lineage_sync.domain.errors import ElementNotFoundError, InvalidParameterError
from lineage_sync.domain.model import (
    Asset,
    DataFlowEdge,
    ElementKind,
    Process,
    SchemaField,
    SchemaStructure,
)
from lineage_sync.domain.ports import CatalogRepositories

if TYPE_CHECKING:
    from types import TracebackType

    from lineage_sync.domain.model import (
        AssetProperties,
        DataFlowProperties,
        ProcessProperties,
        ProcessStatus,
        SchemaFieldProperties,
        SchemaStructureProperties,
    )


def _new_guid() -> str:
    return str(uuid.uuid4())


@dataclass(slots=True)
class InMemoryCatalog:
    """Element store shared by the in-memory repositories.

    With ``cascade_deletes=False`` deleting a structure leaves its fields in
    place, like catalogs that do not cascade.
    """

    cascade_deletes: bool = True
    assets: dict[str, Asset] = field(default_factory=dict[str, Asset])
    processes: dict[str, Process] = field(default_factory=dict[str, Process])
    structures: dict[str, SchemaStructure] = field(default_factory=dict[str, SchemaStructure])
    schema_fields: dict[str, SchemaField] = field(default_factory=dict[str, SchemaField])
    data_flows: dict[str, DataFlowEdge] = field(default_factory=dict[str, DataFlowEdge])

    def repositories(self) -> CatalogRepositories:
        return CatalogRepositories(
            assets=InMemoryAssetRepository(self),
            processes=InMemoryProcessRepository(self),
            schema_structures=InMemorySchemaStructureRepository(self),
            schema_fields=InMemorySchemaFieldRepository(self),
            data_flows=InMemoryDataFlowRepository(self),
        )

    def snapshot(self) -> InMemoryCatalog:
        """Return a copy; elements are immutable so copying the dicts suffices."""

        return InMemoryCatalog(
            cascade_deletes=self.cascade_deletes,
            assets=dict(self.assets),
            processes=dict(self.processes),
            structures=dict(self.structures),
            schema_fields=dict(self.schema_fields),
            data_flows=dict(self.data_flows),
        )

    def restore(self, snapshot: InMemoryCatalog) -> None:
        self.assets = dict(snapshot.assets)
        self.processes = dict(snapshot.processes)
        self.structures = dict(snapshot.structures)
        self.schema_fields = dict(snapshot.schema_fields)
        self.data_flows = dict(snapshot.data_flows)

    def fields_of(self, structure_guid: str) -> list[SchemaField]:
        return [
            schema_field
            for schema_field in self.schema_fields.values()
            if schema_field.structure_guid == structure_guid
        ]

    def require_asset(self, guid: str) -> Asset:
        asset = self.assets.get(guid)
        if asset is None:
            raise ElementNotFoundError(ElementKind.ASSET, guid)
        return asset

    def require_structure(self, guid: str) -> SchemaStructure:
        structure = self.structures.get(guid)
        if structure is None:
            raise ElementNotFoundError(ElementKind.SCHEMA_STRUCTURE, guid)
        return structure


class InMemoryAssetRepository:
    def __init__(self, catalog: InMemoryCatalog) -> None:
        self.catalog = catalog

    def find_by_name(self, qualified_name: str) -> list[Asset]:
        return [
            asset
            for asset in self.catalog.assets.values()
            if asset.qualified_name == qualified_name
        ]

    def get(self, guid: str) -> Asset:
        return self.catalog.require_asset(guid)

    def create(self, properties: AssetProperties) -> str:
        guid = _new_guid()
        self.catalog.assets[guid] = Asset(guid=guid, properties=properties)
        return guid

    def update(self, guid: str, properties: AssetProperties) -> None:
        asset = self.catalog.require_asset(guid)
        self.catalog.assets[guid] = dataclasses.replace(asset, properties=properties)


class InMemoryProcessRepository:
    def __init__(self, catalog: InMemoryCatalog) -> None:
        self.catalog = catalog

    def find_by_name(self, qualified_name: str) -> list[Process]:
        return [
            process
            for process in self.catalog.processes.values()
            if process.qualified_name == qualified_name
        ]

    def create(self, properties: ProcessProperties, status: ProcessStatus) -> str:
        guid = _new_guid()
        self.catalog.processes[guid] = Process(guid=guid, properties=properties, status=status)
        return guid

    def update(self, guid: str, properties: ProcessProperties) -> None:
        process = self.catalog.processes.get(guid)
        if process is None:
            raise ElementNotFoundError(ElementKind.PROCESS, guid)
        self.catalog.processes[guid] = dataclasses.replace(process, properties=properties)


class InMemorySchemaStructureRepository:
    def __init__(self, catalog: InMemoryCatalog) -> None:
        self.catalog = catalog

    def find_for_asset(self, asset_guid: str, asset_type_name: str) -> SchemaStructure | None:
        self._check_owner(asset_guid, asset_type_name)
        for structure in self.catalog.structures.values():
            if structure.owner_guid == asset_guid:
                return structure
        return None

    def create(self, properties: SchemaStructureProperties) -> str:
        guid = _new_guid()
        self.catalog.structures[guid] = SchemaStructure(guid=guid, properties=properties)
        return guid

    def update(self, guid: str, properties: SchemaStructureProperties) -> None:
        structure = self.catalog.require_structure(guid)
        self.catalog.structures[guid] = dataclasses.replace(structure, properties=properties)

    def delete(self, guid: str) -> None:
        self.catalog.require_structure(guid)
        del self.catalog.structures[guid]
        if not self.catalog.cascade_deletes:
            return
        for schema_field in self.catalog.fields_of(guid):
            del self.catalog.schema_fields[schema_field.guid]

    def attach_to_asset(self, structure_guid: str, asset_guid: str, asset_type_name: str) -> None:
        structure = self.catalog.require_structure(structure_guid)
        self._check_owner(asset_guid, asset_type_name)
        current = self.find_for_asset(asset_guid, asset_type_name)
        if current is not None and current.guid != structure_guid:
            raise InvalidParameterError(
                f"Asset {asset_guid} already has schema structure {current.guid}"
            )
        self.catalog.structures[structure_guid] = dataclasses.replace(
            structure,
            owner_guid=asset_guid,
            owner_type_name=asset_type_name,
        )

    def _check_owner(self, asset_guid: str, asset_type_name: str) -> None:
        asset = self.catalog.require_asset(asset_guid)
        if asset.properties.type_name != asset_type_name:
            raise InvalidParameterError(
                f"Asset {asset_guid} is a {asset.properties.type_name}, not a {asset_type_name}"
            )


class InMemorySchemaFieldRepository:
    def __init__(self, catalog: InMemoryCatalog) -> None:
        self.catalog = catalog

    def list_for_structure(self, structure_guid: str) -> list[SchemaField]:
        self.catalog.require_structure(structure_guid)
        return self.catalog.fields_of(structure_guid)

    def create(self, structure_guid: str, properties: SchemaFieldProperties) -> str:
        self.catalog.require_structure(structure_guid)
        guid = _new_guid()
        self.catalog.schema_fields[guid] = SchemaField(
            guid=guid,
            structure_guid=structure_guid,
            properties=properties,
        )
        return guid

    def update(self, guid: str, properties: SchemaFieldProperties) -> None:
        schema_field = self._require(guid)
        self.catalog.schema_fields[guid] = dataclasses.replace(schema_field, properties=properties)

    def delete(self, guid: str) -> None:
        self._require(guid)
        del self.catalog.schema_fields[guid]

    def _require(self, guid: str) -> SchemaField:
        schema_field = self.catalog.schema_fields.get(guid)
        if schema_field is None:
            raise ElementNotFoundError(ElementKind.SCHEMA_FIELD, guid)
        return schema_field


class InMemoryDataFlowRepository:
    def __init__(self, catalog: InMemoryCatalog) -> None:
        self.catalog = catalog

    def find(self, source_guid: str, target_guid: str) -> DataFlowEdge | None:
        for edge in self.catalog.data_flows.values():
            if edge.source_guid == source_guid and edge.target_guid == target_guid:
                return edge
        return None

    def create(self, source_guid: str, target_guid: str, properties: DataFlowProperties) -> str:
        if self.find(source_guid, target_guid) is not None:
            raise InvalidParameterError(f"Data flow {source_guid} -> {target_guid} already exists")
        guid = _new_guid()
        self.catalog.data_flows[guid] = DataFlowEdge(
            guid=guid,
            source_guid=source_guid,
            target_guid=target_guid,
            properties=properties,
        )
        return guid

    def update(self, guid: str, properties: DataFlowProperties) -> None:
        edge = self.catalog.data_flows.get(guid)
        if edge is None:
            raise ElementNotFoundError(ElementKind.DATA_FLOW, guid)
        self.catalog.data_flows[guid] = dataclasses.replace(edge, properties=properties)


class InMemoryUnitOfWork:
    """Unit of work over an ``InMemoryCatalog``; rollback restores the entry snapshot."""

    def __init__(self, catalog: InMemoryCatalog | None = None) -> None:
        self.catalog = catalog if catalog is not None else InMemoryCatalog()
        self._snapshot: InMemoryCatalog | None = None
        self._repositories = self.catalog.repositories()

    def __enter__(self) -> InMemoryUnitOfWork:
        self._snapshot = self.catalog.snapshot()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        # anything written after the last commit is discarded, as with a closed session
        self.rollback()
        self._snapshot = None
        return False

    @property
    def repositories(self) -> CatalogRepositories:
        return self._repositories

    def commit(self) -> None:
        self._snapshot = self.catalog.snapshot()

    def rollback(self) -> None:
        if self._snapshot is not None:
            self.catalog.restore(self._snapshot)


if TYPE_CHECKING:
    from lineage_sync.domain.ports import (
        AssetRepository,
        CatalogUnitOfWork,
        DataFlowRepository,
        ProcessRepository,
        SchemaFieldRepository,
        SchemaStructureRepository,
    )

    _catalog_stub = InMemoryCatalog()
    _asset_repo: AssetRepository = InMemoryAssetRepository(_catalog_stub)
    _process_repo: ProcessRepository = InMemoryProcessRepository(_catalog_stub)
    _structure_repo: SchemaStructureRepository = InMemorySchemaStructureRepository(_catalog_stub)
    _field_repo: SchemaFieldRepository = InMemorySchemaFieldRepository(_catalog_stub)
    _flow_repo: DataFlowRepository = InMemoryDataFlowRepository(_catalog_stub)
    _uow_check: CatalogUnitOfWork = InMemoryUnitOfWork(_catalog_stub)
