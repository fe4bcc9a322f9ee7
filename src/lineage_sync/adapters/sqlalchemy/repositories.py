"""Catalog repositories backed by SQLAlchemy sessions.

Repositories issue Core statements through the unit of work's session and
return immutable domain elements. Database failures are translated into
catalog errors so the reconciler sees the same error contract as with any
other catalog.
"""

from __future__ import annotations

import uuid
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, cast

from sqlalchemy import delete, insert, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from lineage_sync.adapters.sqlalchemy.mappings import (
    asset_table,
    data_flow_table,
    process_table,
    schema_attribute_table,
    schema_type_table,
)
from lineage_sync.domain.errors import (
    CatalogServerError,
    ElementNotFoundError,
    InvalidParameterError,
)
from lineage_sync.domain.model import (
    Asset,
    AssetProperties,
    DataFlowEdge,
    DataFlowProperties,
    ElementKind,
    Process,
    ProcessProperties,
    ProcessStatus,
    SchemaField,
    SchemaFieldProperties,
    SchemaStructure,
    SchemaStructureProperties,
)

if TYPE_CHECKING:
    from collections.abc import Iterator

    from sqlalchemy import CursorResult, Executable, RowMapping
    from sqlalchemy.orm import Session


def _new_guid() -> str:
    return str(uuid.uuid4())


@contextmanager
def _catalog_errors(operation: str) -> Iterator[None]:
    try:
        yield
    except IntegrityError as exc:
        raise InvalidParameterError(f"{operation} rejected by the catalog: {exc.orig}") from exc
    except SQLAlchemyError as exc:
        raise CatalogServerError(f"{operation} failed: {exc}") from exc


class _SqlAlchemyRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def _rows(self, stmt: Executable) -> list[RowMapping]:
        return list(self.session.execute(stmt).mappings().all())

    def _row(self, stmt: Executable) -> RowMapping | None:
        return self.session.execute(stmt).mappings().first()

    def _write(self, stmt: Executable, *, element: ElementKind, guid: str) -> None:
        result = cast("CursorResult[Any]", self.session.execute(stmt))
        if result.rowcount == 0:
            raise ElementNotFoundError(element, guid)

    def _require_asset(self, guid: str, type_name: str | None = None) -> None:
        row = self._row(select(asset_table.c.type_name).where(asset_table.c.guid == guid))
        if row is None:
            raise ElementNotFoundError(ElementKind.ASSET, guid)
        if type_name is not None and row["type_name"] != type_name:
            raise InvalidParameterError(f"Asset {guid} is a {row['type_name']}, not a {type_name}")

    def _require_structure(self, guid: str) -> None:
        stmt = select(schema_type_table.c.guid).where(schema_type_table.c.guid == guid)
        if self._row(stmt) is None:
            raise ElementNotFoundError(ElementKind.SCHEMA_STRUCTURE, guid)


def _asset_from_row(row: RowMapping) -> Asset:
    return Asset(
        guid=row["guid"],
        properties=AssetProperties(
            type_name=row["type_name"],
            qualified_name=row["qualified_name"],
            display_name=row["display_name"],
        ),
    )


def _process_from_row(row: RowMapping) -> Process:
    return Process(
        guid=row["guid"],
        properties=ProcessProperties(
            qualified_name=row["qualified_name"],
            display_name=row["display_name"],
            description=row["description"],
        ),
        status=ProcessStatus(row["status"]),
    )


def _structure_from_row(row: RowMapping) -> SchemaStructure:
    return SchemaStructure(
        guid=row["guid"],
        properties=SchemaStructureProperties(
            type_name=row["type_name"],
            qualified_name=row["qualified_name"],
            display_name=row["display_name"],
        ),
        owner_guid=row["owner_guid"],
        owner_type_name=row["owner_type_name"],
    )


def _field_from_row(row: RowMapping) -> SchemaField:
    return SchemaField(
        guid=row["guid"],
        structure_guid=row["schema_type_guid"],
        properties=SchemaFieldProperties(
            qualified_name=row["qualified_name"],
            display_name=row["display_name"],
            type_name=row["type_name"],
            description=row["description"],
        ),
    )


def _edge_from_row(row: RowMapping) -> DataFlowEdge:
    return DataFlowEdge(
        guid=row["guid"],
        source_guid=row["source_guid"],
        target_guid=row["target_guid"],
        properties=DataFlowProperties(formula=row["formula"]),
    )


class SqlAlchemyAssetRepository(_SqlAlchemyRepository):
    def find_by_name(self, qualified_name: str) -> list[Asset]:
        stmt = (
            select(asset_table)
            .where(asset_table.c.qualified_name == qualified_name)
            .order_by(asset_table.c.created_at, asset_table.c.guid)
        )
        with _catalog_errors("Asset lookup"):
            return [_asset_from_row(row) for row in self._rows(stmt)]

    def get(self, guid: str) -> Asset:
        with _catalog_errors("Asset fetch"):
            row = self._row(select(asset_table).where(asset_table.c.guid == guid))
        if row is None:
            raise ElementNotFoundError(ElementKind.ASSET, guid)
        return _asset_from_row(row)

    def create(self, properties: AssetProperties) -> str:
        guid = _new_guid()
        stmt = insert(asset_table).values(
            guid=guid,
            qualified_name=properties.qualified_name,
            display_name=properties.display_name,
            type_name=properties.type_name,
        )
        with _catalog_errors("Asset create"):
            self.session.execute(stmt)
        return guid

    def update(self, guid: str, properties: AssetProperties) -> None:
        stmt = (
            update(asset_table)
            .where(asset_table.c.guid == guid)
            .values(
                qualified_name=properties.qualified_name,
                display_name=properties.display_name,
                type_name=properties.type_name,
            )
        )
        with _catalog_errors("Asset update"):
            self._write(stmt, element=ElementKind.ASSET, guid=guid)


class SqlAlchemyProcessRepository(_SqlAlchemyRepository):
    def find_by_name(self, qualified_name: str) -> list[Process]:
        stmt = (
            select(process_table)
            .where(process_table.c.qualified_name == qualified_name)
            .order_by(process_table.c.created_at, process_table.c.guid)
        )
        with _catalog_errors("Process lookup"):
            return [_process_from_row(row) for row in self._rows(stmt)]

    def create(self, properties: ProcessProperties, status: ProcessStatus) -> str:
        guid = _new_guid()
        stmt = insert(process_table).values(
            guid=guid,
            qualified_name=properties.qualified_name,
            display_name=properties.display_name,
            description=properties.description,
            status=status,
        )
        with _catalog_errors("Process create"):
            self.session.execute(stmt)
        return guid

    def update(self, guid: str, properties: ProcessProperties) -> None:
        stmt = (
            update(process_table)
            .where(process_table.c.guid == guid)
            .values(
                qualified_name=properties.qualified_name,
                display_name=properties.display_name,
                description=properties.description,
            )
        )
        with _catalog_errors("Process update"):
            self._write(stmt, element=ElementKind.PROCESS, guid=guid)


class SqlAlchemySchemaStructureRepository(_SqlAlchemyRepository):
    def find_for_asset(self, asset_guid: str, asset_type_name: str) -> SchemaStructure | None:
        stmt = select(schema_type_table).where(schema_type_table.c.owner_guid == asset_guid)
        with _catalog_errors("Schema structure lookup"):
            self._require_asset(asset_guid, asset_type_name)
            row = self._row(stmt)
        return _structure_from_row(row) if row is not None else None

    def create(self, properties: SchemaStructureProperties) -> str:
        guid = _new_guid()
        stmt = insert(schema_type_table).values(
            guid=guid,
            qualified_name=properties.qualified_name,
            display_name=properties.display_name,
            type_name=properties.type_name,
        )
        with _catalog_errors("Schema structure create"):
            self.session.execute(stmt)
        return guid

    def update(self, guid: str, properties: SchemaStructureProperties) -> None:
        stmt = (
            update(schema_type_table)
            .where(schema_type_table.c.guid == guid)
            .values(
                qualified_name=properties.qualified_name,
                display_name=properties.display_name,
                type_name=properties.type_name,
            )
        )
        with _catalog_errors("Schema structure update"):
            self._write(stmt, element=ElementKind.SCHEMA_STRUCTURE, guid=guid)

    def delete(self, guid: str) -> None:
        # fields go explicitly; SQLite only honours ON DELETE CASCADE with foreign keys enabled
        with _catalog_errors("Schema structure delete"):
            self._require_structure(guid)
            self.session.execute(
                delete(schema_attribute_table).where(
                    schema_attribute_table.c.schema_type_guid == guid
                )
            )
            self._write(
                delete(schema_type_table).where(schema_type_table.c.guid == guid),
                element=ElementKind.SCHEMA_STRUCTURE,
                guid=guid,
            )

    def attach_to_asset(self, structure_guid: str, asset_guid: str, asset_type_name: str) -> None:
        stmt = (
            update(schema_type_table)
            .where(schema_type_table.c.guid == structure_guid)
            .values(owner_guid=asset_guid, owner_type_name=asset_type_name)
        )
        with _catalog_errors("Schema structure attach"):
            self._require_asset(asset_guid, asset_type_name)
            self._write(stmt, element=ElementKind.SCHEMA_STRUCTURE, guid=structure_guid)


class SqlAlchemySchemaFieldRepository(_SqlAlchemyRepository):
    def list_for_structure(self, structure_guid: str) -> list[SchemaField]:
        stmt = (
            select(schema_attribute_table)
            .where(schema_attribute_table.c.schema_type_guid == structure_guid)
            .order_by(schema_attribute_table.c.created_at, schema_attribute_table.c.guid)
        )
        with _catalog_errors("Schema field listing"):
            self._require_structure(structure_guid)
            return [_field_from_row(row) for row in self._rows(stmt)]

    def create(self, structure_guid: str, properties: SchemaFieldProperties) -> str:
        guid = _new_guid()
        stmt = insert(schema_attribute_table).values(
            guid=guid,
            schema_type_guid=structure_guid,
            qualified_name=properties.qualified_name,
            display_name=properties.display_name,
            type_name=properties.type_name,
            description=properties.description,
        )
        with _catalog_errors("Schema field create"):
            self._require_structure(structure_guid)
            self.session.execute(stmt)
        return guid

    def update(self, guid: str, properties: SchemaFieldProperties) -> None:
        stmt = (
            update(schema_attribute_table)
            .where(schema_attribute_table.c.guid == guid)
            .values(
                qualified_name=properties.qualified_name,
                display_name=properties.display_name,
                type_name=properties.type_name,
                description=properties.description,
            )
        )
        with _catalog_errors("Schema field update"):
            self._write(stmt, element=ElementKind.SCHEMA_FIELD, guid=guid)

    def delete(self, guid: str) -> None:
        stmt = delete(schema_attribute_table).where(schema_attribute_table.c.guid == guid)
        with _catalog_errors("Schema field delete"):
            self._write(stmt, element=ElementKind.SCHEMA_FIELD, guid=guid)


class SqlAlchemyDataFlowRepository(_SqlAlchemyRepository):
    def find(self, source_guid: str, target_guid: str) -> DataFlowEdge | None:
        stmt = (
            select(data_flow_table)
            .where(data_flow_table.c.source_guid == source_guid)
            .where(data_flow_table.c.target_guid == target_guid)
        )
        with _catalog_errors("Data flow lookup"):
            row = self._row(stmt)
        return _edge_from_row(row) if row is not None else None

    def create(self, source_guid: str, target_guid: str, properties: DataFlowProperties) -> str:
        guid = _new_guid()
        stmt = insert(data_flow_table).values(
            guid=guid,
            source_guid=source_guid,
            target_guid=target_guid,
            formula=properties.formula,
        )
        with _catalog_errors("Data flow create"):
            self.session.execute(stmt)
        return guid

    def update(self, guid: str, properties: DataFlowProperties) -> None:
        stmt = (
            update(data_flow_table)
            .where(data_flow_table.c.guid == guid)
            .values(formula=properties.formula)
        )
        with _catalog_errors("Data flow update"):
            self._write(stmt, element=ElementKind.DATA_FLOW, guid=guid)


if TYPE_CHECKING:
    from lineage_sync.domain.ports import (
        AssetRepository,
        DataFlowRepository,
        ProcessRepository,
        SchemaFieldRepository,
        SchemaStructureRepository,
    )

    _session_stub = cast("Session", object())
    _asset_repo: AssetRepository = SqlAlchemyAssetRepository(_session_stub)
    _process_repo: ProcessRepository = SqlAlchemyProcessRepository(_session_stub)
    _structure_repo: SchemaStructureRepository = SqlAlchemySchemaStructureRepository(_session_stub)
    _field_repo: SchemaFieldRepository = SqlAlchemySchemaFieldRepository(_session_stub)
    _flow_repo: DataFlowRepository = SqlAlchemyDataFlowRepository(_session_stub)
