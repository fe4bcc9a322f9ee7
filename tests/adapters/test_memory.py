from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from lineage_sync.adapters.memory import InMemoryCatalog, InMemoryUnitOfWork
from lineage_sync.domain.errors import ElementNotFoundError, InvalidParameterError
from lineage_sync.domain.model import (
    AssetProperties,
    DataFlowProperties,
    ElementKind,
    ProcessProperties,
    SchemaFieldProperties,
    SchemaStructureProperties,
)
from tests.helpers.events import TOPIC

if TYPE_CHECKING:
    from collections.abc import Callable

    from lineage_sync.domain.ports import CatalogRepositories


def _structure(catalog: InMemoryCatalog, asset_guid: str, name: str = "S1") -> str:
    repositories = catalog.repositories()
    guid = repositories.schema_structures.create(
        SchemaStructureProperties(type_name="EventType", qualified_name=name)
    )
    repositories.schema_structures.attach_to_asset(guid, asset_guid, TOPIC)
    return guid


def _asset(catalog: InMemoryCatalog, name: str = "kafka.orders") -> str:
    return catalog.repositories().assets.create(
        AssetProperties(type_name=TOPIC, qualified_name=name)
    )


@pytest.mark.parametrize(
    ("call", "element"),
    [
        (lambda repos: repos.assets.get("missing"), ElementKind.ASSET),
        (
            lambda repos: repos.processes.update("missing", ProcessProperties(qualified_name="job")),
            ElementKind.PROCESS,
        ),
        (
            lambda repos: repos.schema_fields.list_for_structure("missing"),
            ElementKind.SCHEMA_STRUCTURE,
        ),
        (lambda repos: repos.schema_fields.delete("missing"), ElementKind.SCHEMA_FIELD),
        (
            lambda repos: repos.data_flows.update("missing", DataFlowProperties()),
            ElementKind.DATA_FLOW,
        ),
    ],
)
def test_unknown_guids_raise_not_found(
    memory_catalog: InMemoryCatalog,
    call: Callable[[CatalogRepositories], object],
    element: ElementKind,
) -> None:
    with pytest.raises(ElementNotFoundError) as excinfo:
        call(memory_catalog.repositories())

    assert excinfo.value.element is element
    assert excinfo.value.guid == "missing"


def test_second_structure_on_asset_is_rejected(memory_catalog: InMemoryCatalog) -> None:
    asset_guid = _asset(memory_catalog)
    _structure(memory_catalog, asset_guid, "S1")

    with pytest.raises(InvalidParameterError):
        _structure(memory_catalog, asset_guid, "S2")


def test_structure_lookup_checks_asset_type(memory_catalog: InMemoryCatalog) -> None:
    asset_guid = _asset(memory_catalog)

    with pytest.raises(InvalidParameterError):
        memory_catalog.repositories().schema_structures.find_for_asset(asset_guid, "Table")


def test_duplicate_edge_pair_is_rejected(memory_catalog: InMemoryCatalog) -> None:
    flows = memory_catalog.repositories().data_flows
    flows.create("a", "b", DataFlowProperties())

    with pytest.raises(InvalidParameterError):
        flows.create("a", "b", DataFlowProperties(formula="select 1"))
    assert flows.find("b", "a") is None


def test_structure_delete_cascades_only_when_enabled() -> None:
    for cascade, remaining in ((True, 0), (False, 1)):
        catalog = InMemoryCatalog(cascade_deletes=cascade)
        structure_guid = _structure(catalog, _asset(catalog))
        repositories = catalog.repositories()
        repositories.schema_fields.create(
            structure_guid, SchemaFieldProperties(qualified_name="S1.a", display_name="a")
        )

        repositories.schema_structures.delete(structure_guid)

        assert len(catalog.schema_fields) == remaining


def test_unit_of_work_rolls_back_on_error(memory_catalog: InMemoryCatalog) -> None:
    _asset(memory_catalog, "kept")

    with pytest.raises(RuntimeError), InMemoryUnitOfWork(memory_catalog) as uow:
        uow.repositories.assets.create(AssetProperties(type_name=TOPIC, qualified_name="lost"))
        raise RuntimeError("boom")

    assert [asset.qualified_name for asset in memory_catalog.assets.values()] == ["kept"]


def test_unit_of_work_commit_survives_later_rollback(memory_catalog: InMemoryCatalog) -> None:
    with InMemoryUnitOfWork(memory_catalog) as uow:
        uow.repositories.assets.create(AssetProperties(type_name=TOPIC, qualified_name="kept"))
        uow.commit()
        uow.repositories.assets.create(AssetProperties(type_name=TOPIC, qualified_name="lost"))
        uow.rollback()

    assert [asset.qualified_name for asset in memory_catalog.assets.values()] == ["kept"]


def test_unit_of_work_discards_uncommitted_writes_on_exit(memory_catalog: InMemoryCatalog) -> None:
    with InMemoryUnitOfWork(memory_catalog) as uow:
        uow.repositories.assets.create(AssetProperties(type_name=TOPIC, qualified_name="lost"))

    assert memory_catalog.assets == {}


def test_unit_of_work_keeps_committed_writes_on_exit(memory_catalog: InMemoryCatalog) -> None:
    with InMemoryUnitOfWork(memory_catalog) as uow:
        uow.repositories.assets.create(AssetProperties(type_name=TOPIC, qualified_name="kept"))
        uow.commit()
        uow.repositories.assets.create(AssetProperties(type_name=TOPIC, qualified_name="lost"))

    assert [asset.qualified_name for asset in memory_catalog.assets.values()] == ["kept"]
