from __future__ import annotations

import pytest

from lineage_sync.adapters.memory import InMemoryCatalog
from lineage_sync.domain.errors import InvalidParameterError
from lineage_sync.domain.model import AssetProperties, SchemaDescriptor, SchemaFieldProperties
from lineage_sync.domain.reconciliation import ReconcilePolicy, SchemaReconciler, UpsertAction
from tests.helpers.events import TOPIC, make_asset, make_field, make_schema


def _setup(
    catalog: InMemoryCatalog,
    policy: ReconcilePolicy | None = None,
) -> tuple[SchemaReconciler, str]:
    repositories = catalog.repositories()
    asset_guid = repositories.assets.create(
        AssetProperties(type_name=TOPIC, qualified_name="kafka.orders")
    )
    reconciler = SchemaReconciler(
        structures=repositories.schema_structures,
        schema_fields=repositories.schema_fields,
        policy=policy or ReconcilePolicy(),
    )
    return reconciler, asset_guid


def _field_guids(catalog: InMemoryCatalog, structure_guid: str) -> dict[str, str]:
    return {field.qualified_name: field.guid for field in catalog.fields_of(structure_guid)}


def test_schema_is_created_and_attached(memory_catalog: InMemoryCatalog) -> None:
    reconciler, asset_guid = _setup(memory_catalog)
    asset = make_asset("kafka.orders", schema=make_schema("S1", ("a", "b"), display_name="Orders"))

    outcome = reconciler.reconcile(asset, asset_guid)

    assert outcome.action is UpsertAction.CREATED
    assert outcome.fields_created == 2
    structure = memory_catalog.structures[outcome.structure_guid]
    assert structure.owner_guid == asset_guid
    assert structure.properties.type_name == "EventType"
    assert structure.properties.display_name == "Orders"
    fields = memory_catalog.fields_of(outcome.structure_guid)
    assert sorted(
        (field.properties for field in fields), key=lambda props: props.qualified_name
    ) == [
        SchemaFieldProperties(qualified_name="S1.a", display_name="a", type_name="string"),
        SchemaFieldProperties(qualified_name="S1.b", display_name="b", type_name="string"),
    ]


def test_schema_type_name_follows_policy(memory_catalog: InMemoryCatalog) -> None:
    reconciler, asset_guid = _setup(memory_catalog, ReconcilePolicy(schema_type_name="AvroSchema"))

    outcome = reconciler.reconcile(make_asset("kafka.orders", schema=make_schema("S1")), asset_guid)

    assert memory_catalog.structures[outcome.structure_guid].properties.type_name == "AvroSchema"


def test_same_schema_name_updates_fields_in_place(memory_catalog: InMemoryCatalog) -> None:
    reconciler, asset_guid = _setup(memory_catalog)
    first = reconciler.reconcile(
        make_asset("kafka.orders", schema=make_schema("S1", ("A", "B", "C"))), asset_guid
    )
    before = _field_guids(memory_catalog, first.structure_guid)

    second = reconciler.reconcile(
        make_asset("kafka.orders", schema=make_schema("S1", ("B", "C", "D"))), asset_guid
    )

    assert second.action is UpsertAction.UPDATED
    assert second.structure_guid == first.structure_guid
    assert (second.fields_deleted, second.fields_updated, second.fields_created) == (1, 2, 1)
    after = _field_guids(memory_catalog, second.structure_guid)
    assert set(after) == {"S1.B", "S1.C", "S1.D"}
    assert after["S1.B"] == before["S1.B"]
    assert after["S1.C"] == before["S1.C"]
    assert before["S1.A"] not in memory_catalog.schema_fields


def test_in_place_update_stores_changed_field_type_and_description(
    memory_catalog: InMemoryCatalog,
) -> None:
    reconciler, asset_guid = _setup(memory_catalog)
    first = reconciler.reconcile(
        make_asset("kafka.orders", schema=make_schema("S1", ("A", "B"))), asset_guid
    )
    before = _field_guids(memory_catalog, first.structure_guid)
    changed = SchemaDescriptor(
        qualified_name="S1",
        fields=(
            make_field("A", schema="S1"),
            make_field("B", schema="S1", type_name="long", description="Order total in cents"),
        ),
    )

    second = reconciler.reconcile(make_asset("kafka.orders", schema=changed), asset_guid)

    assert second.action is UpsertAction.UPDATED
    assert (second.fields_deleted, second.fields_created) == (0, 0)
    assert _field_guids(memory_catalog, second.structure_guid) == before
    stored = memory_catalog.schema_fields[before["S1.B"]].properties
    assert stored == SchemaFieldProperties(
        qualified_name="S1.B",
        display_name="B",
        type_name="long",
        description="Order total in cents",
    )
    untouched = memory_catalog.schema_fields[before["S1.A"]].properties
    assert (untouched.type_name, untouched.description) == ("string", None)


def test_changed_schema_name_replaces_structure(memory_catalog: InMemoryCatalog) -> None:
    reconciler, asset_guid = _setup(memory_catalog)
    first = reconciler.reconcile(
        make_asset("kafka.orders", schema=make_schema("S1", ("a", "b"))), asset_guid
    )
    old_fields = _field_guids(memory_catalog, first.structure_guid)

    second = reconciler.reconcile(
        make_asset("kafka.orders", schema=make_schema("S2", ("a", "b"))), asset_guid
    )

    assert second.action is UpsertAction.REPLACED
    assert second.structure_guid != first.structure_guid
    assert first.structure_guid not in memory_catalog.structures
    assert all(guid not in memory_catalog.schema_fields for guid in old_fields.values())
    assert set(_field_guids(memory_catalog, second.structure_guid)) == {"S2.a", "S2.b"}
    assert len(memory_catalog.schema_fields) == 2


def test_replacement_deletes_fields_when_catalog_does_not_cascade() -> None:
    catalog = InMemoryCatalog(cascade_deletes=False)
    reconciler, asset_guid = _setup(catalog, ReconcilePolicy(cascading_structure_delete=False))
    reconciler.reconcile(make_asset("kafka.orders", schema=make_schema("S1", ("a", "b"))), asset_guid)

    outcome = reconciler.reconcile(
        make_asset("kafka.orders", schema=make_schema("S2", ("c",))), asset_guid
    )

    assert outcome.fields_deleted == 2
    assert [field.qualified_name for field in catalog.schema_fields.values()] == ["S2.c"]


def test_cascade_assumption_against_non_cascading_catalog_leaves_orphans() -> None:
    catalog = InMemoryCatalog(cascade_deletes=False)
    reconciler, asset_guid = _setup(catalog)
    first = reconciler.reconcile(
        make_asset("kafka.orders", schema=make_schema("S1", ("a",))), asset_guid
    )

    reconciler.reconcile(make_asset("kafka.orders", schema=make_schema("S2", ("b",))), asset_guid)

    orphans = [
        field for field in catalog.schema_fields.values()
        if field.structure_guid == first.structure_guid
    ]
    assert [field.qualified_name for field in orphans] == ["S1.a"]


def test_skip_unchanged_fields_avoids_rewrites(memory_catalog: InMemoryCatalog) -> None:
    reconciler, asset_guid = _setup(memory_catalog, ReconcilePolicy(skip_unchanged_fields=True))
    asset = make_asset("kafka.orders", schema=make_schema("S1", ("a", "b")))
    reconciler.reconcile(asset, asset_guid)

    outcome = reconciler.reconcile(asset, asset_guid)

    assert (outcome.fields_deleted, outcome.fields_updated, outcome.fields_created) == (0, 0, 0)


def test_asset_without_schema_is_rejected(memory_catalog: InMemoryCatalog) -> None:
    reconciler, asset_guid = _setup(memory_catalog)

    with pytest.raises(ValueError, match=r"kafka\.orders"):
        reconciler.reconcile(make_asset("kafka.orders"), asset_guid)


def test_asset_type_mismatch_surfaces_catalog_error(memory_catalog: InMemoryCatalog) -> None:
    reconciler, asset_guid = _setup(memory_catalog)

    with pytest.raises(InvalidParameterError):
        reconciler.reconcile(
            make_asset("kafka.orders", type_name="Table", schema=make_schema("S1")), asset_guid
        )
