from __future__ import annotations

import pytest

from lineage_sync.adapters.memory import InMemoryCatalog
from lineage_sync.domain.errors import (
    CatalogErrorKind,
    CatalogServerError,
    ReconciliationError,
)
from lineage_sync.domain.reconciliation import (
    LineageEventReconciler,
    ReconcileStep,
    reconcile_event,
)
from tests.helpers.events import (
    FailingAssetRepository,
    FailingDataFlowRepository,
    make_orders_event,
)


def _counts(catalog: InMemoryCatalog) -> tuple[int, int, int, int, int]:
    return (
        len(catalog.assets),
        len(catalog.processes),
        len(catalog.structures),
        len(catalog.schema_fields),
        len(catalog.data_flows),
    )


def test_reconcile_builds_full_lineage(
    memory_catalog: InMemoryCatalog,
    reconciler: LineageEventReconciler,
) -> None:
    result = reconciler.reconcile(make_orders_event())

    assert _counts(memory_catalog) == (3, 1, 1, 3, 3)
    assert len(result.input_asset_guids) == 2
    assert len(result.output_asset_guids) == 1
    assert result.process_guid in memory_catalog.processes
    [structure] = memory_catalog.structures.values()
    assert structure.owner_guid == result.output_asset_guids[0]


def test_reconcile_is_idempotent(
    memory_catalog: InMemoryCatalog,
    reconciler: LineageEventReconciler,
) -> None:
    event = make_orders_event()
    first = reconciler.reconcile(event)
    snapshot = memory_catalog.snapshot()

    second = reconciler.reconcile(event)

    assert second.input_asset_guids == first.input_asset_guids
    assert second.output_asset_guids == first.output_asset_guids
    assert second.lineage.input_edge_guids == first.lineage.input_edge_guids
    assert second.lineage.output_edge_guids == first.lineage.output_edge_guids
    assert memory_catalog.assets == snapshot.assets
    assert memory_catalog.processes == snapshot.processes
    assert memory_catalog.structures == snapshot.structures
    assert memory_catalog.schema_fields == snapshot.schema_fields
    assert memory_catalog.data_flows == snapshot.data_flows


def test_reconcile_event_helper_uses_fresh_engine(memory_catalog: InMemoryCatalog) -> None:
    result = reconcile_event(make_orders_event(), repositories=memory_catalog.repositories())

    assert result.process_guid in memory_catalog.processes


def test_catalog_failure_aborts_event_and_keeps_earlier_steps(
    memory_catalog: InMemoryCatalog,
) -> None:
    repositories = memory_catalog.repositories()
    repositories.data_flows = FailingDataFlowRepository(memory_catalog)
    reconciler = LineageEventReconciler.from_repositories(repositories)

    with pytest.raises(ReconciliationError) as excinfo:
        reconciler.reconcile(make_orders_event())

    error = excinfo.value
    assert error.step == ReconcileStep.LINEAGE
    assert isinstance(error.cause, CatalogServerError)
    assert error.__cause__ is error.cause
    assert error.kind is CatalogErrorKind.SERVER_FAILURE
    assert _counts(memory_catalog) == (3, 1, 1, 3, 0)


def test_replay_after_failure_converges(memory_catalog: InMemoryCatalog) -> None:
    failing = memory_catalog.repositories()
    failing.data_flows = FailingDataFlowRepository(memory_catalog)
    event = make_orders_event()
    with pytest.raises(ReconciliationError):
        LineageEventReconciler.from_repositories(failing).reconcile(event)

    LineageEventReconciler.from_repositories(memory_catalog.repositories()).reconcile(event)

    assert _counts(memory_catalog) == (3, 1, 1, 3, 3)


def test_failure_in_input_assets_names_the_step(memory_catalog: InMemoryCatalog) -> None:
    repositories = memory_catalog.repositories()
    repositories.assets = FailingAssetRepository(memory_catalog)
    reconciler = LineageEventReconciler.from_repositories(repositories)

    with pytest.raises(ReconciliationError) as excinfo:
        reconciler.reconcile(make_orders_event())

    assert excinfo.value.step == ReconcileStep.INPUT_ASSETS
    assert "jobs.enrich-orders" in str(excinfo.value)
    assert _counts(memory_catalog) == (0, 0, 0, 0, 0)


def test_changed_output_schema_converges_on_replay(
    memory_catalog: InMemoryCatalog,
    reconciler: LineageEventReconciler,
) -> None:
    reconciler.reconcile(make_orders_event(output_fields=("id", "amount", "customer")))

    reconciler.reconcile(make_orders_event(output_fields=("id", "total")))

    names = sorted(field.qualified_name for field in memory_catalog.schema_fields.values())
    assert names == ["enriched-orders-v1.id", "enriched-orders-v1.total"]
    assert len(memory_catalog.data_flows) == 3
