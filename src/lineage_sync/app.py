"""Application orchestration entry points."""

from __future__ import annotations

from collections.abc import Callable
from logging import getLogger
from typing import TYPE_CHECKING

from lineage_sync.adapters.events import load_event
from lineage_sync.adapters.memory import InMemoryCatalog, InMemoryUnitOfWork
from lineage_sync.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyCatalogUnitOfWork,
    StartupError,
    configured_engine,
    is_started,
    startup,
)
from lineage_sync.config import get_reconcile_policy
from lineage_sync.domain.ports import CatalogUnitOfWork
from lineage_sync.domain.reconciliation import LineageEventReconciler

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

    from lineage_sync.domain.reconciliation import ReconcilePolicy, ReconcileResult

UnitOfWorkFactory = Callable[[], CatalogUnitOfWork]


log = getLogger(__name__)


def init_catalog_database(*, database_uri: str | None = None) -> str:
    """Create or upgrade the catalog database and return its URL."""

    if not is_started():
        startup(database_uri=database_uri)
    engine = configured_engine()
    if engine is None:
        raise StartupError("Catalog database engine is not configured")
    return engine.url.render_as_string()


def reconcile_event_files(
    paths: Iterable[str | Path],
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    policy: ReconcilePolicy | None = None,
    database_uri: str | None = None,
    dry_run: bool = False,
) -> list[ReconcileResult]:
    """Replay event files in order, committing one unit of work per event.

    Every file is parsed before the catalog is touched, so a malformed file
    aborts the run without writing anything. A reconciliation failure stops at
    that event; events before it stay committed.
    """

    events = [(path, load_event(path)) for path in paths]
    effective_policy = policy or get_reconcile_policy()

    effective_uow = unit_of_work_factory
    if effective_uow is None:
        if dry_run:
            catalog = InMemoryCatalog(cascade_deletes=effective_policy.cascading_structure_delete)
            effective_uow = lambda: InMemoryUnitOfWork(catalog)  # noqa: E731
        else:
            if not is_started():
                startup(database_uri=database_uri)
            effective_uow = SqlAlchemyCatalogUnitOfWork

    log.info(
        "Starting reconciliation: events=%s, dry_run=%s, schema_type=%s",
        len(events),
        dry_run,
        effective_policy.schema_type_name,
    )

    results: list[ReconcileResult] = []
    for path, event in events:
        log.debug("Reconciling %s", path)
        with effective_uow() as uow:
            reconciler = LineageEventReconciler.from_repositories(
                uow.repositories, policy=effective_policy
            )
            results.append(reconciler.reconcile(event))
            uow.commit()

    log.info("Finished reconciliation: reconciled=%s", len(results))
    return results
