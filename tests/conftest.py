from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine  # noqa: TC002
from sqlalchemy.orm import Session, sessionmaker

from lineage_sync.adapters.memory import InMemoryCatalog
from lineage_sync.adapters.sqlalchemy.migrations import upgrade_head
from lineage_sync.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyCatalogUnitOfWork,
    shutdown,
    startup,
)
from lineage_sync.domain.reconciliation import LineageEventReconciler

os.environ.setdefault("DATABASE_URI", "sqlite+pysqlite:///:memory:")

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

    from lineage_sync.domain.ports import CatalogRepositories

_POLICY_ENV_VARS = (
    "LINEAGE_SYNC_SCHEMA_TYPE_NAME",
    "LINEAGE_SYNC_PROCESS_STATUS",
    "LINEAGE_SYNC_CASCADING_STRUCTURE_DELETE",
    "LINEAGE_SYNC_SKIP_UNCHANGED_FIELDS",
)


@pytest.fixture(autouse=True)
def _clear_policy_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _POLICY_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def memory_catalog() -> InMemoryCatalog:
    return InMemoryCatalog()


@pytest.fixture
def catalog_repositories(memory_catalog: InMemoryCatalog) -> CatalogRepositories:
    return memory_catalog.repositories()


@pytest.fixture
def reconciler(catalog_repositories: CatalogRepositories) -> LineageEventReconciler:
    return LineageEventReconciler.from_repositories(catalog_repositories)


@pytest.fixture
def sqlite_engine() -> Iterator[Engine]:
    engine = create_engine("sqlite+pysqlite:///:memory:", future=True)
    upgrade_head(engine=engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def sqlite_session(sqlite_engine: Engine) -> Iterator[Session]:
    session_factory = sessionmaker(bind=sqlite_engine, future=True)
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def sqlite_unit_of_work(
    sqlite_engine: Engine,
) -> Iterator[Callable[[], SqlAlchemyCatalogUnitOfWork]]:
    startup(engine=sqlite_engine, force=True)

    def factory() -> SqlAlchemyCatalogUnitOfWork:
        return SqlAlchemyCatalogUnitOfWork()

    try:
        yield factory
    finally:
        shutdown()
