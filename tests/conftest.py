from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine  # noqa: TC002
from sqlalchemy.orm import Session, sessionmaker

from caseflow.adapters.sqlalchemy import start_mappers
from caseflow.adapters.sqlalchemy.migrations import upgrade_head
from caseflow.adapters.sqlalchemy.unit_of_work import SqlAlchemyCaseUnitOfWork, shutdown, startup
from caseflow.domain.audit import AuditRecorder
from caseflow.domain.model import Actor, DocumentCatalog
from caseflow.domain.reconciliation import DocumentReconciler, ReconciliationApplier
from tests.helpers.catalog import sample_catalog
from tests.helpers.clock import StepClock
from tests.helpers.fakes import InMemoryCaseStore, InMemoryFileStorage

os.environ.setdefault("DATABASE_URI", "sqlite+pysqlite:///:memory:")

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator


@pytest.fixture
def actor() -> Actor:
    return Actor(id="user-7", display_name="Aiko Tanaka")


@pytest.fixture
def catalog() -> DocumentCatalog:
    return sample_catalog()


@pytest.fixture
def clock() -> StepClock:
    return StepClock()


@pytest.fixture
def store() -> InMemoryCaseStore:
    return InMemoryCaseStore()


@pytest.fixture
def file_storage() -> InMemoryFileStorage:
    return InMemoryFileStorage()


@pytest.fixture
def recorder(store: InMemoryCaseStore, clock: StepClock) -> AuditRecorder:
    return AuditRecorder(store.factory(), clock=clock)


@pytest.fixture
def applier(
    store: InMemoryCaseStore,
    recorder: AuditRecorder,
    file_storage: InMemoryFileStorage,
    clock: StepClock,
) -> ReconciliationApplier:
    return ReconciliationApplier(
        unit_of_work_factory=store.factory(),
        recorder=recorder,
        file_storage=file_storage,
        clock=clock,
    )


@pytest.fixture
def reconciler(
    catalog: DocumentCatalog,
    store: InMemoryCaseStore,
    applier: ReconciliationApplier,
) -> DocumentReconciler:
    return DocumentReconciler(
        catalog=catalog,
        unit_of_work_factory=store.factory(),
        applier=applier,
    )


@pytest.fixture
def sqlite_engine() -> Iterator[Engine]:
    engine = create_engine("sqlite+pysqlite:///:memory:", future=True)
    start_mappers()
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
) -> Iterator[Callable[[], SqlAlchemyCaseUnitOfWork]]:
    startup(engine=sqlite_engine, force=True)

    def factory() -> SqlAlchemyCaseUnitOfWork:
        return SqlAlchemyCaseUnitOfWork()

    try:
        yield factory
    finally:
        shutdown()
