from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

import pytest

from caseflow.adapters.sqlalchemy import (
    SqlAlchemyCaseUnitOfWork,
    StartupError,
    configured_engine,
    is_started,
    shutdown,
    startup,
)
from caseflow.domain.audit import AuditRecorder
from caseflow.domain.documents import DocumentChanges, DocumentService
from caseflow.domain.errors import StoreError
from caseflow.domain.model import ActionType, CaseDocumentInput, DocumentStatus
from caseflow.domain.reconciliation import DocumentReconciler, ReconciliationApplier
from tests.helpers.catalog import BASE_TIME, sample_catalog
from tests.helpers.fakes import InMemoryFileStorage

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

    from caseflow.domain.model import Actor

type UnitOfWorkFactory = Callable[[], SqlAlchemyCaseUnitOfWork]


def test_unit_of_work_requires_startup() -> None:
    shutdown()

    assert not is_started()
    with pytest.raises(StartupError):
        SqlAlchemyCaseUnitOfWork()


def test_startup_refuses_to_reconfigure_without_force(
    sqlite_engine: Engine,
    sqlite_unit_of_work: UnitOfWorkFactory,
) -> None:
    assert configured_engine() is sqlite_engine

    with pytest.raises(StartupError, match="already initialised"):
        startup(engine=sqlite_engine)


def test_uncommitted_work_is_rolled_back(sqlite_unit_of_work: UnitOfWorkFactory) -> None:
    template = sample_catalog().get("P1")
    assert template is not None

    with sqlite_unit_of_work() as uow:
        uow.repositories.documents.create_many(
            "case-1", [CaseDocumentInput.from_template(template)], now=BASE_TIME
        )

    with sqlite_unit_of_work() as uow:
        assert uow.repositories.documents.list("case-1") == []


def test_repositories_need_an_open_session(sqlite_unit_of_work: UnitOfWorkFactory) -> None:
    uow = sqlite_unit_of_work()

    with pytest.raises(StartupError):
        _ = uow.repositories


def test_duplicate_template_link_surfaces_as_store_error(
    sqlite_unit_of_work: UnitOfWorkFactory,
) -> None:
    template = sample_catalog().get("P1")
    assert template is not None
    data = CaseDocumentInput.from_template(template)

    with sqlite_unit_of_work() as uow:
        uow.repositories.documents.create_many("case-1", [data], now=BASE_TIME)
        uow.commit()

    with pytest.raises(StoreError), sqlite_unit_of_work() as uow:
        uow.repositories.documents.create_many("case-1", [data], now=BASE_TIME)
        uow.commit()

    with sqlite_unit_of_work() as uow:
        assert len(uow.repositories.documents.list("case-1")) == 1


def test_reconciliation_against_sqlite(
    sqlite_unit_of_work: UnitOfWorkFactory,
    actor: Actor,
) -> None:
    recorder = AuditRecorder(sqlite_unit_of_work)
    file_storage = InMemoryFileStorage()
    reconciler = DocumentReconciler(
        catalog=sample_catalog(),
        unit_of_work_factory=sqlite_unit_of_work,
        applier=ReconciliationApplier(
            unit_of_work_factory=sqlite_unit_of_work,
            recorder=recorder,
            file_storage=file_storage,
        ),
    )

    first = reconciler.reconcile_preset("case-1", "work", actor)
    second = reconciler.reconcile_preset("case-1", "renewal", actor)
    third = reconciler.reconcile_preset("case-1", "renewal", actor)

    assert (first.added, first.removed) == (3, 0)
    assert (second.added, second.removed) == (1, 2)
    assert third.plan.is_empty
    assert reconciler.snapshot("case-1").revision == 3
    documents = reconciler.snapshot("case-1").documents
    assert {doc.template_id for doc in documents} == {"P1", "G1"}
    assert [entry.action_type for entry in recorder.history("case-1")] == [
        ActionType.DOCUMENTS_BULK_CREATED,
        ActionType.DOCUMENTS_BULK_CREATED,
        ActionType.DOCUMENTS_BULK_DELETED,
    ]


def test_document_service_against_sqlite(
    sqlite_unit_of_work: UnitOfWorkFactory,
    actor: Actor,
) -> None:
    recorder = AuditRecorder(sqlite_unit_of_work)
    service = DocumentService(unit_of_work_factory=sqlite_unit_of_work, recorder=recorder)
    template = sample_catalog().get("G1")
    assert template is not None

    document = service.create_document(
        "case-1", CaseDocumentInput.from_template(template), actor
    )
    service.update_document(
        "case-1", document.id, DocumentChanges(status=DocumentStatus.WAITING), actor
    )
    service.delete_document("case-1", document.id, actor)

    assert service.list_documents("case-1") == ()
    history = recorder.history("case-1")
    assert [entry.action_type for entry in history] == [
        ActionType.DOCUMENT_CREATED,
        ActionType.DOCUMENT_UPDATED,
        ActionType.DOCUMENT_DELETED,
    ]
    assert history[1].details["status"] == {"old_value": "not_started", "new_value": "waiting"}
