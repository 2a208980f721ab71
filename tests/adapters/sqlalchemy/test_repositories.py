"""Exercise the SQLAlchemy repositories against an in-memory SQLite database."""

from __future__ import annotations

from datetime import timedelta
from typing import TYPE_CHECKING
from uuid import uuid4

import pytest
from sqlalchemy import inspect

from caseflow.adapters.sqlalchemy import (
    SqlAlchemyActivityLogRepository,
    SqlAlchemyCaseDocumentRepository,
    SqlAlchemyCaseRevisionRepository,
)
from caseflow.domain.errors import ConcurrentModificationError
from caseflow.domain.model import (
    ActionType,
    ActivityLogEntry,
    CaseDocumentInput,
    DocumentCategory,
    DocumentStatus,
    LogSubject,
)
from tests.helpers.catalog import BASE_TIME, make_template, sample_catalog

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine
    from sqlalchemy.orm import Session


def _inputs(*template_ids: str) -> list[CaseDocumentInput]:
    catalog = sample_catalog()
    inputs: list[CaseDocumentInput] = []
    for template_id in template_ids:
        template = catalog.get(template_id)
        assert template is not None
        inputs.append(CaseDocumentInput.from_template(template))
    return inputs


def test_schema_contains_case_tables(sqlite_engine: Engine) -> None:
    tables = set(inspect(sqlite_engine).get_table_names())

    assert {"case_document", "case_revision", "activity_log"} <= tables


def test_documents_round_trip_with_enums_and_utc(sqlite_session: Session) -> None:
    repository = SqlAlchemyCaseDocumentRepository(sqlite_session)
    (created,) = repository.create_many("case-1", _inputs("E1"), now=BASE_TIME)
    sqlite_session.commit()
    sqlite_session.expunge_all()

    loaded = repository.get("case-1", created.id)

    assert loaded is not None
    assert loaded is not created
    assert loaded.category is DocumentCategory.EMPLOYER
    assert loaded.status is DocumentStatus.NOT_STARTED
    assert loaded.template_id == "E1"
    assert loaded.created_at == BASE_TIME
    assert loaded.created_at.tzinfo is not None


def test_get_ignores_documents_of_other_cases(sqlite_session: Session) -> None:
    repository = SqlAlchemyCaseDocumentRepository(sqlite_session)
    (created,) = repository.create_many("case-1", _inputs("P1"), now=BASE_TIME)

    assert repository.get("case-2", created.id) is None
    assert repository.get("case-1", uuid4()) is None


def test_list_orders_by_creation_then_name(sqlite_session: Session) -> None:
    repository = SqlAlchemyCaseDocumentRepository(sqlite_session)
    repository.create_many("case-1", _inputs("P2", "P1"), now=BASE_TIME)
    repository.create_many("case-1", _inputs("E1"), now=BASE_TIME - timedelta(days=1))
    repository.create_many("case-2", _inputs("G1"), now=BASE_TIME)

    names = [document.name for document in repository.list("case-1")]

    assert names == ["Employment contract", "ID photo", "Passport"]


def test_delete_many_only_touches_the_given_case(sqlite_session: Session) -> None:
    repository = SqlAlchemyCaseDocumentRepository(sqlite_session)
    first, second = repository.create_many("case-1", _inputs("P1", "P2"), now=BASE_TIME)
    (other,) = repository.create_many("case-2", _inputs("P1"), now=BASE_TIME)

    removed = repository.delete_many("case-1", [first.id, other.id])

    assert removed == 1
    assert [doc.id for doc in repository.list("case-1")] == [second.id]
    assert [doc.id for doc in repository.list("case-2")] == [other.id]
    assert repository.delete_many("case-1", []) == 0


def test_update_persists_changes(sqlite_session: Session) -> None:
    repository = SqlAlchemyCaseDocumentRepository(sqlite_session)
    (document,) = repository.create_many("case-1", _inputs("P1"), now=BASE_TIME)
    sqlite_session.commit()

    document.status = DocumentStatus.VERIFIED
    document.file_ref = "files/passport.pdf"
    repository.update(document)
    sqlite_session.commit()
    sqlite_session.expunge_all()

    loaded = repository.get("case-1", document.id)
    assert loaded is not None
    assert loaded.status is DocumentStatus.VERIFIED
    assert loaded.file_ref == "files/passport.pdf"


def test_revision_starts_at_zero_and_advances(sqlite_session: Session) -> None:
    revisions = SqlAlchemyCaseRevisionRepository(sqlite_session)

    assert revisions.current("case-1") == 0
    assert revisions.advance("case-1") == 1
    assert revisions.advance("case-1", expected=1) == 2
    assert revisions.advance("case-1") == 3
    assert revisions.current("case-1") == 3
    assert revisions.current("case-2") == 0


def test_revision_compare_and_swap_rejects_stale_value(sqlite_session: Session) -> None:
    revisions = SqlAlchemyCaseRevisionRepository(sqlite_session)
    revisions.advance("case-1")
    revisions.advance("case-1")

    with pytest.raises(ConcurrentModificationError) as excinfo:
        revisions.advance("case-1", expected=1)

    assert (excinfo.value.expected, excinfo.value.actual) == (1, 2)
    assert revisions.current("case-1") == 2


def test_first_revision_cannot_be_claimed_twice(sqlite_session: Session) -> None:
    revisions = SqlAlchemyCaseRevisionRepository(sqlite_session)
    revisions.advance("case-1", expected=0)
    sqlite_session.commit()

    with pytest.raises(ConcurrentModificationError):
        revisions.advance("case-1", expected=0)


def test_activity_log_keeps_insertion_order_for_equal_timestamps(
    sqlite_session: Session,
) -> None:
    repository = SqlAlchemyActivityLogRepository(sqlite_session)
    for index in range(3):
        repository.append(
            ActivityLogEntry(
                subject_id="case-1",
                action_type=ActionType.DOCUMENT_UPDATED,
                description=f"Change {index}",
                details={"status": {"old_value": "not_started", "new_value": "waiting"}},
                performed_by="user-7",
                created_at=BASE_TIME,
            )
        )
    repository.append(
        ActivityLogEntry(
            subject=LogSubject.CUSTOMER,
            subject_id="case-1",
            action_type=ActionType.CUSTOMER_UPDATED,
            description="Other subject",
            performed_by="user-7",
            created_at=BASE_TIME - timedelta(hours=1),
        )
    )
    sqlite_session.commit()
    sqlite_session.expunge_all()

    history = repository.list_for(LogSubject.CASE, "case-1")

    assert [entry.description for entry in history] == ["Change 0", "Change 1", "Change 2"]
    assert history[0].details["status"] == {"old_value": "not_started", "new_value": "waiting"}
    assert history[0].action_type is ActionType.DOCUMENT_UPDATED
    assert all(entry.sequence is not None for entry in history)


def test_ad_hoc_documents_do_not_collide_on_template(sqlite_session: Session) -> None:
    repository = SqlAlchemyCaseDocumentRepository(sqlite_session)
    ad_hoc = CaseDocumentInput.from_template(make_template("T1", name="Letter"))
    ad_hoc = CaseDocumentInput(
        name=ad_hoc.name,
        category=ad_hoc.category,
        source=ad_hoc.source,
        assigned_to=ad_hoc.assigned_to,
    )

    created = repository.create_many("case-1", [ad_hoc, ad_hoc], now=BASE_TIME)

    assert len(created) == 2
    assert all(document.template_id is None for document in created)
