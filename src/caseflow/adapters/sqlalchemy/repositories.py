"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import delete, insert, select, update
from sqlalchemy.exc import IntegrityError

from caseflow.adapters.sqlalchemy.mappings import (
    activity_log_table,
    case_document_table,
    case_revision_table,
)
from caseflow.domain.errors import ConcurrentModificationError
from caseflow.domain.model import ActivityLogEntry, CaseDocument

if TYPE_CHECKING:
    from collections.abc import Sequence
    from datetime import datetime
    from uuid import UUID

    from sqlalchemy.orm import Session

    from caseflow.domain.model import CaseDocumentInput, LogSubject


class SqlAlchemyCaseDocumentRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def list(self, case_id: str) -> Sequence[CaseDocument]:
        stmt = (
            select(CaseDocument)
            .where(case_document_table.c.case_id == case_id)
            .order_by(case_document_table.c.created_at, case_document_table.c.name)
        )
        return self.session.execute(stmt).scalars().all()

    def get(self, case_id: str, document_id: UUID) -> CaseDocument | None:
        document = self.session.get(CaseDocument, document_id)
        if document is None or document.case_id != case_id:
            return None
        return document

    def create_many(
        self,
        case_id: str,
        inputs: Sequence[CaseDocumentInput],
        *,
        now: datetime,
    ) -> Sequence[CaseDocument]:
        documents = [CaseDocument.create(case_id, data, now=now) for data in inputs]
        self.session.add_all(documents)
        self.session.flush()
        return documents

    def delete_many(self, case_id: str, document_ids: Sequence[UUID]) -> int:
        if not document_ids:
            return 0
        stmt = (
            delete(CaseDocument)
            .where(case_document_table.c.case_id == case_id)
            .where(case_document_table.c.id.in_(list(document_ids)))
        )
        return self.session.execute(stmt).rowcount

    def update(self, document: CaseDocument) -> None:
        self.session.add(document)
        self.session.flush()


class SqlAlchemyCaseRevisionRepository:
    """Compare-and-swap revision counter, one row per case."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def current(self, case_id: str) -> int:
        stmt = select(case_revision_table.c.revision).where(
            case_revision_table.c.case_id == case_id
        )
        revision = self.session.execute(stmt).scalar_one_or_none()
        return revision or 0

    def advance(self, case_id: str, *, expected: int | None = None) -> int:
        if expected is None:
            expected = self.current(case_id)

        if expected == 0:
            return self._insert_first(case_id)

        stmt = (
            update(case_revision_table)
            .where(case_revision_table.c.case_id == case_id)
            .where(case_revision_table.c.revision == expected)
            .values(revision=expected + 1)
        )
        if self.session.execute(stmt).rowcount != 1:
            raise ConcurrentModificationError(
                case_id, expected=expected, actual=self.current(case_id)
            )
        return expected + 1

    def _insert_first(self, case_id: str) -> int:
        stmt = insert(case_revision_table).values(case_id=case_id, revision=1)
        try:
            self.session.execute(stmt)
        except IntegrityError as exc:
            raise ConcurrentModificationError(case_id, expected=0, actual=None) from exc
        return 1


class SqlAlchemyActivityLogRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def append(self, entry: ActivityLogEntry) -> UUID:
        self.session.add(entry)
        self.session.flush()
        return entry.id

    def list_for(self, subject: LogSubject, subject_id: str) -> Sequence[ActivityLogEntry]:
        stmt = (
            select(ActivityLogEntry)
            .where(activity_log_table.c.subject == subject)
            .where(activity_log_table.c.subject_id == subject_id)
            .order_by(activity_log_table.c.created_at, activity_log_table.c.sequence)
        )
        return self.session.execute(stmt).scalars().all()
