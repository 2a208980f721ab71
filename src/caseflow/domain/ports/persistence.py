"""Ports for persisting case documents, revisions and activity logs."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence
    from datetime import datetime
    from uuid import UUID

    from caseflow.domain.model import (
        ActivityLogEntry,
        CaseDocument,
        CaseDocumentInput,
        LogSubject,
    )


@runtime_checkable
class CaseDocumentRepository(Protocol):
    """Persistence contract for the documents attached to cases."""

    def list(self, case_id: str) -> Sequence[CaseDocument]:
        """Return the case's documents ordered by creation time."""
        ...

    def get(self, case_id: str, document_id: UUID) -> CaseDocument | None: ...

    def create_many(
        self,
        case_id: str,
        inputs: Sequence[CaseDocumentInput],
        *,
        now: datetime,
    ) -> Sequence[CaseDocument]: ...

    def delete_many(self, case_id: str, document_ids: Sequence[UUID]) -> int:
        """Delete the given documents and return how many rows were removed."""
        ...

    def update(self, document: CaseDocument) -> None: ...


@runtime_checkable
class CaseRevisionRepository(Protocol):
    """Per-case revision counter used for optimistic concurrency."""

    def current(self, case_id: str) -> int: ...

    def advance(self, case_id: str, *, expected: int | None = None) -> int:
        """Bump the revision, failing if it no longer equals ``expected``."""
        ...


@runtime_checkable
class ActivityLogRepository(Protocol):
    """Append-only store for activity log entries."""

    def append(self, entry: ActivityLogEntry) -> UUID: ...

    def list_for(self, subject: LogSubject, subject_id: str) -> Sequence[ActivityLogEntry]:
        """Return entries oldest first, ties broken by insertion order."""
        ...
