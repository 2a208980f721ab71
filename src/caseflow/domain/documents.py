"""Application services for individual case documents.

These are the ad-hoc counterparts of reconciliation: creating documents by hand,
editing them, attaching files and deleting them one by one. Every operation runs
its main effect in one unit of work and records its activity log entry afterwards,
best effort.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from logging import getLogger
from typing import TYPE_CHECKING

from caseflow.domain.audit import (
    DOCUMENT_FIELDS,
    describe_changes,
    diff_snapshots,
    record_best_effort,
    snapshot,
)
from caseflow.domain.errors import (
    DocumentNotFoundError,
    DuplicateTemplateError,
    StorageReleaseError,
    ValidationError,
)
from caseflow.domain.model import (
    ActionType,
    Assignee,
    CaseDocument,
    DocumentCategory,
    DocumentSource,
    DocumentStatus,
    utcnow,
)
from caseflow.domain.model.document import coerce_enum

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID

    from caseflow.domain.audit import AuditRecorder
    from caseflow.domain.model import Actor, CaseDocumentInput, Clock
    from caseflow.domain.ports import CaseRepositories, CaseUnitOfWorkFactory, FileStorage

log = getLogger(__name__)


@dataclass(frozen=True, slots=True, kw_only=True)
class DocumentChanges:
    """Partial update; ``None`` leaves a field untouched."""

    name: str | None = None
    description: str | None = None
    category: DocumentCategory | None = None
    source: DocumentSource | None = None
    assigned_to: Assignee | None = None
    status: DocumentStatus | None = None
    is_original_required: bool | None = None
    notes: str | None = None

    def is_empty(self) -> bool:
        return all(getattr(self, item.name) is None for item in fields(self))


class DocumentService:
    def __init__(
        self,
        *,
        unit_of_work_factory: CaseUnitOfWorkFactory,
        recorder: AuditRecorder,
        file_storage: FileStorage | None = None,
        clock: Clock = utcnow,
    ) -> None:
        self._unit_of_work_factory = unit_of_work_factory
        self._recorder = recorder
        self._file_storage = file_storage
        self._clock = clock

    def list_documents(self, case_id: str) -> tuple[CaseDocument, ...]:
        with self._unit_of_work_factory() as uow:
            return tuple(uow.repositories.documents.list(case_id))

    def create_document(
        self,
        case_id: str,
        data: CaseDocumentInput,
        actor: Actor,
    ) -> CaseDocument:
        document_input = data.normalized()
        with self._unit_of_work_factory() as uow:
            repositories = uow.repositories
            _reject_linked_duplicates(case_id, [document_input], repositories)
            repositories.revisions.advance(case_id)
            (document,) = repositories.documents.create_many(
                case_id, [document_input], now=self._clock()
            )
            uow.commit()

        record_best_effort(
            self._recorder,
            case_id,
            ActionType.DOCUMENT_CREATED,
            f"Created document '{document.name}'",
            {"document_id": str(document.id), "document_name": document.name},
            actor,
        )
        return document

    def bulk_create_documents(
        self,
        case_id: str,
        inputs: Sequence[CaseDocumentInput],
        actor: Actor,
    ) -> tuple[CaseDocument, ...]:
        """Create several documents as one batch.

        Items are validated up front; the first invalid one is reported by its
        1-based position and nothing is written.
        """

        if not inputs:
            raise ValidationError("No documents selected")
        normalized: list[CaseDocumentInput] = []
        for position, item in enumerate(inputs, start=1):
            try:
                normalized.append(item.normalized())
            except ValidationError as exc:
                raise ValidationError(f"Document #{position}: {exc}") from exc

        with self._unit_of_work_factory() as uow:
            repositories = uow.repositories
            _reject_linked_duplicates(case_id, normalized, repositories)
            repositories.revisions.advance(case_id)
            created = tuple(
                repositories.documents.create_many(case_id, normalized, now=self._clock())
            )
            uow.commit()

        record_best_effort(
            self._recorder,
            case_id,
            ActionType.DOCUMENTS_BULK_CREATED,
            f"Added {len(created)} documents",
            {"count": len(created), "document_names": [document.name for document in created]},
            actor,
        )
        return created

    def update_document(
        self,
        case_id: str,
        document_id: UUID,
        changes: DocumentChanges,
        actor: Actor,
    ) -> CaseDocument:
        with self._unit_of_work_factory() as uow:
            document = _require_document(uow.repositories, case_id, document_id)
            before = snapshot(document, DOCUMENT_FIELDS)
            _apply_changes(document, changes)
            after = snapshot(document, DOCUMENT_FIELDS)
            diff = diff_snapshots(before, after, DOCUMENT_FIELDS)
            if not diff.changed:
                log.debug("Document %s unchanged; nothing to write", document_id)
                return document
            document.updated_at = self._clock()
            uow.repositories.documents.update(document)
            uow.commit()

        record_best_effort(
            self._recorder,
            case_id,
            ActionType.DOCUMENT_UPDATED,
            describe_changes(diff.labels, fallback=f"Updated document '{document.name}'"),
            diff.as_details(document_id=str(document.id), document_name=document.name),
            actor,
        )
        return document

    def attach_file(
        self,
        case_id: str,
        document_id: UUID,
        file_ref: str,
        actor: Actor,
        *,
        file_name: str | None = None,
    ) -> CaseDocument:
        """Point a document at an uploaded file, releasing the file it replaces."""

        if not file_ref.strip():
            raise ValidationError("File reference must not be blank")
        with self._unit_of_work_factory() as uow:
            document = _require_document(uow.repositories, case_id, document_id)
            replaced = document.file_ref
            document.file_ref = file_ref
            document.updated_at = self._clock()
            uow.repositories.documents.update(document)
            uow.commit()

        shown_name = file_name or file_ref
        record_best_effort(
            self._recorder,
            case_id,
            ActionType.DOCUMENT_FILE_UPLOADED,
            f"Uploaded '{shown_name}' to document '{document.name}'",
            {
                "document_id": str(document.id),
                "document_name": document.name,
                "file_name": shown_name,
            },
            actor,
        )

        if replaced is not None and replaced != file_ref:
            self._release(replaced)
        return document

    def delete_document(self, case_id: str, document_id: UUID, actor: Actor) -> None:
        with self._unit_of_work_factory() as uow:
            document = _require_document(uow.repositories, case_id, document_id)
            name = document.name
            file_ref = document.file_ref
            uow.repositories.revisions.advance(case_id)
            uow.repositories.documents.delete_many(case_id, [document_id])
            uow.commit()

        record_best_effort(
            self._recorder,
            case_id,
            ActionType.DOCUMENT_DELETED,
            f"Deleted document '{name}'",
            {"document_id": str(document_id), "document_name": name},
            actor,
        )

        if file_ref is not None:
            self._release(file_ref)

    def _release(self, file_ref: str) -> bool:
        if self._file_storage is None:
            log.warning("No file storage configured; %s left orphaned", file_ref)
            return False
        try:
            self._file_storage.release(file_ref)
        except StorageReleaseError:
            log.warning("File %s left orphaned", file_ref, exc_info=True)
            return False
        except Exception:  # noqa: BLE001
            log.exception("Releasing file %s failed unexpectedly", file_ref)
            return False
        return True


def _require_document(
    repositories: CaseRepositories,
    case_id: str,
    document_id: UUID,
) -> CaseDocument:
    document = repositories.documents.get(case_id, document_id)
    if document is None:
        raise DocumentNotFoundError(f"Document {document_id} not found in case {case_id}")
    return document


def _reject_linked_duplicates(
    case_id: str,
    inputs: Sequence[CaseDocumentInput],
    repositories: CaseRepositories,
) -> None:
    template_ids = [item.template_id for item in inputs if item.template_id is not None]
    if not template_ids:
        return
    seen = {
        document.template_id
        for document in repositories.documents.list(case_id)
        if document.template_id is not None
    }
    for template_id in template_ids:
        if template_id in seen:
            raise DuplicateTemplateError(case_id, template_id)
        seen.add(template_id)


def _apply_changes(document: CaseDocument, changes: DocumentChanges) -> None:
    if changes.name is not None:
        name = changes.name.strip()
        if not name:
            raise ValidationError("Document name is required")
        document.name = name
    if changes.description is not None:
        document.description = changes.description.strip() or None
    if changes.category is not None:
        document.category = coerce_enum(DocumentCategory, changes.category, "category")
    if changes.source is not None:
        document.source = coerce_enum(DocumentSource, changes.source, "source")
    if changes.assigned_to is not None:
        document.assigned_to = coerce_enum(Assignee, changes.assigned_to, "assigned_to")
    if changes.status is not None:
        document.status = coerce_enum(DocumentStatus, changes.status, "status")
    if changes.is_original_required is not None:
        document.is_original_required = changes.is_original_required
    if changes.notes is not None:
        document.notes = changes.notes.strip() or None
