"""Apply a reconciliation plan to a case in two atomic phases.

Phase one commits every addition in a single unit of work, phase two every
removal in a second one. Each committed phase is followed by its audit entry and,
for removals, by releasing the removed documents' files. Those follow-up effects
are best effort: their failures are logged and counted in the result but never
undo or fail the committed phase.
"""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from caseflow.domain.audit import record_best_effort
from caseflow.domain.errors import StorageReleaseError, StoreError
from caseflow.domain.model import ActionType, CaseDocumentInput, utcnow

if TYPE_CHECKING:
    from collections.abc import Sequence

    from caseflow.domain.audit import AuditRecorder
    from caseflow.domain.model import Actor, CaseDocument, Clock, DocumentTemplate
    from caseflow.domain.ports import CaseUnitOfWorkFactory, FileStorage

    from .plan import ReconciliationPlan

log = getLogger(__name__)

# Number of document names quoted in a bulk-deletion audit entry.
REMOVAL_NAMES_IN_AUDIT = 5


@dataclass(slots=True)
class ApplyResult:
    """Summary of what one ``apply`` call changed."""

    added: int = 0
    removed: int = 0
    created: tuple[CaseDocument, ...] = ()
    revision: int | None = None
    audit_failures: int = 0
    released_files: int = 0
    orphaned_files: tuple[str, ...] = ()


class ReconciliationApplier:
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

    def apply(
        self,
        case_id: str,
        plan: ReconciliationPlan,
        actor: Actor,
        *,
        expected_revision: int | None = None,
    ) -> ApplyResult:
        """Execute ``plan`` against ``case_id``.

        With ``expected_revision`` set, the first writing phase fails with
        ``ConcurrentModificationError`` if the case changed since it was read.
        """

        result = ApplyResult(revision=expected_revision)
        if plan.is_empty:
            log.debug("Nothing to reconcile for case %s", case_id)
            return result

        revision = expected_revision
        if plan.to_add:
            created, revision = self._add(case_id, plan.to_add, expected_revision=revision)
            result.created = created
            result.added = len(created)
            result.revision = revision
            if not self._record_additions(case_id, created, actor):
                result.audit_failures += 1

        if plan.to_remove:
            removed, revision = self._remove(case_id, plan.to_remove, expected_revision=revision)
            result.removed = len(removed)
            result.revision = revision
            if not self._record_removals(case_id, removed, actor):
                result.audit_failures += 1
            released, orphaned = self._release_files(removed)
            result.released_files = released
            result.orphaned_files = orphaned

        log.info(
            "Reconciled case %s: added=%s removed=%s revision=%s",
            case_id,
            result.added,
            result.removed,
            result.revision,
        )
        return result

    def _add(
        self,
        case_id: str,
        templates: Sequence[DocumentTemplate],
        *,
        expected_revision: int | None,
    ) -> tuple[tuple[CaseDocument, ...], int]:
        inputs = [CaseDocumentInput.from_template(template) for template in templates]
        try:
            with self._unit_of_work_factory() as uow:
                revision = uow.repositories.revisions.advance(case_id, expected=expected_revision)
                created = uow.repositories.documents.create_many(
                    case_id, inputs, now=self._clock()
                )
                uow.commit()
        except StoreError:
            log.error("Adding %s documents to case %s failed", len(inputs), case_id)
            raise
        return tuple(created), revision

    def _remove(
        self,
        case_id: str,
        documents: Sequence[CaseDocument],
        *,
        expected_revision: int | None,
    ) -> tuple[tuple[CaseDocument, ...], int]:
        try:
            with self._unit_of_work_factory() as uow:
                revision = uow.repositories.revisions.advance(case_id, expected=expected_revision)
                present = {document.id for document in uow.repositories.documents.list(case_id)}
                removed = tuple(document for document in documents if document.id in present)
                uow.repositories.documents.delete_many(
                    case_id, [document.id for document in removed]
                )
                uow.commit()
        except StoreError:
            log.error("Removing %s documents from case %s failed", len(documents), case_id)
            raise
        if len(removed) != len(documents):
            log.warning(
                "Case %s: %s of %s documents were already gone",
                case_id,
                len(documents) - len(removed),
                len(documents),
            )
        return removed, revision

    def _release_files(self, documents: Sequence[CaseDocument]) -> tuple[int, tuple[str, ...]]:
        released = 0
        orphaned: list[str] = []
        for document in documents:
            if document.file_ref is None:
                continue
            if self._file_storage is None:
                log.warning("No file storage configured; %s left orphaned", document.file_ref)
                orphaned.append(document.file_ref)
                continue
            try:
                self._file_storage.release(document.file_ref)
            except StorageReleaseError:
                log.warning("File %s left orphaned", document.file_ref, exc_info=True)
                orphaned.append(document.file_ref)
            except Exception:  # noqa: BLE001
                log.exception("Releasing file %s failed unexpectedly", document.file_ref)
                orphaned.append(document.file_ref)
            else:
                released += 1
        return released, tuple(orphaned)

    def _record_additions(
        self,
        case_id: str,
        created: Sequence[CaseDocument],
        actor: Actor,
    ) -> bool:
        entry_id = record_best_effort(
            self._recorder,
            case_id,
            ActionType.DOCUMENTS_BULK_CREATED,
            f"Added {len(created)} documents from the catalog",
            {
                "count": len(created),
                "template_ids": [document.template_id or "" for document in created],
                "document_names": [document.name for document in created],
            },
            actor,
        )
        return entry_id is not None

    def _record_removals(
        self,
        case_id: str,
        removed: Sequence[CaseDocument],
        actor: Actor,
    ) -> bool:
        names = [document.name for document in removed[:REMOVAL_NAMES_IN_AUDIT]]
        description = f"Removed {len(removed)} documents"
        if names:
            description = f"{description}: {', '.join(names)}"
        entry_id = record_best_effort(
            self._recorder,
            case_id,
            ActionType.DOCUMENTS_BULK_DELETED,
            description,
            {"count": len(removed), "document_names": names},
            actor,
        )
        return entry_id is not None
