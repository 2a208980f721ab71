"""Application orchestration entry points."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from caseflow.adapters.catalog import load_configured_catalog
from caseflow.adapters.file_storage import build_file_storage
from caseflow.adapters.sqlalchemy.unit_of_work import SqlAlchemyCaseUnitOfWork, is_started, startup
from caseflow.domain.audit import AuditRecorder
from caseflow.domain.documents import DocumentService
from caseflow.domain.errors import ValidationError
from caseflow.domain.reconciliation import DocumentReconciler, ReconciliationApplier
from caseflow.domain.reporting import group_catalog, report_progress

if TYPE_CHECKING:
    from collections.abc import Iterable

    from caseflow.domain.model import ActivityLogEntry, Actor, CaseDocument, DocumentCatalog
    from caseflow.domain.ports import CaseUnitOfWorkFactory, FileStorage
    from caseflow.domain.reconciliation import ReconciliationOutcome, ReconciliationPlan
    from caseflow.domain.reporting import CatalogGroup, ProgressReport


log = getLogger(__name__)


def _default_unit_of_work_factory() -> CaseUnitOfWorkFactory:
    if not is_started():
        startup()
    return SqlAlchemyCaseUnitOfWork


def build_reconciler(
    *,
    catalog: DocumentCatalog | None = None,
    unit_of_work_factory: CaseUnitOfWorkFactory | None = None,
    file_storage: FileStorage | None = None,
) -> DocumentReconciler:
    effective_uow = unit_of_work_factory or _default_unit_of_work_factory()
    applier = ReconciliationApplier(
        unit_of_work_factory=effective_uow,
        recorder=AuditRecorder(effective_uow),
        file_storage=file_storage if file_storage is not None else build_file_storage(),
    )
    return DocumentReconciler(
        catalog=catalog if catalog is not None else load_configured_catalog(),
        unit_of_work_factory=effective_uow,
        applier=applier,
    )


def build_document_service(
    *,
    unit_of_work_factory: CaseUnitOfWorkFactory | None = None,
    file_storage: FileStorage | None = None,
) -> DocumentService:
    effective_uow = unit_of_work_factory or _default_unit_of_work_factory()
    return DocumentService(
        unit_of_work_factory=effective_uow,
        recorder=AuditRecorder(effective_uow),
        file_storage=file_storage if file_storage is not None else build_file_storage(),
    )


def _resolve_selection(
    catalog: DocumentCatalog,
    selected_template_ids: Iterable[str] | None,
    preset: str | None,
) -> tuple[str, ...]:
    if preset is not None and selected_template_ids is not None:
        raise ValidationError("Pass either a preset or explicit template ids, not both")
    if preset is not None:
        return catalog.preset(preset).template_ids
    return tuple(selected_template_ids or ())


def reconcile_case_documents(
    case_id: str,
    actor: Actor,
    *,
    selected_template_ids: Iterable[str] | None = None,
    preset: str | None = None,
    reconciler: DocumentReconciler | None = None,
) -> ReconciliationOutcome:
    """Make the case's template-linked documents match a selection or preset."""

    effective_reconciler = reconciler or build_reconciler()
    selection = _resolve_selection(effective_reconciler.catalog, selected_template_ids, preset)
    log.info(
        "Reconciling case %s against %s selected templates (catalog %s)",
        case_id,
        len(selection),
        effective_reconciler.catalog.version,
    )
    outcome = effective_reconciler.reconcile(case_id, selection, actor)
    log.info(
        "Finished reconciling case %s: added=%s, removed=%s, attempts=%s, audit_failures=%s",
        case_id,
        outcome.added,
        outcome.removed,
        outcome.attempts,
        outcome.result.audit_failures,
    )
    return outcome


def preview_case_reconciliation(
    case_id: str,
    *,
    selected_template_ids: Iterable[str] | None = None,
    preset: str | None = None,
    reconciler: DocumentReconciler | None = None,
) -> ReconciliationPlan:
    effective_reconciler = reconciler or build_reconciler()
    selection = _resolve_selection(effective_reconciler.catalog, selected_template_ids, preset)
    return effective_reconciler.preview(case_id, selection)


def list_case_documents(
    case_id: str,
    *,
    unit_of_work_factory: CaseUnitOfWorkFactory | None = None,
) -> tuple[CaseDocument, ...]:
    effective_uow = unit_of_work_factory or _default_unit_of_work_factory()
    with effective_uow() as uow:
        return tuple(uow.repositories.documents.list(case_id))


def case_progress(
    case_id: str,
    *,
    unit_of_work_factory: CaseUnitOfWorkFactory | None = None,
) -> ProgressReport:
    return report_progress(list_case_documents(case_id, unit_of_work_factory=unit_of_work_factory))


def case_history(
    case_id: str,
    *,
    unit_of_work_factory: CaseUnitOfWorkFactory | None = None,
) -> tuple[ActivityLogEntry, ...]:
    effective_uow = unit_of_work_factory or _default_unit_of_work_factory()
    return AuditRecorder(effective_uow).history(case_id)


def catalog_overview(
    case_id: str | None = None,
    *,
    catalog: DocumentCatalog | None = None,
    unit_of_work_factory: CaseUnitOfWorkFactory | None = None,
) -> tuple[CatalogGroup, ...]:
    """Catalog grouped by category; with a case, counts the templates it already has."""

    effective_catalog = catalog if catalog is not None else load_configured_catalog()
    selected: set[str] = set()
    if case_id is not None:
        documents = list_case_documents(case_id, unit_of_work_factory=unit_of_work_factory)
        selected = {doc.template_id for doc in documents if doc.template_id is not None}
    return group_catalog(effective_catalog, selected)
