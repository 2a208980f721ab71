"""Snapshot, plan and apply a catalog selection for one case.

Each attempt reads the case's documents and revision, plans against that snapshot
and applies with the revision as the expected value. When another writer got in
between, the applier raises ``ConcurrentModificationError`` and the reconciler
starts over from a fresh snapshot. A phase that already committed before the
conflict stays committed; re-planning from the new state simply no longer contains
it.
"""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from caseflow.domain.errors import ConcurrentModificationError, ValidationError

from .plan import ReconciliationPlan, plan_reconciliation

if TYPE_CHECKING:
    from collections.abc import Iterable

    from caseflow.domain.model import Actor, CaseDocument, DocumentCatalog, TemplateId
    from caseflow.domain.ports import CaseUnitOfWorkFactory

    from .apply import ApplyResult, ReconciliationApplier

log = getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 3


@dataclass(frozen=True, slots=True)
class CaseSnapshot:
    case_id: str
    documents: tuple[CaseDocument, ...]
    revision: int


@dataclass(frozen=True, slots=True)
class ReconciliationOutcome:
    plan: ReconciliationPlan
    result: ApplyResult
    attempts: int

    @property
    def added(self) -> int:
        return self.result.added

    @property
    def removed(self) -> int:
        return self.result.removed


class DocumentReconciler:
    """Aligns a case's template-linked documents with a catalog selection."""

    def __init__(
        self,
        *,
        catalog: DocumentCatalog,
        unit_of_work_factory: CaseUnitOfWorkFactory,
        applier: ReconciliationApplier,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.catalog = catalog
        self._unit_of_work_factory = unit_of_work_factory
        self._applier = applier
        self._max_attempts = max_attempts

    def snapshot(self, case_id: str) -> CaseSnapshot:
        with self._unit_of_work_factory() as uow:
            documents = tuple(uow.repositories.documents.list(case_id))
            revision = uow.repositories.revisions.current(case_id)
        return CaseSnapshot(case_id=case_id, documents=documents, revision=revision)

    def preview(
        self,
        case_id: str,
        selected_template_ids: Iterable[TemplateId],
    ) -> ReconciliationPlan:
        selected = self._validated_selection(selected_template_ids)
        return plan_reconciliation(self.catalog, self.snapshot(case_id).documents, selected)

    def reconcile(
        self,
        case_id: str,
        selected_template_ids: Iterable[TemplateId],
        actor: Actor,
    ) -> ReconciliationOutcome:
        selected = self._validated_selection(selected_template_ids)

        attempt = 0
        while True:
            attempt += 1
            snapshot = self.snapshot(case_id)
            plan = plan_reconciliation(self.catalog, snapshot.documents, selected)
            log.info(
                "Case %s reconciliation plan %s (attempt %s, revision %s)",
                case_id,
                plan.summary(),
                attempt,
                snapshot.revision,
            )
            try:
                result = self._applier.apply(
                    case_id,
                    plan,
                    actor,
                    expected_revision=snapshot.revision,
                )
            except ConcurrentModificationError:
                if attempt >= self._max_attempts:
                    log.error("Case %s still conflicting after %s attempts", case_id, attempt)
                    raise
                log.warning("Case %s changed during reconciliation; re-planning", case_id)
                continue
            return ReconciliationOutcome(plan=plan, result=result, attempts=attempt)

    def reconcile_preset(
        self,
        case_id: str,
        preset_key: str,
        actor: Actor,
    ) -> ReconciliationOutcome:
        preset = self.catalog.preset(preset_key)
        return self.reconcile(case_id, preset.template_ids, actor)

    def _validated_selection(self, selected_template_ids: Iterable[TemplateId]) -> frozenset[str]:
        if isinstance(selected_template_ids, str):
            raise ValidationError("Selection must be a collection of template ids, not a string")
        return frozenset(selected_template_ids)
