"""Reconciliation plan: the diff between a case's documents and a catalog selection.

The plan is the contract between the read-only planning step and the applier.
Only template-linked documents participate; ad-hoc documents (no ``template_id``)
are never added or removed by reconciliation.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from caseflow.domain.errors import ValidationError

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from caseflow.domain.model import CaseDocument, DocumentCatalog, DocumentTemplate, TemplateId

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ReconciliationPlan:
    """Templates to instantiate and documents to delete for one case."""

    to_add: tuple[DocumentTemplate, ...] = ()
    to_remove: tuple[CaseDocument, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.to_add and not self.to_remove

    @property
    def added_template_ids(self) -> tuple[TemplateId, ...]:
        return tuple(template.template_id for template in self.to_add)

    @property
    def removed_template_ids(self) -> frozenset[TemplateId]:
        return frozenset(
            document.template_id for document in self.to_remove if document.template_id
        )

    def summary(self) -> str:
        return f"+{len(self.to_add)} / -{len(self.to_remove)}"


def plan_reconciliation(
    catalog: DocumentCatalog,
    current: Sequence[CaseDocument],
    selected_template_ids: Iterable[TemplateId],
) -> ReconciliationPlan:
    """Compute the minimal additions and removals that realise the selection.

    ``to_add`` follows catalog order; ``to_remove`` follows the order of ``current``.
    When several documents share a template id, all of them are removed once the
    template is deselected, and none is added or removed while it stays selected.
    A selected id must name a catalog template or one the case already links to,
    so documents of templates since dropped from the catalog can be kept.
    """

    selected = frozenset(selected_template_ids)
    _require_single_case(current)

    linked_counts = Counter(
        document.template_id for document in current if document.template_id is not None
    )
    catalog.require(selected.difference(linked_counts))
    duplicated = sorted(template_id for template_id, count in linked_counts.items() if count > 1)
    if duplicated:
        log.warning(
            "Case %s has several documents for templates %s",
            current[0].case_id,
            ", ".join(duplicated),
        )

    to_add = tuple(
        template
        for template in catalog
        if template.template_id in selected and template.template_id not in linked_counts
    )
    to_remove = tuple(
        document
        for document in current
        if document.template_id is not None and document.template_id not in selected
    )
    return ReconciliationPlan(to_add=to_add, to_remove=to_remove)


def _require_single_case(documents: Sequence[CaseDocument]) -> None:
    case_ids = {document.case_id for document in documents}
    if len(case_ids) > 1:
        raise ValidationError(
            f"Cannot reconcile documents from several cases: {', '.join(sorted(case_ids))}"
        )
