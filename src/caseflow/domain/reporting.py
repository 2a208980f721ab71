"""Read-only progress and grouping views over document sets and the catalog."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from caseflow.domain.model import CATEGORY_ORDER, DocumentCategory, DocumentStatus

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from caseflow.domain.model import CaseDocument, DocumentCatalog, DocumentTemplate, TemplateId


@dataclass(frozen=True, slots=True)
class CategoryProgress:
    category: DocumentCategory
    completed: int
    total: int

    @property
    def percentage(self) -> float:
        return completion_percentage(self.completed, self.total)


@dataclass(frozen=True, slots=True)
class ProgressReport:
    """Documents grouped by category in display order, plus completion counts."""

    by_category: dict[DocumentCategory, tuple[CaseDocument, ...]]
    completed: int
    total: int
    percentage: float

    def for_category(self, category: DocumentCategory) -> CategoryProgress:
        documents = self.by_category.get(category, ())
        return CategoryProgress(
            category=category,
            completed=sum(1 for document in documents if is_completed(document)),
            total=len(documents),
        )


@dataclass(frozen=True, slots=True)
class CatalogGroup:
    """Catalog templates of one category with how many of them are selected."""

    category: DocumentCategory
    templates: tuple[DocumentTemplate, ...]
    selected: int

    @property
    def total(self) -> int:
        return len(self.templates)


def completion_percentage(completed: int, total: int) -> float:
    if total <= 0:
        return 0.0
    return min(100.0, max(0.0, completed / total * 100))


def category_of(value: object) -> DocumentCategory:
    """Map a stored category onto the fixed set; anything unknown counts as other."""

    try:
        return DocumentCategory(value)
    except ValueError:
        return DocumentCategory.OTHER


def is_completed(document: CaseDocument) -> bool:
    try:
        return DocumentStatus(document.status).is_done
    except ValueError:
        return False


def report_progress(documents: Sequence[CaseDocument]) -> ProgressReport:
    grouped: dict[DocumentCategory, list[CaseDocument]] = {
        category: [] for category in CATEGORY_ORDER
    }
    for document in documents:
        grouped[category_of(document.category)].append(document)

    completed = sum(1 for document in documents if is_completed(document))
    total = len(documents)
    return ProgressReport(
        by_category={category: tuple(items) for category, items in grouped.items()},
        completed=completed,
        total=total,
        percentage=completion_percentage(completed, total),
    )


def group_catalog(
    catalog: DocumentCatalog,
    selected_template_ids: Iterable[TemplateId] = (),
) -> tuple[CatalogGroup, ...]:
    """Group the catalog in display order, counting selected templates per category."""

    selected = frozenset(selected_template_ids)
    grouped: dict[DocumentCategory, list[DocumentTemplate]] = {
        category: [] for category in CATEGORY_ORDER
    }
    for template in catalog:
        grouped[category_of(template.category)].append(template)
    return tuple(
        CatalogGroup(
            category=category,
            templates=tuple(templates),
            selected=sum(1 for template in templates if template.template_id in selected),
        )
        for category, templates in grouped.items()
    )
