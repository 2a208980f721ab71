"""Public domain model surface."""

from __future__ import annotations

from caseflow.domain.model.activity import ActivityLogEntry, Details, FieldChange
from caseflow.domain.model.base import Actor, Clock, Entity, new_id, utcnow
from caseflow.domain.model.catalog import (
    CatalogPreset,
    DocumentCatalog,
    DocumentTemplate,
    TemplateId,
)
from caseflow.domain.model.document import CaseDocument, CaseDocumentInput
from caseflow.domain.model.enums import (
    CATEGORY_LABELS,
    CATEGORY_ORDER,
    ActionType,
    Assignee,
    DocumentCategory,
    DocumentSource,
    DocumentStatus,
    LogSubject,
)

__all__ = [  # noqa: RUF022
    # base
    "Actor",
    "Clock",
    "Entity",
    "new_id",
    "utcnow",
    # catalog
    "CatalogPreset",
    "DocumentCatalog",
    "DocumentTemplate",
    "TemplateId",
    # documents
    "CaseDocument",
    "CaseDocumentInput",
    # activity
    "ActivityLogEntry",
    "Details",
    "FieldChange",
    # enums
    "CATEGORY_LABELS",
    "CATEGORY_ORDER",
    "ActionType",
    "Assignee",
    "DocumentCategory",
    "DocumentSource",
    "DocumentStatus",
    "LogSubject",
]
