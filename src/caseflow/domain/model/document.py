"""Case-local document records."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

from caseflow.domain.errors import ValidationError
from caseflow.domain.model.base import Entity
from caseflow.domain.model.enums import Assignee, DocumentCategory, DocumentSource, DocumentStatus

if TYPE_CHECKING:
    from datetime import datetime

    from caseflow.domain.model.catalog import DocumentTemplate


@dataclass(frozen=True, slots=True, kw_only=True)
class CaseDocumentInput:
    """Creation payload for a case document (no identity, no timestamps, no file)."""

    name: str
    category: DocumentCategory
    source: DocumentSource
    assigned_to: Assignee
    status: DocumentStatus = DocumentStatus.NOT_STARTED
    is_original_required: bool = False
    description: str | None = None
    instructions: str | None = None
    notes: str | None = None
    template_id: str | None = None

    @classmethod
    def from_template(cls, template: DocumentTemplate) -> CaseDocumentInput:
        return cls(
            name=template.name,
            category=template.category,
            source=template.default_source,
            assigned_to=template.default_assignee,
            status=template.default_status,
            is_original_required=template.is_original_required,
            description=template.description,
            instructions=template.instructions,
            notes=template.notes,
            template_id=template.template_id,
        )

    def normalized(self) -> CaseDocumentInput:
        """Return a copy with enum fields coerced and text fields trimmed.

        Raises ``ValidationError`` naming the first offending field.
        """

        name = self.name.strip() if isinstance(self.name, str) else ""
        if not name:
            raise ValidationError("Document name is required")
        return replace(
            self,
            name=name,
            category=coerce_enum(DocumentCategory, self.category, "category"),
            source=coerce_enum(DocumentSource, self.source, "source"),
            assigned_to=coerce_enum(Assignee, self.assigned_to, "assigned_to"),
            status=coerce_enum(DocumentStatus, self.status, "status"),
            description=_blank_to_none(self.description),
            instructions=_blank_to_none(self.instructions),
            notes=_blank_to_none(self.notes),
            template_id=_blank_to_none(self.template_id),
        )


@dataclass(eq=False, kw_only=True)
class CaseDocument(Entity):
    """A requirement attached to one case, instantiated from a template or ad hoc.

    ``template_id`` is a lookup key into the master catalog, not an ownership edge.
    """

    case_id: str
    name: str
    category: DocumentCategory
    source: DocumentSource
    assigned_to: Assignee
    status: DocumentStatus = DocumentStatus.NOT_STARTED
    is_original_required: bool = False
    description: str | None = None
    instructions: str | None = None
    notes: str | None = None
    template_id: str | None = None
    file_ref: str | None = None
    created_at: datetime
    updated_at: datetime | None = None

    @classmethod
    def create(cls, case_id: str, data: CaseDocumentInput, *, now: datetime) -> CaseDocument:
        return cls(
            case_id=case_id,
            name=data.name,
            category=data.category,
            source=data.source,
            assigned_to=data.assigned_to,
            status=data.status,
            is_original_required=data.is_original_required,
            description=data.description,
            instructions=data.instructions,
            notes=data.notes,
            template_id=data.template_id,
            created_at=now,
            updated_at=now,
        )

    @property
    def is_template_linked(self) -> bool:
        return self.template_id is not None

    @property
    def is_done(self) -> bool:
        return DocumentStatus(self.status).is_done


def coerce_enum[TEnum: (DocumentCategory, DocumentSource, Assignee, DocumentStatus)](
    enum_cls: type[TEnum], value: object, field_name: str
) -> TEnum:
    try:
        return enum_cls(value)
    except ValueError as exc:
        raise ValidationError(f"Invalid {field_name}: {value!r}") from exc


def _blank_to_none(value: str | None) -> str | None:
    if value is None:
        return None
    stripped = value.strip()
    return stripped or None
