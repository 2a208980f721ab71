"""Master catalog of document templates.

The catalog is static configuration: it is built once (usually by the catalog
adapter at process start) and handed to the services that need it. Case documents
only keep a template's id, so templates may be renamed or dropped between catalog
versions without touching existing case documents.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from caseflow.domain.errors import UnknownTemplateError, ValidationError
from caseflow.domain.model.enums import Assignee, DocumentCategory, DocumentSource, DocumentStatus

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Mapping

type TemplateId = str


@dataclass(frozen=True, slots=True, kw_only=True)
class DocumentTemplate:
    template_id: TemplateId
    name: str
    category: DocumentCategory
    default_source: DocumentSource = DocumentSource.APPLICANT
    default_assignee: Assignee = Assignee.APPLICANT
    default_status: DocumentStatus = DocumentStatus.NOT_STARTED
    is_original_required: bool = False
    description: str | None = None
    instructions: str | None = None
    notes: str | None = None

    def __post_init__(self) -> None:
        if not self.template_id.strip():
            raise ValidationError("Template id must not be blank")
        if not self.name.strip():
            raise ValidationError(f"Template {self.template_id} must have a name")


@dataclass(frozen=True, slots=True, kw_only=True)
class CatalogPreset:
    """Named, ordered selection of templates (typically one per visa type)."""

    key: str
    label: str
    template_ids: tuple[TemplateId, ...]


@dataclass(frozen=True, slots=True)
class DocumentCatalog:
    """Immutable, ordered collection of templates with id lookup."""

    templates: tuple[DocumentTemplate, ...]
    version: str = "1"
    presets: tuple[CatalogPreset, ...] = ()
    _by_id: Mapping[TemplateId, DocumentTemplate] = field(
        init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        by_id: dict[TemplateId, DocumentTemplate] = {}
        for template in self.templates:
            if template.template_id in by_id:
                raise ValidationError(f"Duplicate template id in catalog: {template.template_id}")
            by_id[template.template_id] = template
        object.__setattr__(self, "_by_id", by_id)

        seen_presets: set[str] = set()
        for preset in self.presets:
            if preset.key in seen_presets:
                raise ValidationError(f"Duplicate preset key in catalog: {preset.key}")
            seen_presets.add(preset.key)
            unknown = set(preset.template_ids) - by_id.keys()
            if unknown:
                raise UnknownTemplateError(unknown)

    def __iter__(self) -> Iterator[DocumentTemplate]:
        return iter(self.templates)

    def __len__(self) -> int:
        return len(self.templates)

    def __contains__(self, template_id: object) -> bool:
        return template_id in self._by_id

    def get(self, template_id: TemplateId) -> DocumentTemplate | None:
        return self._by_id.get(template_id)

    def require(self, template_ids: Iterable[TemplateId]) -> None:
        """Raise ``UnknownTemplateError`` if any id is not part of this catalog."""

        unknown = {template_id for template_id in template_ids if template_id not in self._by_id}
        if unknown:
            raise UnknownTemplateError(unknown)

    def preset(self, key: str) -> CatalogPreset:
        for preset in self.presets:
            if preset.key == key:
                return preset
        raise ValidationError(f"Unknown catalog preset: {key}")
