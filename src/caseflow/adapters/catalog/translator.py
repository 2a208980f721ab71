"""Translate validated catalog payloads into domain values."""

from __future__ import annotations

from typing import TYPE_CHECKING

from caseflow.domain.model import CatalogPreset, DocumentCatalog, DocumentTemplate

if TYPE_CHECKING:
    from .schema import CatalogFile, PresetPayload, TemplatePayload


def translate_template(payload: TemplatePayload) -> DocumentTemplate:
    return DocumentTemplate(
        template_id=payload.id,
        name=payload.name,
        category=payload.category,
        default_source=payload.source,
        default_assignee=payload.assignee,
        default_status=payload.status,
        is_original_required=payload.original_required,
        description=payload.description,
        instructions=payload.instructions,
        notes=payload.notes,
    )


def translate_preset(payload: PresetPayload) -> CatalogPreset:
    return CatalogPreset(
        key=payload.key,
        label=payload.label,
        template_ids=tuple(payload.templates),
    )


def translate_catalog(payload: CatalogFile) -> DocumentCatalog:
    return DocumentCatalog(
        templates=tuple(translate_template(item) for item in payload.templates),
        version=payload.version,
        presets=tuple(translate_preset(item) for item in payload.presets),
    )
