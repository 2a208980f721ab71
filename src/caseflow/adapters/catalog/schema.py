"""Pydantic models describing the catalog JSON file."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from caseflow.domain.model import Assignee, DocumentCategory, DocumentSource, DocumentStatus


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


class CatalogBaseModel(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True, str_strip_whitespace=True)


class TemplatePayload(CatalogBaseModel):
    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    category: DocumentCategory
    source: DocumentSource = DocumentSource.APPLICANT
    assignee: Assignee = Assignee.APPLICANT
    status: DocumentStatus = DocumentStatus.NOT_STARTED
    original_required: bool = False
    description: str | None = None
    instructions: str | None = None
    notes: str | None = None

    _normalize_text = field_validator("description", "instructions", "notes", mode="before")(
        _blank_to_none
    )


class PresetPayload(CatalogBaseModel):
    key: str = Field(min_length=1)
    label: str = Field(min_length=1)
    templates: list[str] = Field(default_factory=list)


class CatalogFile(CatalogBaseModel):
    version: str = "1"
    templates: list[TemplatePayload]
    presets: list[PresetPayload] = Field(default_factory=list)
