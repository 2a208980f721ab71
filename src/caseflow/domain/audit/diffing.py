"""Field-by-field diffing for audit details.

Each auditable record type declares a table of ``FieldSpec`` rows (name, label,
extractor, formatter). Values are compared after formatting, so two datetimes on
the same day compare equal under ``format_date`` and name parts that join to the
same string are not reported as a change.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import TYPE_CHECKING

from caseflow.domain.model.activity import FieldChange

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence

    from caseflow.domain.model import Details

type FormattedValue = str | int | None
type Formatter = Callable[[object], FormattedValue]


def format_text(value: object) -> FormattedValue:
    if value is None:
        return None
    if isinstance(value, Enum):
        return format_enum(value)
    if isinstance(value, bool):
        return "yes" if value else "no"
    if isinstance(value, int):
        return value
    text = str(value).strip()
    return text or None


def format_enum(value: object) -> FormattedValue:
    if value is None:
        return None
    if isinstance(value, Enum):
        return str(value.value)
    return format_text(value)


def format_date(value: object) -> FormattedValue:
    """Render dates and datetimes as ISO calendar dates (time of day is dropped)."""

    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return format_text(value)


def joined(
    *extractors: Callable[[object], object],
    separator: str = " ",
) -> Callable[[object], str]:
    """Build an extractor that concatenates the non-blank parts of several fields."""

    def extract(record: object) -> str:
        parts = (format_text(extractor(record)) for extractor in extractors)
        return separator.join(str(part) for part in parts if part is not None)

    return extract


def attribute(name: str) -> Callable[[object], object]:
    def extract(record: object) -> object:
        return getattr(record, name, None)

    return extract


@dataclass(frozen=True, slots=True)
class FieldSpec:
    """One auditable field: where to read it and how to render it."""

    name: str
    label: str
    extractor: Callable[[object], object]
    formatter: Formatter = format_text

    @classmethod
    def of(cls, name: str, label: str, formatter: Formatter = format_text) -> FieldSpec:
        return cls(name=name, label=label, extractor=attribute(name), formatter=formatter)

    def read(self, record: object) -> FormattedValue:
        return self.formatter(self.extractor(record))


@dataclass(frozen=True, slots=True)
class FieldDiff:
    """Changed fields only, in field-table order."""

    changes: dict[str, FieldChange] = field(default_factory=dict["str", "FieldChange"])
    labels: tuple[str, ...] = ()

    @property
    def changed(self) -> bool:
        return bool(self.changes)

    def as_details(self, **extra: str | int | None) -> Details:
        details: Details = {key: value for key, value in extra.items() if value is not None}
        details.update(self.changes)
        return details


def snapshot(record: object, specs: Sequence[FieldSpec]) -> dict[str, FormattedValue]:
    """Capture the formatted values of a record before it is mutated."""

    return {spec.name: spec.read(record) for spec in specs}


def diff_snapshots(
    before: Mapping[str, FormattedValue],
    after: Mapping[str, FormattedValue],
    specs: Sequence[FieldSpec],
) -> FieldDiff:
    changes: dict[str, FieldChange] = {}
    labels: list[str] = []
    for spec in specs:
        old_value = before.get(spec.name)
        new_value = after.get(spec.name)
        if old_value == new_value:
            continue
        changes[spec.name] = FieldChange(old_value=old_value, new_value=new_value)
        labels.append(spec.label)
    return FieldDiff(changes=changes, labels=tuple(labels))


def diff_fields(old: object, new: object, specs: Sequence[FieldSpec]) -> FieldDiff:
    return diff_snapshots(snapshot(old, specs), snapshot(new, specs), specs)


def describe_changes(labels: Iterable[str], *, fallback: str) -> str:
    """Summarise changed field labels as one sentence, or ``fallback`` if none."""

    names = list(labels)
    if not names:
        return fallback
    return f"Updated {', '.join(names)}"


DOCUMENT_FIELDS: tuple[FieldSpec, ...] = (
    FieldSpec.of("name", "name"),
    FieldSpec.of("description", "description"),
    FieldSpec.of("category", "category", format_enum),
    FieldSpec.of("source", "source", format_enum),
    FieldSpec.of("assigned_to", "assignee", format_enum),
    FieldSpec.of("status", "status", format_enum),
    FieldSpec.of("is_original_required", "original required"),
    FieldSpec.of("notes", "notes"),
)
