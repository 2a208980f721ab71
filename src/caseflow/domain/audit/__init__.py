"""Activity log recording and the field-diff helpers its callers use."""

from __future__ import annotations

from .diffing import (
    DOCUMENT_FIELDS,
    FieldDiff,
    FieldSpec,
    attribute,
    describe_changes,
    diff_fields,
    diff_snapshots,
    format_date,
    format_enum,
    format_text,
    joined,
    snapshot,
)
from .recorder import AuditRecorder, record_best_effort

__all__ = [
    "DOCUMENT_FIELDS",
    "AuditRecorder",
    "FieldDiff",
    "FieldSpec",
    "attribute",
    "describe_changes",
    "diff_fields",
    "diff_snapshots",
    "format_date",
    "format_enum",
    "format_text",
    "joined",
    "record_best_effort",
    "snapshot",
]
