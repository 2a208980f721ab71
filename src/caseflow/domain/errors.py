"""Error taxonomy shared by the document engine and its adapters.

Primary-effect failures (validation, store) propagate to callers. Secondary-effect
failures (file release, audit append) are raised by the ports that produce them and
caught by the services that treat those effects as best effort.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable


class CaseflowError(RuntimeError):
    """Base class for all domain-level failures."""


class ValidationError(CaseflowError):
    """Raised when caller input is malformed; no store call has happened yet."""


class UnknownTemplateError(ValidationError):
    """Raised when a selection names template ids the catalog does not contain."""

    def __init__(self, template_ids: Iterable[str]) -> None:
        self.template_ids = tuple(sorted(template_ids))
        super().__init__(f"Unknown template ids: {', '.join(self.template_ids)}")


class DuplicateTemplateError(ValidationError):
    """Raised when a write would attach a template twice to one case."""

    def __init__(self, case_id: str, template_id: str) -> None:
        self.case_id = case_id
        self.template_id = template_id
        super().__init__(f"Case {case_id} already has a document for template {template_id}")


class DocumentNotFoundError(CaseflowError):
    """Raised when a case document id does not resolve within its case."""


class StoreError(CaseflowError):
    """Raised when the document store rejected or failed a batch."""


class ConcurrentModificationError(StoreError):
    """Raised when the case revision changed between snapshot and commit."""

    def __init__(self, case_id: str, *, expected: int | None, actual: int | None) -> None:
        self.case_id = case_id
        self.expected = expected
        self.actual = actual
        found = "unknown" if actual is None else str(actual)
        super().__init__(
            f"Case {case_id} was modified concurrently (expected revision {expected}, "
            f"found {found})"
        )


class StorageReleaseError(CaseflowError):
    """Raised by file storage when a stored file could not be released."""

    def __init__(self, file_ref: str, reason: str) -> None:
        self.file_ref = file_ref
        self.reason = reason
        super().__init__(f"Could not release file {file_ref}: {reason}")


class AuditError(CaseflowError):
    """Raised when an activity log entry could not be appended."""
