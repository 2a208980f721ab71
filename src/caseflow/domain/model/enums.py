"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class DocumentCategory(StrEnum):
    PERSONAL = "personal"
    EMPLOYER = "employer"
    OFFICE = "office"
    GOVERNMENT = "government"
    OTHER = "other"


# Display order for grouped views; also the order categories are reported in.
CATEGORY_ORDER: tuple[DocumentCategory, ...] = (
    DocumentCategory.PERSONAL,
    DocumentCategory.EMPLOYER,
    DocumentCategory.OFFICE,
    DocumentCategory.GOVERNMENT,
    DocumentCategory.OTHER,
)

CATEGORY_LABELS: dict[DocumentCategory, str] = {
    DocumentCategory.PERSONAL: "Applicant documents",
    DocumentCategory.EMPLOYER: "Employer documents",
    DocumentCategory.OFFICE: "Prepared by the office",
    DocumentCategory.GOVERNMENT: "Public agency documents",
    DocumentCategory.OTHER: "Other",
}


class DocumentSource(StrEnum):
    """Who the document is obtained from."""

    OFFICE = "office"
    APPLICANT = "applicant"
    EMPLOYER = "employer"
    GOVERNMENT = "government"
    GUARANTOR = "guarantor"
    OTHER = "other"


class Assignee(StrEnum):
    """Who is responsible for collecting the document."""

    OFFICE = "office"
    APPLICANT = "applicant"


class DocumentStatus(StrEnum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    WAITING = "waiting"
    COLLECTED = "collected"
    VERIFIED = "verified"
    COMPLETED = "completed"

    @property
    def is_done(self) -> bool:
        return self in _DONE_STATUSES


_DONE_STATUSES = frozenset({DocumentStatus.VERIFIED, DocumentStatus.COMPLETED})


class LogSubject(StrEnum):
    """Kind of record an activity log entry belongs to."""

    CASE = "case"
    CUSTOMER = "customer"


class ActionType(StrEnum):
    PROJECT_CREATED = "project_created"
    PROJECT_UPDATED = "project_updated"
    PROJECT_DELETED = "project_deleted"
    DOCUMENT_CREATED = "document_created"
    DOCUMENT_UPDATED = "document_updated"
    DOCUMENT_DELETED = "document_deleted"
    DOCUMENT_FILE_UPLOADED = "document_file_uploaded"
    DOCUMENTS_BULK_CREATED = "documents_bulk_created"
    DOCUMENTS_BULK_DELETED = "documents_bulk_deleted"

    CUSTOMER_CREATED = "customer_created"
    CUSTOMER_UPDATED = "customer_updated"
    CUSTOMER_DELETED = "customer_deleted"

    @property
    def subject(self) -> LogSubject:
        if self.value.startswith("customer_"):
            return LogSubject.CUSTOMER
        return LogSubject.CASE
