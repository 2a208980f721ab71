"""SQLAlchemy mapping metadata for the caseflow domain model."""

from __future__ import annotations

import logging
import uuid
from datetime import UTC, datetime
from functools import cache
from typing import TYPE_CHECKING

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Dialect,
    Enum,
    Index,
    Integer,
    String,
    Table,
    Text,
    TypeDecorator,
    UniqueConstraint,
    Uuid,
    orm,
)
from sqlalchemy.orm import configure_mappers

from caseflow.domain.model import (
    ActionType,
    ActivityLogEntry,
    Assignee,
    CaseDocument,
    DocumentCategory,
    DocumentSource,
    DocumentStatus,
    LogSubject,
)

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)

UUIDColumnType = Uuid[uuid.UUID]


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

case_document_table = Table(
    "case_document",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True),
    Column("case_id", String(64), nullable=False),
    Column("name", String(255), nullable=False),
    Column("description", Text, nullable=True),
    Column("category", Enum(DocumentCategory, native_enum=False), nullable=False),
    Column("source", Enum(DocumentSource, native_enum=False), nullable=False),
    Column("assigned_to", Enum(Assignee, native_enum=False), nullable=False),
    Column("status", Enum(DocumentStatus, native_enum=False), nullable=False),
    Column("is_original_required", Boolean, nullable=False, default=False),
    Column("instructions", Text, nullable=True),
    Column("notes", Text, nullable=True),
    Column("template_id", String(64), nullable=True),
    Column("file_ref", String(512), nullable=True),
    Column("created_at", UTCDateTime(), nullable=False),
    Column("updated_at", UTCDateTime(), nullable=True),
    # NULL template ids never collide, so ad-hoc documents are unconstrained.
    UniqueConstraint("case_id", "template_id", name="uq_case_document_template"),
    Index("ix_case_document_case", "case_id", "created_at"),
)

case_revision_table = Table(
    "case_revision",
    mapper_registry.metadata,
    Column("case_id", String(64), primary_key=True),
    Column("revision", Integer, nullable=False),
)

activity_log_table = Table(
    "activity_log",
    mapper_registry.metadata,
    Column("sequence", Integer, primary_key=True, autoincrement=True),
    Column("id", UUIDColumnType, nullable=False, unique=True),
    Column("subject", Enum(LogSubject, native_enum=False), nullable=False),
    Column("subject_id", String(64), nullable=False),
    Column("action_type", Enum(ActionType, native_enum=False), nullable=False),
    Column("description", Text, nullable=False),
    Column("details", JSON, nullable=False),
    Column("performed_by", String(255), nullable=False),
    Column("performed_by_name", String(255), nullable=True),
    Column("created_at", UTCDateTime(), nullable=False),
    Index("ix_activity_log_subject", "subject", "subject_id", "created_at"),
)


@cache
def start_mappers() -> orm.registry:
    """Configure SQLAlchemy mappers for the domain model."""

    log.info("Starting SQLAlchemy mappers")

    mapper_registry.map_imperatively(CaseDocument, case_document_table)
    mapper_registry.map_imperatively(ActivityLogEntry, activity_log_table)

    configure_mappers()
    return mapper_registry


def create_all_tables(engine: Engine) -> None:
    """Create database tables for the mapped metadata."""

    log.info("Creating all tables")
    mapper_registry.metadata.create_all(engine)
