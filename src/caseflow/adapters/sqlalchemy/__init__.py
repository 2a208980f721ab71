"""SQLAlchemy adapter package for caseflow."""

from __future__ import annotations

from .mappings import create_all_tables, mapper_registry, start_mappers
from .repositories import (
    SqlAlchemyActivityLogRepository,
    SqlAlchemyCaseDocumentRepository,
    SqlAlchemyCaseRevisionRepository,
)
from .unit_of_work import (
    SqlAlchemyCaseUnitOfWork,
    StartupError,
    configured_engine,
    is_started,
    shutdown,
    startup,
)

__all__ = [
    "SqlAlchemyActivityLogRepository",
    "SqlAlchemyCaseDocumentRepository",
    "SqlAlchemyCaseRevisionRepository",
    "SqlAlchemyCaseUnitOfWork",
    "StartupError",
    "configured_engine",
    "create_all_tables",
    "is_started",
    "mapper_registry",
    "shutdown",
    "start_mappers",
    "startup",
]
