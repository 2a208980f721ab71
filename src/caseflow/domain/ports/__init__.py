"""Domain port definitions for adapters."""

from __future__ import annotations

from .persistence import (
    ActivityLogRepository,
    CaseDocumentRepository,
    CaseRevisionRepository,
)
from .storage import FileStorage
from .unit_of_work import (
    CaseRepositories,
    CaseUnitOfWork,
    CaseUnitOfWorkFactory,
    RepositoryCollection,
    UnitOfWork,
)

__all__ = [
    "ActivityLogRepository",
    "CaseDocumentRepository",
    "CaseRepositories",
    "CaseRevisionRepository",
    "CaseUnitOfWork",
    "CaseUnitOfWorkFactory",
    "FileStorage",
    "RepositoryCollection",
    "UnitOfWork",
]
