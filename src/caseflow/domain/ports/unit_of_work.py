"""Unit-of-work abstractions for coordinating repositories."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Callable
    from types import TracebackType

    from caseflow.domain.ports.persistence import (
        ActivityLogRepository,
        CaseDocumentRepository,
        CaseRevisionRepository,
    )


@runtime_checkable
class RepositoryCollection(Protocol):
    """Marker protocol for groups of repositories managed together."""


@runtime_checkable
class UnitOfWork[TRepositories: RepositoryCollection](Protocol):
    """Generic unit-of-work boundary around a repository collection.

    Everything done through ``repositories`` between ``__enter__`` and ``commit``
    is one atomic batch; leaving the block with an exception rolls it back.
    """

    @property
    def repositories(self) -> TRepositories: ...

    def __enter__(self) -> UnitOfWork[TRepositories]: ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> bool: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...


@dataclass(slots=True)
class CaseRepositories(RepositoryCollection):
    """Repositories needed to mutate case documents and record their history."""

    documents: CaseDocumentRepository
    revisions: CaseRevisionRepository
    activity: ActivityLogRepository


type CaseUnitOfWork = UnitOfWork[CaseRepositories]
type CaseUnitOfWorkFactory = Callable[[], CaseUnitOfWork]
