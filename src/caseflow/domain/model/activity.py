"""Append-only activity log records for cases and customers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, TypedDict

from caseflow.domain.model.base import Entity
from caseflow.domain.model.enums import LogSubject

if TYPE_CHECKING:
    from datetime import datetime

    from caseflow.domain.model.enums import ActionType


class FieldChange(TypedDict):
    old_value: str | int | None
    new_value: str | int | None


type DetailValue = str | int | float | bool | list[str] | FieldChange | None
type Details = dict[str, DetailValue]


@dataclass(eq=False, kw_only=True)
class ActivityLogEntry(Entity):
    """One immutable line of a case's (or customer's) history.

    ``sequence`` is assigned by the store on insert and breaks ties between entries
    sharing a ``created_at``.
    """

    subject_id: str
    action_type: ActionType
    description: str
    performed_by: str
    created_at: datetime
    subject: LogSubject = LogSubject.CASE
    details: Details = field(default_factory=dict["str", "DetailValue"])
    performed_by_name: str | None = None
    sequence: int | None = None

    @property
    def case_id(self) -> str | None:
        return self.subject_id if self.subject is LogSubject.CASE else None
