"""Append-only sink for activity log entries."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from caseflow.domain.errors import AuditError, StoreError
from caseflow.domain.model import ActivityLogEntry, LogSubject, utcnow

if TYPE_CHECKING:
    from collections.abc import Mapping
    from uuid import UUID

    from caseflow.domain.model import ActionType, Actor, Clock, Details
    from caseflow.domain.model.activity import DetailValue
    from caseflow.domain.ports import CaseUnitOfWorkFactory

log = getLogger(__name__)


class AuditRecorder:
    """Writes one entry per call in its own unit of work.

    The recorder never diffs or interprets ``details``; callers build them. It
    raises ``AuditError`` when the store is unavailable and leaves it to the
    caller whether that matters.
    """

    def __init__(
        self,
        unit_of_work_factory: CaseUnitOfWorkFactory,
        *,
        clock: Clock = utcnow,
    ) -> None:
        self._unit_of_work_factory = unit_of_work_factory
        self._clock = clock

    def record(
        self,
        subject_id: str,
        action_type: ActionType,
        description: str,
        details: Mapping[str, DetailValue] | None,
        actor: Actor,
        *,
        subject: LogSubject | None = None,
    ) -> UUID:
        entry = ActivityLogEntry(
            subject=subject or action_type.subject,
            subject_id=subject_id,
            action_type=action_type,
            description=description,
            details=dict(details or {}),
            performed_by=actor.id,
            performed_by_name=actor.display_name,
            created_at=self._clock(),
        )
        try:
            with self._unit_of_work_factory() as uow:
                entry_id = uow.repositories.activity.append(entry)
                uow.commit()
        except StoreError as exc:
            raise AuditError(
                f"Could not record {action_type} for {entry.subject} {subject_id}"
            ) from exc
        log.debug("Recorded %s for %s %s", action_type, entry.subject, subject_id)
        return entry_id

    def history(
        self,
        subject_id: str,
        *,
        subject: LogSubject = LogSubject.CASE,
    ) -> tuple[ActivityLogEntry, ...]:
        """Return the subject's entries oldest first."""

        with self._unit_of_work_factory() as uow:
            return tuple(uow.repositories.activity.list_for(subject, subject_id))


def record_best_effort(
    recorder: AuditRecorder,
    subject_id: str,
    action_type: ActionType,
    description: str,
    details: Details | None,
    actor: Actor,
) -> UUID | None:
    """Record an entry after the main effect already happened; log and drop failures."""

    try:
        return recorder.record(subject_id, action_type, description, details, actor)
    except AuditError:
        log.exception("Activity log entry %s for %s was not recorded", action_type, subject_id)
        return None
