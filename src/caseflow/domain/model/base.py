"""Base building blocks: identity and clocks."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID, uuid4


def new_id() -> UUID:
    return uuid4()


def utcnow() -> datetime:
    return datetime.now(tz=UTC)


class Clock(Protocol):
    def __call__(self) -> datetime: ...


@dataclass(eq=False, kw_only=True)
class Entity:
    """Internal identity exists immediately in the domain."""

    id: UUID = field(default_factory=new_id)


@dataclass(frozen=True, slots=True)
class Actor:
    """Identity of whoever performed an operation, as supplied by the session layer."""

    id: str
    display_name: str | None = None
