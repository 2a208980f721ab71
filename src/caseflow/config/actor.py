"""Default actor attributed to changes made from the command line."""

from __future__ import annotations

import getpass
from dataclasses import dataclass

from .env import optional_env_var

FALLBACK_ACTOR_ID = "caseflow"


@dataclass(frozen=True, slots=True)
class ActorConfig:
    actor_id: str
    display_name: str | None = None


def get_actor_config() -> ActorConfig:
    actor_id = optional_env_var("CASEFLOW_ACTOR_ID") or _login_name()
    return ActorConfig(actor_id=actor_id, display_name=optional_env_var("CASEFLOW_ACTOR_NAME"))


def _login_name() -> str:
    try:
        return getpass.getuser()
    except (KeyError, OSError):
        return FALLBACK_ACTOR_ID
