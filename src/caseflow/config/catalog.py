"""Location of the master document catalog."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .env import optional_env_var


@dataclass(frozen=True, slots=True)
class CatalogConfig:
    """``path`` of ``None`` selects the catalog bundled with the package."""

    path: Path | None = None


def get_catalog_config() -> CatalogConfig:
    env_path = optional_env_var("CASEFLOW_CATALOG_PATH")
    return CatalogConfig(path=Path(env_path).expanduser() if env_path else None)
