"""Load the master document catalog from JSON."""

from __future__ import annotations

from logging import getLogger
from pathlib import Path
from typing import TYPE_CHECKING, Final

from pydantic import ValidationError as PydanticValidationError

from caseflow.config import ConfigurationError, get_catalog_config
from caseflow.domain.errors import ValidationError

from .schema import CatalogFile
from .translator import translate_catalog

if TYPE_CHECKING:
    from caseflow.domain.model import DocumentCatalog

log = getLogger(__name__)

DATA_DIR: Final[Path] = Path(__file__).resolve().parent / "data"
DEFAULT_CATALOG_PATH: Final[Path] = DATA_DIR / "default_catalog.json"


class CatalogLoadError(ConfigurationError):
    """Raised when a catalog file is missing, unreadable or invalid."""


def load_catalog(path: Path | str | None = None) -> DocumentCatalog:
    """Read and validate a catalog file; ``None`` loads the bundled default."""

    catalog_path = Path(path) if path is not None else DEFAULT_CATALOG_PATH
    try:
        raw = catalog_path.read_bytes()
    except OSError as exc:
        raise CatalogLoadError(f"Cannot read catalog {catalog_path}: {exc}") from exc

    try:
        payload = CatalogFile.model_validate_json(raw)
    except PydanticValidationError as exc:
        raise CatalogLoadError(f"Invalid catalog {catalog_path}: {exc}") from exc

    try:
        catalog = translate_catalog(payload)
    except ValidationError as exc:
        raise CatalogLoadError(f"Invalid catalog {catalog_path}: {exc}") from exc

    log.info(
        "Loaded catalog %s version %s (%s templates, %s presets)",
        catalog_path.name,
        catalog.version,
        len(catalog),
        len(catalog.presets),
    )
    return catalog


def load_configured_catalog() -> DocumentCatalog:
    """Load the catalog named by ``CASEFLOW_CATALOG_PATH``, or the bundled one."""

    return load_catalog(get_catalog_config().path)
