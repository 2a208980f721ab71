"""File storage backend selection."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path

from .env import optional_env_var, require_env_vars
from .errors import ConfigurationError
from .http_resilience import RateLimit, ResilienceConfig
from .storage import StorageConfig, get_storage_config

STORAGE_TIMEOUT_SECONDS = 10.0


class FileStorageBackend(StrEnum):
    LOCAL = "local"
    HTTP = "http"


@dataclass(frozen=True, slots=True)
class LocalFileStorageConfig:
    root: Path


@dataclass(frozen=True, slots=True)
class HttpFileStorageConfig:
    """Object store reachable over HTTP; files are released with ``DELETE``."""

    base_url: str
    token: str | None
    resilience: ResilienceConfig


@dataclass(frozen=True, slots=True)
class FileStorageConfig:
    backend: FileStorageBackend
    local: LocalFileStorageConfig | None = None
    http: HttpFileStorageConfig | None = None


def get_file_storage_config(*, storage: StorageConfig | None = None) -> FileStorageConfig:
    raw_backend = optional_env_var("CASEFLOW_FILE_STORAGE") or FileStorageBackend.LOCAL
    try:
        backend = FileStorageBackend(raw_backend.lower())
    except ValueError as exc:
        raise ConfigurationError(
            f"Unsupported CASEFLOW_FILE_STORAGE value: {raw_backend!r}"
        ) from exc

    if backend is FileStorageBackend.HTTP:
        values = require_env_vars(("CASEFLOW_STORAGE_URL",))
        return FileStorageConfig(
            backend=backend,
            http=get_http_file_storage_config(
                base_url=values["CASEFLOW_STORAGE_URL"],
                token=optional_env_var("CASEFLOW_STORAGE_TOKEN"),
            ),
        )

    files_dir = optional_env_var("CASEFLOW_FILES_DIR")
    if files_dir:
        root = Path(files_dir).expanduser().resolve()
    else:
        root = (storage or get_storage_config()).files_path()
    return FileStorageConfig(backend=backend, local=LocalFileStorageConfig(root=root))


def get_http_file_storage_config(
    *,
    base_url: str,
    token: str | None = None,
    resilience: ResilienceConfig | None = None,
) -> HttpFileStorageConfig:
    base_url = base_url.rstrip("/")
    headers = {"Authorization": f"Bearer {token}"} if token else None
    return HttpFileStorageConfig(
        base_url=base_url,
        token=token,
        resilience=resilience
        or ResilienceConfig(
            name="file-storage",
            base_url=base_url,
            timeout_seconds=STORAGE_TIMEOUT_SECONDS,
            ratelimit=RateLimit(max_calls=10, per_seconds=1.0),
            default_headers=headers,
        ),
    )
