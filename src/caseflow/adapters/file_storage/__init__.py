"""File storage adapters."""

from __future__ import annotations

from typing import TYPE_CHECKING

from caseflow.config import ConfigurationError, FileStorageBackend, get_file_storage_config

from .http import HttpFileStorage
from .local import LocalFileStorage

if TYPE_CHECKING:
    from caseflow.config import FileStorageConfig
    from caseflow.domain.ports import FileStorage


def build_file_storage(config: FileStorageConfig | None = None) -> FileStorage:
    resolved = config or get_file_storage_config()
    if resolved.backend is FileStorageBackend.HTTP and resolved.http is not None:
        return HttpFileStorage(config=resolved.http)
    if resolved.local is None:
        raise ConfigurationError(f"No settings for file storage backend {resolved.backend}")
    return LocalFileStorage(resolved.local.root)


__all__ = ["HttpFileStorage", "LocalFileStorage", "build_file_storage"]
