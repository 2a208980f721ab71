"""Application configuration helpers."""

from __future__ import annotations

from .actor import ActorConfig, get_actor_config
from .catalog import CatalogConfig, get_catalog_config
from .env import optional_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .file_storage import (
    FileStorageBackend,
    FileStorageConfig,
    HttpFileStorageConfig,
    LocalFileStorageConfig,
    get_file_storage_config,
    get_http_file_storage_config,
)
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy
from .logging import configure_logging
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config

__all__ = [
    "ActorConfig",
    "CatalogConfig",
    "ConfigurationError",
    "DatabaseConfig",
    "FileStorageBackend",
    "FileStorageConfig",
    "HttpFileStorageConfig",
    "LocalFileStorageConfig",
    "MissingConfigurationError",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "StorageConfig",
    "configure_logging",
    "get_actor_config",
    "get_catalog_config",
    "get_database_config",
    "get_file_storage_config",
    "get_http_file_storage_config",
    "get_storage_config",
    "optional_env_var",
    "require_env_vars",
]
