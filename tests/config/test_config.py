from __future__ import annotations

import logging
from pathlib import Path

import pytest

from caseflow.config import (
    ConfigurationError,
    FileStorageBackend,
    MissingConfigurationError,
    StorageConfig,
    configure_logging,
    get_actor_config,
    get_catalog_config,
    get_database_config,
    get_file_storage_config,
    get_http_file_storage_config,
    get_storage_config,
    optional_env_var,
    require_env_vars,
)


def test_require_env_vars_returns_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_VAR", " value ")

    result = require_env_vars(["EXAMPLE_VAR"])

    assert result["EXAMPLE_VAR"] == "value"


def test_require_env_vars_lists_every_missing_name(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("MISSING_B", raising=False)
    monkeypatch.setenv("MISSING_A", "   ")

    with pytest.raises(MissingConfigurationError) as exc:
        require_env_vars(["MISSING_B", "MISSING_A"])

    assert "MISSING_A, MISSING_B" in str(exc.value)


def test_optional_env_var_treats_blank_as_unset(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_VAR", "  ")

    assert optional_env_var("EXAMPLE_VAR") is None


def test_storage_paths(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CASEFLOW_DATA_DIR", str(tmp_path / "data"))

    config = get_storage_config()

    assert config.files_path() == (tmp_path / "data" / "files").resolve()
    assert config.database_uri().endswith("/data/caseflow.db")
    assert (tmp_path / "data").is_dir()


def test_database_uri_prefers_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DATABASE_URI", "postgresql+psycopg://db/caseflow")

    assert get_database_config().uri == "postgresql+psycopg://db/caseflow"


def test_database_uri_falls_back_to_storage(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.delenv("DATABASE_URI", raising=False)

    config = get_database_config(storage=StorageConfig(data_dir=tmp_path))

    assert config.uri == f"sqlite+pysqlite:///{tmp_path.resolve() / 'caseflow.db'}"


def test_file_storage_defaults_to_local(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("CASEFLOW_FILE_STORAGE", raising=False)
    monkeypatch.delenv("CASEFLOW_FILES_DIR", raising=False)

    config = get_file_storage_config(storage=StorageConfig(data_dir=tmp_path))

    assert config.backend is FileStorageBackend.LOCAL
    assert config.local is not None
    assert config.local.root == tmp_path.resolve() / "files"
    assert config.http is None


def test_file_storage_local_dir_override(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CASEFLOW_FILE_STORAGE", "LOCAL")
    monkeypatch.setenv("CASEFLOW_FILES_DIR", str(tmp_path / "uploads"))

    config = get_file_storage_config()

    assert config.local is not None
    assert config.local.root == (tmp_path / "uploads").resolve()


def test_http_file_storage(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CASEFLOW_FILE_STORAGE", "http")
    monkeypatch.setenv("CASEFLOW_STORAGE_URL", "https://files.example.test/v1/")
    monkeypatch.setenv("CASEFLOW_STORAGE_TOKEN", "secret")

    config = get_file_storage_config()

    assert config.backend is FileStorageBackend.HTTP
    assert config.http is not None
    assert config.http.base_url == "https://files.example.test/v1"
    assert config.http.resilience.default_headers == {"Authorization": "Bearer secret"}
    assert config.http.resilience.ratelimit is not None


def test_http_file_storage_requires_url(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CASEFLOW_FILE_STORAGE", "http")
    monkeypatch.delenv("CASEFLOW_STORAGE_URL", raising=False)

    with pytest.raises(MissingConfigurationError, match="CASEFLOW_STORAGE_URL"):
        get_file_storage_config()


def test_unknown_file_storage_backend(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CASEFLOW_FILE_STORAGE", "ftp")

    with pytest.raises(ConfigurationError, match="ftp"):
        get_file_storage_config()


def test_http_config_without_token_sends_no_auth_header() -> None:
    config = get_http_file_storage_config(base_url="https://files.example.test")

    assert config.token is None
    assert config.resilience.default_headers is None


def test_catalog_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("CASEFLOW_CATALOG_PATH", raising=False)
    assert get_catalog_config().path is None

    monkeypatch.setenv("CASEFLOW_CATALOG_PATH", str(tmp_path / "catalog.json"))
    assert get_catalog_config().path == tmp_path / "catalog.json"


def test_actor_config_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CASEFLOW_ACTOR_ID", "staff-1")
    monkeypatch.setenv("CASEFLOW_ACTOR_NAME", "Ken Sato")

    config = get_actor_config()

    assert (config.actor_id, config.display_name) == ("staff-1", "Ken Sato")


def test_actor_config_falls_back_to_login_name(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("CASEFLOW_ACTOR_ID", raising=False)
    monkeypatch.delenv("CASEFLOW_ACTOR_NAME", raising=False)
    monkeypatch.setattr("caseflow.config.actor.getpass.getuser", lambda: "tanaka")

    config = get_actor_config()

    assert (config.actor_id, config.display_name) == ("tanaka", None)


def test_actor_config_without_login_name(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("CASEFLOW_ACTOR_ID", raising=False)

    def no_user() -> str:
        raise OSError("no login")

    monkeypatch.setattr("caseflow.config.actor.getpass.getuser", no_user)

    assert get_actor_config().actor_id == "caseflow"


def test_configure_logging_sets_root_level() -> None:
    configure_logging(level=logging.DEBUG, force=True)

    assert logging.getLogger().level == logging.DEBUG

    configure_logging(level=logging.WARNING, force=True)
    assert logging.getLogger().level == logging.WARNING
