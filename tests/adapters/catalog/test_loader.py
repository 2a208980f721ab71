from __future__ import annotations

import json
from typing import TYPE_CHECKING

import pytest

from caseflow.adapters.catalog import (
    DEFAULT_CATALOG_PATH,
    CatalogLoadError,
    load_catalog,
    load_configured_catalog,
)
from caseflow.config import ConfigurationError
from caseflow.domain.model import Assignee, DocumentCategory, DocumentSource

if TYPE_CHECKING:
    from pathlib import Path


def _write(path: Path, payload: object) -> Path:
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_bundled_catalog_is_valid() -> None:
    catalog = load_catalog()

    assert DEFAULT_CATALOG_PATH.exists()
    assert len(catalog) > 0
    assert {template.category for template in catalog} == set(DocumentCategory)
    for preset in catalog.presets:
        catalog.require(preset.template_ids)


def test_bundled_catalog_carries_template_defaults() -> None:
    catalog = load_catalog()

    form = catalog.get("application_form")
    assert form is not None
    assert form.default_source is DocumentSource.OFFICE
    assert form.default_assignee is Assignee.OFFICE
    passport = catalog.get("passport")
    assert passport is not None
    assert passport.is_original_required


def test_custom_catalog_is_translated(tmp_path: Path) -> None:
    path = _write(
        tmp_path / "catalog.json",
        {
            "version": "7",
            "templates": [
                {
                    "id": "resume",
                    "name": " CV ",
                    "category": "personal",
                    "notes": "   ",
                },
                {
                    "id": "contract",
                    "name": "Contract",
                    "category": "employer",
                    "source": "employer",
                },
            ],
            "presets": [{"key": "work", "label": "Work", "templates": ["contract", "resume"]}],
        },
    )

    catalog = load_catalog(path)

    assert catalog.version == "7"
    assert [template.template_id for template in catalog] == ["resume", "contract"]
    resume = catalog.get("resume")
    assert resume is not None
    assert resume.name == "CV"
    assert resume.notes is None
    assert catalog.preset("work").template_ids == ("contract", "resume")


def test_missing_file(tmp_path: Path) -> None:
    with pytest.raises(CatalogLoadError, match="Cannot read catalog"):
        load_catalog(tmp_path / "absent.json")


@pytest.mark.parametrize(
    "payload",
    [
        {"templates": [{"id": "a", "name": "A", "category": "unknown"}]},
        {"templates": [{"id": "a", "name": "A", "category": "personal", "colour": "red"}]},
        {"templates": [{"id": "", "name": "A", "category": "personal"}]},
        {"presets": []},
    ],
    ids=["bad-category", "extra-field", "blank-id", "no-templates"],
)
def test_schema_violations(tmp_path: Path, payload: object) -> None:
    path = _write(tmp_path / "catalog.json", payload)

    with pytest.raises(CatalogLoadError, match="Invalid catalog"):
        load_catalog(path)


def test_duplicate_template_ids(tmp_path: Path) -> None:
    template = {"id": "a", "name": "A", "category": "personal"}
    path = _write(tmp_path / "catalog.json", {"templates": [template, template]})

    with pytest.raises(CatalogLoadError, match="Duplicate template id"):
        load_catalog(path)


def test_preset_referencing_unknown_template(tmp_path: Path) -> None:
    path = _write(
        tmp_path / "catalog.json",
        {
            "templates": [{"id": "a", "name": "A", "category": "personal"}],
            "presets": [{"key": "p", "label": "P", "templates": ["a", "b"]}],
        },
    )

    with pytest.raises(CatalogLoadError, match="Unknown template ids: b"):
        load_catalog(path)


def test_load_error_is_a_configuration_error(tmp_path: Path) -> None:
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(ConfigurationError):
        load_catalog(path)


def test_configured_catalog_path(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    path = _write(
        tmp_path / "catalog.json",
        {"version": "env", "templates": [{"id": "a", "name": "A", "category": "other"}]},
    )
    monkeypatch.setenv("CASEFLOW_CATALOG_PATH", str(path))

    assert load_configured_catalog().version == "env"


def test_configured_catalog_defaults_to_bundled(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("CASEFLOW_CATALOG_PATH", raising=False)

    assert load_configured_catalog().version == load_catalog().version
