from pathlib import Path

import pytest

from safetag_migrate.config import (
    ConfigNotFoundError,
    ConfigValidationError,
    MigrationSettings,
    find_settings_file,
    load_settings,
    save_settings,
)


def test_defaults_disable_everything():
    settings = MigrationSettings()
    assert settings.enabled_flags() == []
    assert settings.origin is None
    assert settings.origin_path_prefix == ""


def test_camel_case_keys_are_accepted():
    settings = MigrationSettings(documentMatter=True, originPathPrefix="src/")
    assert settings.document_matter is True
    assert settings.origin_path_prefix == "src/"


def test_unknown_keys_are_rejected():
    with pytest.raises(ValueError):
        MigrationSettings(reporting=True)


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("SAFETAG_METHODS", "true")
    monkeypatch.setenv("SAFETAG_ORIGIN_PATH_PREFIX", "content/")
    settings = MigrationSettings()
    assert settings.methods is True
    assert settings.origin_path_prefix == "content/"


def test_all_enabled():
    settings = MigrationSettings.all_enabled(origin="https://example.org/edit")
    assert settings.enabled_flags() == ["activities", "methods", "references", "images", "document_matter", "guides"]
    assert settings.origin == "https://example.org/edit"


def test_load_without_file_uses_overrides(tmp_path: Path):
    settings = load_settings(tmp_path, activities=True, methods=None)
    assert settings.activities is True
    assert settings.methods is False


def test_round_trip_through_config_file(tmp_path: Path):
    path = save_settings(MigrationSettings(references=True, origin_path_prefix="src/"), tmp_path)
    assert path == tmp_path / ".safetag" / "config.yml"

    nested = tmp_path / "exercises" / "scan"
    nested.mkdir(parents=True)
    assert find_settings_file(nested) == path

    settings = load_settings(nested, guides=True)
    assert settings.references is True
    assert settings.guides is True
    assert settings.origin_path_prefix == "src/"


def test_overrides_win_over_file(tmp_path: Path):
    config = tmp_path / "custom.yml"
    config.write_text("activities: true\noriginPathPrefix: file/\n", encoding="utf-8")
    settings = load_settings(config_path=config, activities=False)
    assert settings.activities is False
    assert settings.origin_path_prefix == "file/"


def test_explicit_missing_file(tmp_path: Path):
    with pytest.raises(ConfigNotFoundError):
        load_settings(config_path=tmp_path / "missing.yml")


@pytest.mark.parametrize("contents", ["activities: [unclosed", "- just\n- a list\n", "activities: maybe\n"])
def test_invalid_files_raise(tmp_path: Path, contents: str):
    config = tmp_path / "bad.yml"
    config.write_text(contents, encoding="utf-8")
    with pytest.raises(ConfigValidationError) as excinfo:
        load_settings(config_path=config)
    assert excinfo.value.source == config
