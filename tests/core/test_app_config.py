"""Tests for app configuration loading, overrides and persistence."""

import pytest
import yaml

from grammar_practice.config.app_config import (
    CONFIG_FILE,
    EMAIL_DOMAIN_ENV,
    WORKBOOK_ENV,
    AppConfig,
    StoreConfig,
    clear_config_cache,
    load_app_config,
    save_workbook_location,
)
from grammar_practice.core.errors import ConfigurationError


@pytest.fixture
def project_dir(tmp_path, monkeypatch):
    """Empty project directory with no env overrides."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv(WORKBOOK_ENV, raising=False)
    monkeypatch.delenv(EMAIL_DOMAIN_ENV, raising=False)
    return tmp_path


def write_config(data: dict) -> None:
    CONFIG_FILE.parent.mkdir(parents=True, exist_ok=True)
    CONFIG_FILE.write_text(yaml.safe_dump(data))


class TestLoadAppConfig:
    """Tests for load_app_config."""

    def test_defaults_without_file(self, project_dir):
        config = load_app_config()
        assert isinstance(config, AppConfig)
        assert config.store.workbook_path is None
        assert config.auth.email_domain == "@orono.k12.mn.us"
        assert config.auth.identity_header == "X-Verified-Email"
        assert config.auth.session_max_age_hours == 24
        assert str(config.state_dir) == "data/state"

    def test_loads_yaml(self, project_dir):
        write_config({
            "store": {
                "workbook_path": "wb.db",
                "proficiency_tables": {"Jane Doe": "Room 12"},
            },
            "auth": {"email_domain": "@school.org", "session_max_age_hours": 8},
        })
        config = load_app_config()
        assert config.store.workbook_path == "wb.db"
        assert config.store.proficiency_tables == {"Jane Doe": "Room 12"}
        assert config.auth.email_domain == "@school.org"
        assert config.auth.session_max_age_hours == 8
        assert config.auth.identity_header == "X-Verified-Email"

    def test_cached_until_forced(self, project_dir):
        first = load_app_config()
        write_config({"auth": {"email_domain": "@changed.org"}})
        assert load_app_config() is first
        assert load_app_config(force_reload=True).auth.email_domain == "@changed.org"

    def test_env_overrides(self, project_dir, monkeypatch):
        write_config({"store": {"workbook_path": "from-file.db"}})
        monkeypatch.setenv(WORKBOOK_ENV, "from-env.db")
        monkeypatch.setenv(EMAIL_DOMAIN_ENV, "@env.org")
        config = load_app_config()
        assert config.store.workbook_path == "from-env.db"
        assert config.auth.email_domain == "@env.org"


class TestRequireWorkbookPath:
    """Tests for StoreConfig.require_workbook_path."""

    def test_unset(self):
        with pytest.raises(ConfigurationError) as exc:
            StoreConfig().require_workbook_path()
        assert "not configured" in exc.value.message

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError) as exc:
            StoreConfig(workbook_path=str(tmp_path / "nope.db")).require_workbook_path()
        assert "not accessible" in exc.value.message

    def test_existing_file(self, tmp_path):
        path = tmp_path / "wb.db"
        path.touch()
        assert StoreConfig(workbook_path=str(path)).require_workbook_path() == path


class TestSaveWorkbookLocation:
    """Tests for save_workbook_location."""

    def test_writes_and_reloads(self, project_dir):
        path = project_dir / "wb.db"
        save_workbook_location(path)
        assert CONFIG_FILE.exists()
        assert load_app_config().store.workbook_path == str(path)

    def test_keeps_other_settings(self, project_dir):
        write_config({"auth": {"email_domain": "@school.org"}})
        save_workbook_location(project_dir / "wb.db")
        clear_config_cache()
        assert load_app_config().auth.email_domain == "@school.org"
