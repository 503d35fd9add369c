"""Tests for configuration loading."""

import pytest

from recordkeeper.config import LoggingSettings, StorageSettings, get_settings
from recordkeeper.models.records import MalformedLinePolicy


@pytest.fixture(autouse=True)
def clean_env(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    for name in (
        "EXPENSES_FILE",
        "TASKS_FILE",
        "DELIMITER",
        "ENCODING",
        "MALFORMED_LINE_POLICY",
        "SORT_TASKS_ON_REFRESH",
        "LOG_LEVEL",
    ):
        monkeypatch.delenv(f"RECORDKEEPER_{name}", raising=False)


class TestStorageSettings:
    """Tests for StorageSettings."""

    def test_defaults(self):
        settings = StorageSettings()
        assert settings.expenses_file == "expenses.txt"
        assert settings.tasks_file == "tasks.txt"
        assert settings.delimiter == " | "
        assert settings.malformed_line_policy == MalformedLinePolicy.ABORT
        assert settings.sort_tasks_on_refresh is True

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("RECORDKEEPER_EXPENSES_FILE", "/data/spend.txt")
        monkeypatch.setenv("RECORDKEEPER_MALFORMED_LINE_POLICY", "skip")
        monkeypatch.setenv("RECORDKEEPER_SORT_TASKS_ON_REFRESH", "false")

        settings = StorageSettings()

        assert settings.expenses_file == "/data/spend.txt"
        assert settings.malformed_line_policy == MalformedLinePolicy.SKIP
        assert settings.sort_tasks_on_refresh is False

    def test_dotenv_file(self, tmp_path):
        (tmp_path / ".env").write_text("RECORDKEEPER_TASKS_FILE=todo.txt\n", encoding="utf-8")
        assert StorageSettings().tasks_file == "todo.txt"

    def test_rejects_unknown_policy(self, monkeypatch):
        monkeypatch.setenv("RECORDKEEPER_MALFORMED_LINE_POLICY", "ignore")
        with pytest.raises(ValueError):
            StorageSettings()


class TestLoggingSettings:
    """Tests for LoggingSettings."""

    def test_log_level_normalised(self, monkeypatch):
        monkeypatch.setenv("RECORDKEEPER_LOG_LEVEL", "debug")
        assert LoggingSettings().log_level == "DEBUG"

    def test_rejects_unknown_level(self, monkeypatch):
        monkeypatch.setenv("RECORDKEEPER_LOG_LEVEL", "chatty")
        with pytest.raises(ValueError):
            LoggingSettings()


def test_get_settings_is_cached():
    get_settings.cache_clear()
    assert get_settings() is get_settings()
    get_settings.cache_clear()
