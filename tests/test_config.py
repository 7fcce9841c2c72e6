"""Tests for environment-driven settings."""

from datetime import timedelta
from pathlib import Path

import pytest

from src.config import DEFAULT_ASSIGNEE, ReminderSettings


class TestReminderSettings:
    """Tests for ReminderSettings.from_env."""

    @pytest.fixture(autouse=True)
    def clean_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        for name in (
            "COMPLAINTS_DATA_DIR",
            "AUDIT_LOG_DIR",
            "REMINDER_INTERVAL_MS",
            "DEFAULT_ASSIGNEE",
            "ENFORCE_REMINDER_ELIGIBILITY",
        ):
            monkeypatch.delenv(name, raising=False)

    def test_defaults(self) -> None:
        settings = ReminderSettings.from_env()
        assert settings.interval == timedelta(days=2)
        assert settings.default_assignee == DEFAULT_ASSIGNEE
        assert settings.enforce_eligibility is False
        assert settings.ledger_file == Path("data/reminders.json")
        assert settings.complaints_dir == Path("data/complaints")

    def test_overrides(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        monkeypatch.setenv("COMPLAINTS_DATA_DIR", str(tmp_path))
        monkeypatch.setenv("REMINDER_INTERVAL_MS", "3600000")
        monkeypatch.setenv("DEFAULT_ASSIGNEE", "Estates Team")
        monkeypatch.setenv("ENFORCE_REMINDER_ELIGIBILITY", "yes")

        settings = ReminderSettings.from_env()
        assert settings.interval == timedelta(hours=1)
        assert settings.default_assignee == "Estates Team"
        assert settings.enforce_eligibility is True
        assert settings.ledger_file == tmp_path / "reminders.json"

    @pytest.mark.parametrize("value", ["soon", "0", "-5"])
    def test_bad_interval(self, monkeypatch: pytest.MonkeyPatch, value: str) -> None:
        monkeypatch.setenv("REMINDER_INTERVAL_MS", value)
        with pytest.raises(ValueError):
            ReminderSettings.from_env()
