"""Runtime settings loaded from environment variables."""

import os
from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path

from src.reminders.policy import REMINDER_INTERVAL_MS

DEFAULT_ASSIGNEE = "Maintenance Staff"
DEFAULT_DATA_DIR = Path("data")
DEFAULT_AUDIT_DIR = Path("audit_logs")

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass
class ReminderSettings:
    """Configuration for storage locations and reminder behavior."""

    data_dir: Path = DEFAULT_DATA_DIR
    audit_dir: Path = DEFAULT_AUDIT_DIR
    interval_ms: int = REMINDER_INTERVAL_MS
    default_assignee: str = DEFAULT_ASSIGNEE
    enforce_eligibility: bool = False

    @property
    def interval(self) -> timedelta:
        """Reminder interval shared by both tracks."""
        return timedelta(milliseconds=self.interval_ms)

    @property
    def complaints_dir(self) -> Path:
        """Directory holding one JSON file per complaint."""
        return self.data_dir / "complaints"

    @property
    def ledger_file(self) -> Path:
        """JSON document backing the reminder ledger."""
        return self.data_dir / "reminders.json"

    @classmethod
    def from_env(cls) -> "ReminderSettings":
        """Create settings from environment variables.

        Optional environment variables:
            COMPLAINTS_DATA_DIR: Data directory (default: data)
            AUDIT_LOG_DIR: Activity log directory (default: audit_logs)
            REMINDER_INTERVAL_MS: Reminder interval (default: 172800000)
            DEFAULT_ASSIGNEE: Label used when assigning without a name
            ENFORCE_REMINDER_ELIGIBILITY: Reject early reminders (default: off)

        Raises:
            ValueError: If REMINDER_INTERVAL_MS is not a positive integer.
        """
        raw_interval = os.getenv("REMINDER_INTERVAL_MS", str(REMINDER_INTERVAL_MS))
        try:
            interval_ms = int(raw_interval)
        except ValueError:
            raise ValueError(
                f"REMINDER_INTERVAL_MS must be an integer, got {raw_interval!r}"
            ) from None
        if interval_ms <= 0:
            raise ValueError("REMINDER_INTERVAL_MS must be positive")

        return cls(
            data_dir=Path(os.getenv("COMPLAINTS_DATA_DIR", str(DEFAULT_DATA_DIR))),
            audit_dir=Path(os.getenv("AUDIT_LOG_DIR", str(DEFAULT_AUDIT_DIR))),
            interval_ms=interval_ms,
            default_assignee=os.getenv("DEFAULT_ASSIGNEE", DEFAULT_ASSIGNEE)
            or DEFAULT_ASSIGNEE,
            enforce_eligibility=os.getenv("ENFORCE_REMINDER_ELIGIBILITY", "")
            .strip()
            .lower()
            in _TRUTHY,
        )
