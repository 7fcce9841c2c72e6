"""Rate-limited reminders layered on the complaint lifecycle."""

from src.reminders.clock import Clock, FixedClock, SystemClock
from src.reminders.ledger import LedgerError, ReminderLedger
from src.reminders.policy import (
    REMINDER_INTERVAL,
    REMINDER_INTERVAL_MS,
    humanize_elapsed,
    maintenance_eligible,
    pending_eligible,
)
from src.reminders.service import (
    ReminderNotEligible,
    ReminderService,
    summarize_complaints,
)
from src.reminders.store import InMemoryStore, JsonFileStore, KeyValueStore

__all__ = [
    "REMINDER_INTERVAL",
    "REMINDER_INTERVAL_MS",
    "Clock",
    "FixedClock",
    "InMemoryStore",
    "JsonFileStore",
    "KeyValueStore",
    "LedgerError",
    "ReminderLedger",
    "ReminderNotEligible",
    "ReminderService",
    "SystemClock",
    "humanize_elapsed",
    "maintenance_eligible",
    "pending_eligible",
    "summarize_complaints",
]
