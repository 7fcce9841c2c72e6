"""Wires settings, storage and services together for CLI commands."""

from dataclasses import dataclass

import typer

from src.audit.logger import AuditLogger
from src.cli.display import print_error
from src.config import ReminderSettings
from src.lifecycle.machine import ComplaintLifecycle
from src.lifecycle.repository import FileComplaintRepository
from src.reminders.clock import SystemClock
from src.reminders.ledger import ReminderLedger
from src.reminders.service import ReminderService
from src.reminders.store import JsonFileStore

ADMIN_ROLE = "admin"


@dataclass
class Services:
    """Everything a command needs."""

    settings: ReminderSettings
    lifecycle: ComplaintLifecycle
    reminders: ReminderService


def build_services(settings: ReminderSettings | None = None) -> Services:
    """Create file-backed services from settings (environment by default)."""
    settings = settings or ReminderSettings.from_env()
    clock = SystemClock()
    ledger = ReminderLedger(JsonFileStore(settings.ledger_file))
    audit_logger = AuditLogger(log_dir=settings.audit_dir)
    lifecycle = ComplaintLifecycle(
        repository=FileComplaintRepository(settings.complaints_dir),
        ledger=ledger,
        clock=clock,
        default_assignee=settings.default_assignee,
        audit_logger=audit_logger,
    )
    reminders = ReminderService(
        ledger=ledger,
        clock=clock,
        interval=settings.interval,
        enforce_eligibility=settings.enforce_eligibility,
        audit_logger=audit_logger,
    )
    return Services(settings=settings, lifecycle=lifecycle, reminders=reminders)


def require_admin(role: str) -> None:
    """Stop the command unless the caller acts as an admin."""
    if role.strip().lower() != ADMIN_ROLE:
        print_error("Admins only.")
        raise typer.Exit(code=1)
