"""CLI commands for sending and inspecting complaint reminders.

Each send checks the complaint's status and reminder eligibility before
recording, the same way the web client hides its remind buttons.
``--force`` skips the eligibility check (not the status check).
"""

import logging
from collections.abc import Callable
from datetime import datetime
from typing import Annotated

import typer

from src.cli.context import Services, build_services, require_admin
from src.cli.display import (
    console,
    create_complaints_table,
    format_datetime,
    print_error,
    print_info,
    print_success,
    print_warning,
)
from src.lifecycle.errors import LifecycleError
from src.models.complaint import Complaint
from src.models.enums import IssueStatus
from src.models.reminder import ReminderReceipt
from src.reminders.ledger import LedgerError
from src.reminders.service import ReminderNotEligible

logger = logging.getLogger(__name__)

# Create Typer app for reminder commands
app = typer.Typer(
    name="remind",
    help="Send rate-limited reminders about open complaints.",
    no_args_is_help=True,
)

ForceOption = Annotated[
    bool, typer.Option("--force", "-f", help="Send even if not yet eligible")
]


def _load(services: Services, complaint_id: str, expected: IssueStatus) -> Complaint:
    try:
        complaint = services.lifecycle.get(complaint_id)
    except LifecycleError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from None

    if complaint.status != expected:
        print_error(
            f"Complaint '{complaint_id}' is {complaint.status.value}; "
            f"this reminder needs {expected.value}."
        )
        raise typer.Exit(code=1)
    return complaint


def _not_yet(next_at: datetime | None) -> None:
    print_warning(
        f"Too soon to remind again. Next allowed after {format_datetime(next_at)}."
    )
    raise typer.Exit(code=1)


def _guarded_send(send: Callable[[], ReminderReceipt]) -> ReminderReceipt:
    try:
        return send()
    except (ReminderNotEligible, LedgerError, ValueError) as e:
        print_error(str(e))
        raise typer.Exit(code=1) from None


@app.command("pending")
def remind_pending(
    complaint_id: Annotated[str, typer.Argument(help="Unassigned complaint ID")],
    user: Annotated[str, typer.Option("--user", "-u", help="Sender name")] = "student",
    force: ForceOption = False,
) -> None:
    """Remind the admin about a complaint that has not been assigned yet."""
    services = build_services()
    complaint = _load(services, complaint_id, IssueStatus.REPORTED)

    if not force and not services.reminders.can_send_pending(
        complaint_id, complaint.created_at
    ):
        _not_yet(services.reminders.next_pending_at(complaint_id, complaint.created_at))

    receipt = _guarded_send(
        lambda: services.reminders.send_pending_reminder(
            complaint_id,
            title=complaint.title,
            created_at=complaint.created_at,
            sender=user,
        )
    )
    print_success(receipt.message)


@app.command("follow-up")
def remind_follow_up(
    complaint_id: Annotated[str, typer.Argument(help="Assigned complaint ID")],
    user: Annotated[str, typer.Option("--user", "-u", help="Sender name")] = "student",
    force: ForceOption = False,
) -> None:
    """Ask the admin to chase maintenance about an assigned complaint."""
    services = build_services()
    complaint = _load(services, complaint_id, IssueStatus.ASSIGNED)

    if not force and not services.reminders.can_send_maintenance(complaint_id):
        _not_yet(services.reminders.next_maintenance_at(complaint_id))

    receipt = _guarded_send(
        lambda: services.reminders.send_maintenance_follow_up(
            complaint_id, title=complaint.title, sender=user
        )
    )
    print_success(receipt.message)


@app.command("maintenance")
def remind_maintenance(
    complaint_id: Annotated[str, typer.Argument(help="Assigned complaint ID")],
    role: Annotated[str, typer.Option("--role", help="Caller role")] = "student",
    user: Annotated[str, typer.Option("--user", "-u", help="Admin name")] = "admin",
    force: ForceOption = False,
) -> None:
    """Remind maintenance about an assigned complaint (admins only)."""
    require_admin(role)
    services = build_services()
    complaint = _load(services, complaint_id, IssueStatus.ASSIGNED)

    if not force and not services.reminders.can_send_maintenance(complaint_id):
        _not_yet(services.reminders.next_maintenance_at(complaint_id))

    receipt = _guarded_send(
        lambda: services.reminders.send_maintenance_reminder(
            complaint_id, title=complaint.title, sender=user
        )
    )
    print_success(receipt.message)


@app.command("due")
def show_due() -> None:
    """List complaints whose next reminder is due now.

    Also clears reminder state left behind by resolved complaints.
    """
    services = build_services()
    complaints = services.lifecycle.list_complaints()
    now = services.reminders.clock.now()

    try:
        services.reminders.purge_resolved(complaints)
    except LedgerError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from None

    pending = services.reminders.pending_needing_reminders(complaints, now)
    assigned = services.reminders.assigned_needing_maintenance_reminders(complaints, now)

    if not pending and not assigned:
        print_info("No reminders are due.")
        return

    if pending:
        console.print(create_complaints_table(pending, title="Awaiting Assignment"))
    if assigned:
        console.print(
            create_complaints_table(assigned, title="Awaiting Maintenance Follow-up")
        )
    console.print(f"Due: {len(pending) + len(assigned)} complaint(s)")
