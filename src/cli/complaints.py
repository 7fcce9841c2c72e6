"""CLI commands for reporting complaints and moving them through their lifecycle."""

import logging
from typing import Annotated

import typer
from pydantic import ValidationError

from src.cli.context import build_services, require_admin
from src.cli.display import (
    console,
    create_complaint_panel,
    create_complaints_table,
    create_stats_table,
    print_error,
    print_info,
    print_success,
)
from src.lifecycle.errors import LifecycleError
from src.models.complaint import ComplaintCreate
from src.models.enums import IssueCategory, IssuePriority, IssueStatus
from src.reminders.ledger import LedgerError
from src.reminders.service import summarize_complaints

logger = logging.getLogger(__name__)

# Create Typer app for complaint commands
app = typer.Typer(
    name="complaint",
    help="Report complaints and move them through their lifecycle.",
    no_args_is_help=True,
)


@app.command("report")
def report_complaint(
    title: Annotated[str, typer.Option("--title", "-t", help="Short summary")],
    description: Annotated[
        str, typer.Option("--description", "-d", help="What is wrong")
    ],
    location: Annotated[str, typer.Option("--location", "-l", help="Where it is")],
    category: Annotated[
        IssueCategory, typer.Option("--category", "-c", help="Kind of problem")
    ] = IssueCategory.OTHER,
    priority: Annotated[
        IssuePriority, typer.Option("--priority", "-p", help="How urgent it is")
    ] = IssuePriority.MEDIUM,
    user: Annotated[str, typer.Option("--user", "-u", help="Reporter name")] = "student",
) -> None:
    """Raise a new maintenance complaint."""
    try:
        data = ComplaintCreate(
            title=title,
            description=description,
            location=location,
            category=category,
            priority=priority,
        )
    except ValidationError as e:
        fields = ", ".join(str(err["loc"][0]) for err in e.errors())
        print_error(f"Invalid complaint: {fields} must not be blank.")
        raise typer.Exit(code=1) from None

    services = build_services()
    complaint = services.lifecycle.report(data, reporter=user)
    print_success(f"Complaint '{complaint.complaint_id}' reported.")


@app.command("list")
def list_complaints(
    status: Annotated[
        IssueStatus | None,
        typer.Option("--status", "-s", help="Only show complaints in this status"),
    ] = None,
) -> None:
    """List complaints, newest first."""
    services = build_services()
    complaints = services.lifecycle.list_complaints(status)

    if not complaints:
        print_info("No complaints found matching the criteria.")
        return

    console.print()
    console.print(create_complaints_table(complaints))
    console.print()
    console.print(f"Total: {len(complaints)} complaint(s)")


@app.command("show")
def show_complaint(
    complaint_id: Annotated[str, typer.Argument(help="Complaint ID to display")],
) -> None:
    """Display a complaint with its reminder history."""
    services = build_services()
    try:
        complaint = services.lifecycle.get(complaint_id)
    except LifecycleError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from None

    console.print(
        create_complaint_panel(
            complaint,
            last_pending=services.reminders.time_since_pending_reminder(complaint_id),
            last_maintenance=services.reminders.time_since_maintenance_reminder(
                complaint_id
            ),
        )
    )


def _change_status(
    complaint_id: str, new_status: IssueStatus, assignee: str | None, user: str
) -> None:
    services = build_services()
    try:
        complaint = services.lifecycle.transition(
            complaint_id, new_status, assignee=assignee, actor=user
        )
    except (LifecycleError, LedgerError) as e:
        print_error(str(e))
        raise typer.Exit(code=1) from None

    print_success(
        f"Complaint '{complaint.complaint_id}' is now {complaint.status.value}"
        + (f" (assigned to {complaint.assignee})." if complaint.assignee else ".")
    )


@app.command("assign")
def assign_complaint(
    complaint_id: Annotated[str, typer.Argument(help="Complaint ID to assign")],
    assignee: Annotated[
        str | None,
        typer.Option("--assignee", "-a", help="Who will handle it"),
    ] = None,
    role: Annotated[str, typer.Option("--role", help="Caller role")] = "student",
    user: Annotated[str, typer.Option("--user", "-u", help="Admin name")] = "admin",
) -> None:
    """Assign a reported complaint (admins only)."""
    require_admin(role)
    _change_status(complaint_id, IssueStatus.ASSIGNED, assignee, user)


@app.command("resolve")
def resolve_complaint(
    complaint_id: Annotated[str, typer.Argument(help="Complaint ID to resolve")],
    role: Annotated[str, typer.Option("--role", help="Caller role")] = "student",
    user: Annotated[str, typer.Option("--user", "-u", help="Admin name")] = "admin",
) -> None:
    """Mark an assigned complaint as resolved (admins only)."""
    require_admin(role)
    _change_status(complaint_id, IssueStatus.RESOLVED, None, user)


@app.command("stats")
def show_stats() -> None:
    """Show complaint counts by status and category."""
    services = build_services()
    summary = summarize_complaints(services.lifecycle.list_complaints())
    console.print(create_stats_table(summary))
