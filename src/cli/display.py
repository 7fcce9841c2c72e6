"""Rich display utilities for CLI output."""

from datetime import datetime

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from src.models.complaint import Complaint
from src.models.enums import IssuePriority, IssueStatus

console = Console()


def format_status(status: IssueStatus) -> Text:
    """Format a complaint status with color coding.

    Args:
        status: Complaint status.

    Returns:
        Colored text representation.
    """
    style_map = {
        IssueStatus.REPORTED: "yellow",
        IssueStatus.ASSIGNED: "blue",
        IssueStatus.RESOLVED: "green",
    }
    return Text(status.value.upper(), style=style_map.get(status, "white"))


def format_priority(priority: IssuePriority) -> Text:
    """Format a priority, hotter colors for higher ranks."""
    styles = ["dim", "white", "yellow", "bold red"]
    return Text(priority.value, style=styles[priority.rank])


def format_datetime(dt: datetime | None) -> str:
    """Format a datetime for display.

    Args:
        dt: Datetime to format.

    Returns:
        Formatted string or 'N/A'.
    """
    if dt is None:
        return "N/A"
    return dt.strftime("%Y-%m-%d %H:%M UTC")


def _truncate(value: str, width: int) -> str:
    return value[:width] + "..." if len(value) > width else value


def create_complaints_table(
    complaints: list[Complaint], title: str = "Complaints"
) -> Table:
    """Create a table listing complaints.

    Args:
        complaints: Complaints to show.
        title: Table title.

    Returns:
        Rich Table object.
    """
    table = Table(title=title, show_header=True)
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Title", style="white")
    table.add_column("Category", style="white")
    table.add_column("Priority", justify="center")
    table.add_column("Status", justify="center")
    table.add_column("Assignee", style="white")
    table.add_column("Reported", style="dim")

    for complaint in complaints:
        table.add_row(
            complaint.complaint_id,
            _truncate(complaint.title, 30),
            complaint.category.value,
            format_priority(complaint.priority),
            format_status(complaint.status),
            complaint.assignee or "Pending",
            format_datetime(complaint.created_at),
        )

    return table


def create_complaint_panel(
    complaint: Complaint,
    last_pending: str | None = None,
    last_maintenance: str | None = None,
) -> Panel:
    """Create a panel displaying complaint details and reminder labels.

    Args:
        complaint: Complaint to display.
        last_pending: Humanized time since the last pending reminder.
        last_maintenance: Humanized time since the last maintenance reminder.

    Returns:
        Rich Panel object.
    """
    lines = [
        f"[bold]Title:[/bold] {complaint.title}",
        f"[bold]Status:[/bold] {complaint.status.value}",
        f"[bold]Category:[/bold] {complaint.category.value}",
        f"[bold]Priority:[/bold] {complaint.priority.value}",
        f"[bold]Location:[/bold] {complaint.location}",
        f"[bold]Assigned:[/bold] {complaint.assignee or 'Pending'}",
        f"[bold]Reported:[/bold] {format_datetime(complaint.created_at)}",
        "",
        complaint.description,
    ]
    if last_pending:
        lines.extend(["", f"[dim]Last reminder to admin: {last_pending}[/dim]"])
    if last_maintenance:
        lines.extend(["", f"[dim]Last maintenance reminder: {last_maintenance}[/dim]"])

    return Panel(
        "\n".join(lines),
        title=f"[bold]Complaint: {complaint.complaint_id}[/bold]",
        border_style="blue",
    )


def create_stats_table(summary: dict[str, dict[str, int]]) -> Table:
    """Create the dashboard table of counts by status and category."""
    table = Table(title="Complaint Dashboard", show_header=True)
    table.add_column("Group", style="bold")
    table.add_column("Value")
    table.add_column("Count", justify="right")

    table.add_row("Total", "", str(summary["total"]["all"]))
    for status, count in summary["status"].items():
        table.add_row("Status", status, str(count))
    for category, count in summary["category"].items():
        table.add_row("Category", category, str(count))
    return table


def print_error(message: str) -> None:
    """Print an error message.

    Args:
        message: Error message to display.
    """
    console.print(f"[bold red]Error:[/bold red] {message}")


def print_success(message: str) -> None:
    """Print a success message.

    Args:
        message: Success message to display.
    """
    console.print(f"[bold green]Success:[/bold green] {message}")


def print_warning(message: str) -> None:
    """Print a warning message.

    Args:
        message: Warning message to display.
    """
    console.print(f"[bold yellow]Warning:[/bold yellow] {message}")


def print_info(message: str) -> None:
    """Print an info message.

    Args:
        message: Info message to display.
    """
    console.print(f"[bold blue]Info:[/bold blue] {message}")
