"""Activity trail event models.

All models are immutable once created (Pydantic frozen=True) and include
UTC timestamps so every status change and reminder can be traced back to
the person who triggered it.
"""

from datetime import UTC, datetime
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, Field


def _utc_now() -> datetime:
    """Return current UTC time (timezone-aware)."""
    return datetime.now(UTC)


class AuditAction(str, Enum):
    """Types of actions recorded in the activity trail."""

    COMPLAINT_REPORTED = "complaint_reported"
    STATUS_CHANGED = "status_changed"
    REMINDER_SENT = "reminder_sent"
    REMINDERS_CLEARED = "reminders_cleared"


class AuditEvent(BaseModel):
    """Base activity event model.

    Attributes:
        event_id: Unique identifier for this event.
        timestamp: UTC timestamp when event occurred.
        action: Type of action being logged.
        resource_type: Type of resource affected (always "complaint" today).
        resource_id: ID of the resource affected.
        user_id: Who performed the action (or "system" for automated).
        role: Role of the actor ("student", "admin", "system").
        details: Additional action-specific details.
    """

    model_config = {"frozen": True}  # Make events immutable

    event_id: str = Field(..., description="Unique event identifier")
    timestamp: datetime = Field(
        default_factory=_utc_now,
        description="UTC timestamp of the event",
    )
    action: AuditAction = Field(..., description="Type of action performed")
    resource_type: str = Field(default="complaint", description="Resource type")
    resource_id: str = Field(..., description="ID of the affected resource")
    user_id: str = Field(default="system", description="Actor identifier")
    role: str = Field(default="system", description="Actor role")
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Action-specific details",
    )


class ComplaintReportedEvent(BaseModel):
    """Event logged when a new complaint is raised."""

    model_config = {"frozen": True}

    event_id: str = Field(..., description="Unique event identifier")
    timestamp: datetime = Field(default_factory=_utc_now)
    action: Literal[AuditAction.COMPLAINT_REPORTED] = Field(
        default=AuditAction.COMPLAINT_REPORTED
    )
    resource_id: str = Field(..., description="Complaint ID")
    user_id: str = Field(default="system")
    role: str = Field(default="student")

    title: str = Field(..., description="Complaint title")
    category: str = Field(..., description="Complaint category")
    priority: str = Field(..., description="Complaint priority")
    location: str = Field(..., description="Where the problem is")

    def to_base_event(self) -> AuditEvent:
        """Convert to base AuditEvent for storage."""
        return AuditEvent(
            event_id=self.event_id,
            timestamp=self.timestamp,
            action=self.action,
            resource_id=self.resource_id,
            user_id=self.user_id,
            role=self.role,
            details={
                "title": self.title,
                "category": self.category,
                "priority": self.priority,
                "location": self.location,
            },
        )


class StatusChangedEvent(BaseModel):
    """Event logged when an admin moves a complaint to a new status."""

    model_config = {"frozen": True}

    event_id: str = Field(..., description="Unique event identifier")
    timestamp: datetime = Field(default_factory=_utc_now)
    action: Literal[AuditAction.STATUS_CHANGED] = Field(
        default=AuditAction.STATUS_CHANGED
    )
    resource_id: str = Field(..., description="Complaint ID")
    user_id: str = Field(default="system")
    role: str = Field(default="admin")

    previous_status: str = Field(..., description="Status before the change")
    new_status: str = Field(..., description="Status after the change")
    assignee: str = Field(default="", description="Assignee after the change")

    def to_base_event(self) -> AuditEvent:
        """Convert to base AuditEvent for storage."""
        return AuditEvent(
            event_id=self.event_id,
            timestamp=self.timestamp,
            action=self.action,
            resource_id=self.resource_id,
            user_id=self.user_id,
            role=self.role,
            details={
                "previous_status": self.previous_status,
                "new_status": self.new_status,
                "assignee": self.assignee,
            },
        )


class ReminderSentEvent(BaseModel):
    """Event logged when a reminder is recorded on either track."""

    model_config = {"frozen": True}

    event_id: str = Field(..., description="Unique event identifier")
    timestamp: datetime = Field(default_factory=_utc_now)
    action: Literal[AuditAction.REMINDER_SENT] = Field(
        default=AuditAction.REMINDER_SENT
    )
    resource_id: str = Field(..., description="Complaint ID")
    user_id: str = Field(default="system")
    role: str = Field(default="student")

    track: str = Field(..., description="Reminder track written")
    message: str = Field(default="", description="Confirmation shown to the sender")

    def to_base_event(self) -> AuditEvent:
        """Convert to base AuditEvent for storage."""
        return AuditEvent(
            event_id=self.event_id,
            timestamp=self.timestamp,
            action=self.action,
            resource_id=self.resource_id,
            user_id=self.user_id,
            role=self.role,
            details={"track": self.track, "message": self.message},
        )
