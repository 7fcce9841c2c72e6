"""Reminder ledger records and send receipts."""

from datetime import datetime

from pydantic import BaseModel, Field, model_validator

from src.models.enums import ReminderTrack


class MaintenanceRecord(BaseModel):
    """Maintenance-track entry for one complaint.

    ``assigned_at`` is set once when the complaint is assigned and is left
    alone afterwards; ``last_reminder_at`` stays ``None`` until a reminder
    is actually sent.
    """

    model_config = {"frozen": True}

    assigned_at: datetime | None = Field(
        default=None, description="When the complaint was assigned"
    )
    last_reminder_at: datetime | None = Field(
        default=None, description="When the last maintenance reminder was sent"
    )

    @model_validator(mode="after")
    def _reminder_not_before_assignment(self) -> "MaintenanceRecord":
        if (
            self.assigned_at is not None
            and self.last_reminder_at is not None
            and self.last_reminder_at < self.assigned_at
        ):
            raise ValueError("last_reminder_at cannot precede assigned_at")
        return self


class ReminderReceipt(BaseModel):
    """Confirmation returned after a reminder has been recorded."""

    model_config = {"frozen": True}

    sent: bool = Field(default=True, description="Whether the reminder was recorded")
    at: datetime = Field(..., description="Instant the reminder was recorded")
    track: ReminderTrack = Field(..., description="Track the reminder was written to")
    complaint_id: str = Field(..., description="Complaint the reminder concerns")
    message: str = Field(default="", description="Human-readable confirmation")
