"""Append-only activity trail.

Records who reported, assigned, resolved, or sent reminders about a
complaint. Events are stored with UTC timestamps and are immutable once
written.
"""

from src.audit.logger import AuditLogger, generate_event_id
from src.audit.models import (
    AuditAction,
    AuditEvent,
    ComplaintReportedEvent,
    ReminderSentEvent,
    StatusChangedEvent,
)

__all__ = [
    "AuditAction",
    "AuditEvent",
    "AuditLogger",
    "ComplaintReportedEvent",
    "ReminderSentEvent",
    "StatusChangedEvent",
    "generate_event_id",
]
