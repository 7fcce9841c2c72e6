"""Reminder facade used by the rest of the application.

Combines the pure policy with the ledger. Sending a reminder records only
the most recent instant; repeated sends overwrite rather than count.
"""

import logging
from collections.abc import Iterable
from datetime import datetime, timedelta

from src.audit.logger import AuditLogger, generate_event_id
from src.audit.models import AuditAction, AuditEvent, ReminderSentEvent
from src.models.complaint import Complaint
from src.models.enums import IssueCategory, IssueStatus, ReminderTrack
from src.models.reminder import ReminderReceipt
from src.reminders.clock import Clock, SystemClock
from src.reminders.ledger import ReminderLedger
from src.reminders.policy import (
    REMINDER_INTERVAL,
    humanize_elapsed,
    maintenance_eligible,
    next_eligible_at,
    pending_eligible,
)

logger = logging.getLogger(__name__)


class ReminderNotEligible(Exception):
    """Raised when eligibility enforcement rejects an early reminder."""

    def __init__(self, complaint_id: str, track: ReminderTrack):
        super().__init__(
            f"A {track.value} reminder for '{complaint_id}' is not allowed yet"
        )
        self.complaint_id = complaint_id
        self.track = track


class ReminderService:
    """Answers "can I remind now?", records reminders and clears state.

    By default sends are recorded unconditionally and callers are expected
    to consult ``can_send_pending`` / ``can_send_maintenance`` first. With
    ``enforce_eligibility=True`` the send operations re-check eligibility
    and raise ``ReminderNotEligible`` instead of recording.

    Attributes:
        ledger: Reminder ledger.
        clock: Source of "now" when callers do not pass one.
        interval: Minimum spacing between reminders on a track.
        enforce_eligibility: Whether sends re-check eligibility.
        audit_logger: Optional activity trail.
    """

    def __init__(
        self,
        ledger: ReminderLedger,
        clock: Clock | None = None,
        interval: timedelta = REMINDER_INTERVAL,
        enforce_eligibility: bool = False,
        audit_logger: AuditLogger | None = None,
    ) -> None:
        self.ledger = ledger
        self.clock = clock or SystemClock()
        self.interval = interval
        self.enforce_eligibility = enforce_eligibility
        self.audit_logger = audit_logger

    # Eligibility

    def can_send_pending(
        self, complaint_id: str, created_at: datetime, now: datetime | None = None
    ) -> bool:
        """Whether a pending-track reminder is currently allowed."""
        now = now or self.clock.now()
        last = self.ledger.get_pending(complaint_id)
        return pending_eligible(created_at, last, now, self.interval)

    def can_send_maintenance(
        self, complaint_id: str, now: datetime | None = None
    ) -> bool:
        """Whether a maintenance-track reminder is currently allowed."""
        now = now or self.clock.now()
        record = self.ledger.get_maintenance(complaint_id)
        if record is None:
            return False
        return maintenance_eligible(
            record.assigned_at, record.last_reminder_at, now, self.interval
        )

    def next_pending_at(self, complaint_id: str, created_at: datetime) -> datetime:
        """Earliest instant the next pending reminder becomes eligible."""
        anchor = self.ledger.get_pending(complaint_id) or created_at
        return anchor + self.interval

    def next_maintenance_at(self, complaint_id: str) -> datetime | None:
        """Earliest instant the next maintenance reminder becomes eligible."""
        record = self.ledger.get_maintenance(complaint_id)
        if record is None:
            return None
        return next_eligible_at(
            record.last_reminder_at or record.assigned_at, self.interval
        )

    # Sending

    def _audit(self, receipt: ReminderReceipt, sender: str, role: str) -> None:
        if self.audit_logger is None:
            return
        self.audit_logger.log_event(
            ReminderSentEvent(
                event_id=generate_event_id(),
                timestamp=receipt.at,
                resource_id=receipt.complaint_id,
                user_id=sender,
                role=role,
                track=receipt.track.value,
                message=receipt.message,
            )
        )

    def send_pending_reminder(
        self,
        complaint_id: str,
        now: datetime | None = None,
        *,
        title: str | None = None,
        created_at: datetime | None = None,
        sender: str = "system",
    ) -> ReminderReceipt:
        """Record a reporter's reminder to the admin about an unassigned complaint.

        Args:
            complaint_id: Complaint being chased.
            now: Instant of the reminder. Defaults to the clock.
            title: Complaint title for the confirmation message.
            created_at: Complaint creation instant; required when
                eligibility is enforced.
            sender: Who sent the reminder (for the activity trail).

        Returns:
            Receipt with ``sent=True`` and the recorded instant.

        Raises:
            ReminderNotEligible: Only when enforcement is on and the
                interval has not elapsed.
            ValueError: When enforcement is on and ``created_at`` is missing.
            LedgerError: If the ledger could not be written.
        """
        now = now or self.clock.now()
        if self.enforce_eligibility:
            if created_at is None:
                raise ValueError("created_at is required when eligibility is enforced")
            if not self.can_send_pending(complaint_id, created_at, now):
                raise ReminderNotEligible(complaint_id, ReminderTrack.PENDING)

        self.ledger.set_pending(complaint_id, now)
        receipt = ReminderReceipt(
            at=now,
            track=ReminderTrack.PENDING,
            complaint_id=complaint_id,
            message=f"Reminder sent to admin for: {title or complaint_id}",
        )
        logger.info("[REMINDER] Pending reminder sent for %s", complaint_id)
        self._audit(receipt, sender, "student")
        return receipt

    def _send_maintenance(
        self,
        complaint_id: str,
        now: datetime | None,
        message: str,
        sender: str,
        role: str,
    ) -> ReminderReceipt:
        now = now or self.clock.now()
        if self.enforce_eligibility and not self.can_send_maintenance(complaint_id, now):
            raise ReminderNotEligible(complaint_id, ReminderTrack.MAINTENANCE)

        self.ledger.set_maintenance_reminded(complaint_id, now)
        receipt = ReminderReceipt(
            at=now,
            track=ReminderTrack.MAINTENANCE,
            complaint_id=complaint_id,
            message=message,
        )
        logger.info("[REMINDER] Maintenance reminder sent for %s", complaint_id)
        self._audit(receipt, sender, role)
        return receipt

    def send_maintenance_reminder(
        self,
        complaint_id: str,
        now: datetime | None = None,
        *,
        title: str | None = None,
        sender: str = "admin",
    ) -> ReminderReceipt:
        """Record an admin's reminder to maintenance about an assigned complaint."""
        return self._send_maintenance(
            complaint_id,
            now,
            f"Reminder sent to maintenance for: {title or complaint_id}",
            sender,
            "admin",
        )

    def send_maintenance_follow_up(
        self,
        complaint_id: str,
        now: datetime | None = None,
        *,
        title: str | None = None,
        sender: str = "system",
    ) -> ReminderReceipt:
        """Record a reporter asking the admin to chase maintenance.

        Shares the maintenance track with ``send_maintenance_reminder``.
        """
        return self._send_maintenance(
            complaint_id,
            now,
            "Reminder sent to admin to follow up with maintenance team for: "
            f"{title or complaint_id}",
            sender,
            "student",
        )

    # Labels

    def time_since_pending_reminder(
        self, complaint_id: str, now: datetime | None = None
    ) -> str | None:
        """Humanized time since the last pending reminder, or None."""
        return humanize_elapsed(
            self.ledger.get_pending(complaint_id), now or self.clock.now()
        )

    def time_since_maintenance_reminder(
        self, complaint_id: str, now: datetime | None = None
    ) -> str | None:
        """Humanized time since the last maintenance reminder, or None."""
        record = self.ledger.get_maintenance(complaint_id)
        last = record.last_reminder_at if record else None
        return humanize_elapsed(last, now or self.clock.now())

    # Clearing and batch queries

    def clear(self, complaint_id: str) -> None:
        """Drop both tracks for a complaint."""
        self.ledger.clear_pending(complaint_id)
        self.ledger.clear_maintenance(complaint_id)
        logger.debug("Cleared reminder state for %s", complaint_id)

    def purge_resolved(self, complaints: Iterable[Complaint]) -> list[str]:
        """Clear reminder state left behind for resolved complaints.

        Returns:
            IDs of the resolved complaints that were cleared.
        """
        cleared: list[str] = []
        for complaint in complaints:
            if complaint.status != IssueStatus.RESOLVED:
                continue
            self.clear(complaint.complaint_id)
            cleared.append(complaint.complaint_id)
            if self.audit_logger is not None:
                self.audit_logger.log_event(
                    AuditEvent(
                        event_id=generate_event_id(),
                        action=AuditAction.REMINDERS_CLEARED,
                        resource_id=complaint.complaint_id,
                    )
                )
        if cleared:
            logger.info("Purged reminder state for %d resolved complaint(s)", len(cleared))
        return cleared

    def pending_needing_reminders(
        self, complaints: Iterable[Complaint], now: datetime | None = None
    ) -> list[Complaint]:
        """Reported complaints whose pending reminder is due."""
        now = now or self.clock.now()
        return [
            c
            for c in complaints
            if c.status == IssueStatus.REPORTED
            and self.can_send_pending(c.complaint_id, c.created_at, now)
        ]

    def assigned_needing_maintenance_reminders(
        self, complaints: Iterable[Complaint], now: datetime | None = None
    ) -> list[Complaint]:
        """Assigned complaints whose maintenance reminder is due."""
        now = now or self.clock.now()
        return [
            c
            for c in complaints
            if c.status == IssueStatus.ASSIGNED
            and self.can_send_maintenance(c.complaint_id, now)
        ]


def summarize_complaints(complaints: Iterable[Complaint]) -> dict[str, dict[str, int]]:
    """Dashboard counts by status and by category.

    Returns:
        ``{"total": {"all": n}, "status": {...}, "category": {...}}`` with
        every enum value present, zero-filled.
    """
    items = list(complaints)
    status_counts = {s.value: 0 for s in IssueStatus}
    category_counts = {c.value: 0 for c in IssueCategory}
    for complaint in items:
        status_counts[complaint.status.value] += 1
        category_counts[complaint.category.value] += 1
    return {
        "total": {"all": len(items)},
        "status": status_counts,
        "category": category_counts,
    }
