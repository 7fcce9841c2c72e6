"""Complaint state machine.

Statuses only move forward, one step at a time::

    Reported -> Assigned -> Resolved

Moving into Assigned starts maintenance reminder tracking; moving into
Resolved drops both reminder tracks. Ledger effects run only after the
transition has been validated, and the complaint is saved only after the
ledger effects succeed, so a rejected or failed transition leaves
everything as it was.

Callers must have checked that the actor is an admin before calling
``transition``.
"""

import logging
import uuid
from datetime import UTC, datetime

from src.audit.logger import AuditLogger, generate_event_id
from src.audit.models import ComplaintReportedEvent, StatusChangedEvent
from src.config import DEFAULT_ASSIGNEE
from src.lifecycle.errors import InvalidTransition, NotFound
from src.lifecycle.repository import ComplaintRepository
from src.models.complaint import Complaint, ComplaintCreate
from src.models.enums import IssueStatus
from src.reminders.clock import Clock, SystemClock
from src.reminders.ledger import ReminderLedger

logger = logging.getLogger(__name__)

# The only legal forward step from each status
NEXT_STATUS: dict[IssueStatus, IssueStatus] = {
    IssueStatus.REPORTED: IssueStatus.ASSIGNED,
    IssueStatus.ASSIGNED: IssueStatus.RESOLVED,
}


def generate_complaint_id(now: datetime | None = None) -> str:
    """Generate a unique complaint ID.

    Format: CMP-{timestamp}-{uuid4_short}
    Example: CMP-20240115143052-a1b2c3d4
    """
    timestamp = (now or datetime.now(UTC)).strftime("%Y%m%d%H%M%S")
    return f"CMP-{timestamp}-{uuid.uuid4().hex[:8]}"


def is_legal_transition(current: IssueStatus, requested: IssueStatus) -> bool:
    """Whether ``requested`` is the single forward step from ``current``."""
    return NEXT_STATUS.get(current) == requested


class ComplaintLifecycle:
    """Applies status transitions and their reminder-ledger side effects.

    Attributes:
        repository: Where complaints are loaded from and saved to.
        ledger: Reminder ledger receiving assignment/resolution effects.
        clock: Source of "now" when callers do not pass one.
        default_assignee: Label used when assigning without a name.
        audit_logger: Optional activity trail.
    """

    def __init__(
        self,
        repository: ComplaintRepository,
        ledger: ReminderLedger,
        clock: Clock | None = None,
        default_assignee: str = DEFAULT_ASSIGNEE,
        audit_logger: AuditLogger | None = None,
    ) -> None:
        self.repository = repository
        self.ledger = ledger
        self.clock = clock or SystemClock()
        self.default_assignee = default_assignee
        self.audit_logger = audit_logger

    def report(
        self,
        data: ComplaintCreate,
        now: datetime | None = None,
        reporter: str = "system",
    ) -> Complaint:
        """Create a new complaint in the Reported state.

        Args:
            data: Reporter-supplied fields.
            now: Creation instant. Defaults to the clock.
            reporter: Who raised the complaint (for the activity trail).

        Returns:
            The stored complaint.
        """
        now = now or self.clock.now()
        complaint = Complaint(
            complaint_id=generate_complaint_id(now),
            title=data.title,
            description=data.description,
            location=data.location,
            category=data.category,
            priority=data.priority,
            status=IssueStatus.REPORTED,
            assignee="",
            created_at=now,
            updated_at=now,
        )
        self.repository.save(complaint)
        logger.info(
            "Complaint %s reported: %s (%s, %s)",
            complaint.complaint_id,
            complaint.title,
            complaint.category.value,
            complaint.priority.value,
        )

        if self.audit_logger is not None:
            self.audit_logger.log_event(
                ComplaintReportedEvent(
                    event_id=generate_event_id(),
                    timestamp=now,
                    resource_id=complaint.complaint_id,
                    user_id=reporter,
                    title=complaint.title,
                    category=complaint.category.value,
                    priority=complaint.priority.value,
                    location=complaint.location,
                )
            )
        return complaint

    def get(self, complaint_id: str) -> Complaint:
        """Load a complaint.

        Raises:
            NotFound: If no complaint has this ID.
        """
        complaint = self.repository.get(complaint_id)
        if complaint is None:
            raise NotFound(complaint_id)
        return complaint

    def transition(
        self,
        complaint_id: str,
        new_status: IssueStatus,
        assignee: str | None = None,
        now: datetime | None = None,
        actor: str = "admin",
    ) -> Complaint:
        """Move a complaint to its next status.

        Args:
            complaint_id: Complaint to change.
            new_status: Requested status; must be the next forward step.
            assignee: Assignee label for Reported -> Assigned. Blank or
                missing labels fall back to ``default_assignee``.
            now: Instant of the change. Defaults to the clock.
            actor: Admin performing the change (for the activity trail).

        Returns:
            The updated complaint.

        Raises:
            NotFound: If the complaint does not exist.
            InvalidTransition: If ``new_status`` is not the next step.
            LedgerError: If the ledger side effect could not be persisted.
            OSError: If the complaint could not be saved.

            On either failure the reminder state is restored and the stored
            complaint is left unchanged.
        """
        complaint = self.get(complaint_id)
        current = complaint.status
        if not is_legal_transition(current, new_status):
            logger.warning(
                "Rejected transition for %s: %s -> %s",
                complaint_id,
                current.value,
                new_status.value,
            )
            raise InvalidTransition(complaint_id, current, new_status)

        now = now or self.clock.now()
        updates: dict = {"status": new_status, "updated_at": now}
        if new_status == IssueStatus.ASSIGNED:
            updates["assignee"] = (assignee or "").strip() or self.default_assignee
        updated = Complaint.model_validate({**complaint.model_dump(), **updates})

        # Ledger and complaint change together or not at all
        previous = self.ledger.snapshot(complaint_id)
        try:
            if new_status == IssueStatus.ASSIGNED:
                self.ledger.upsert_maintenance_assigned(complaint_id, now)
            elif new_status == IssueStatus.RESOLVED:
                self.ledger.clear_pending(complaint_id)
                self.ledger.clear_maintenance(complaint_id)
            self.repository.save(updated)
        except Exception:
            logger.error(
                "Transition of %s failed; restoring its reminder state", complaint_id
            )
            self.ledger.restore(complaint_id, previous)
            raise
        logger.info(
            "Complaint %s moved %s -> %s (assignee: %s)",
            complaint_id,
            current.value,
            new_status.value,
            updated.assignee or "-",
        )

        if self.audit_logger is not None:
            self.audit_logger.log_event(
                StatusChangedEvent(
                    event_id=generate_event_id(),
                    timestamp=now,
                    resource_id=complaint_id,
                    user_id=actor,
                    previous_status=current.value,
                    new_status=new_status.value,
                    assignee=updated.assignee,
                )
            )
        return updated

    def assign(
        self,
        complaint_id: str,
        assignee: str | None = None,
        now: datetime | None = None,
        actor: str = "admin",
    ) -> Complaint:
        """Shorthand for ``transition(..., IssueStatus.ASSIGNED)``."""
        return self.transition(
            complaint_id, IssueStatus.ASSIGNED, assignee=assignee, now=now, actor=actor
        )

    def resolve(
        self, complaint_id: str, now: datetime | None = None, actor: str = "admin"
    ) -> Complaint:
        """Shorthand for ``transition(..., IssueStatus.RESOLVED)``."""
        return self.transition(complaint_id, IssueStatus.RESOLVED, now=now, actor=actor)

    def list_complaints(self, status: IssueStatus | None = None) -> list[Complaint]:
        """Return stored complaints, newest first, optionally by status."""
        complaints = self.repository.list_all()
        if status is not None:
            complaints = [c for c in complaints if c.status == status]
        complaints.sort(key=lambda c: c.created_at, reverse=True)
        return complaints
