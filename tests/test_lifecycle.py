"""Tests for the complaint state machine."""

from datetime import UTC, datetime, timedelta
from pathlib import Path
from unittest.mock import patch

import pytest

from src.audit import AuditAction, AuditLogger
from src.lifecycle import (
    ComplaintLifecycle,
    FileComplaintRepository,
    InMemoryComplaintRepository,
    InvalidTransition,
    NotFound,
    generate_complaint_id,
    is_legal_transition,
)
from src.models import ComplaintCreate, IssueStatus, MaintenanceRecord
from src.reminders import FixedClock, InMemoryStore, LedgerError, ReminderLedger

T0 = datetime(2024, 3, 1, 9, 0, 0, tzinfo=UTC)


class TestTransitionTable:
    """Tests for the forward-only transition rules."""

    @pytest.mark.parametrize(
        ("current", "requested", "legal"),
        [
            (IssueStatus.REPORTED, IssueStatus.ASSIGNED, True),
            (IssueStatus.ASSIGNED, IssueStatus.RESOLVED, True),
            (IssueStatus.REPORTED, IssueStatus.RESOLVED, False),
            (IssueStatus.REPORTED, IssueStatus.REPORTED, False),
            (IssueStatus.ASSIGNED, IssueStatus.ASSIGNED, False),
            (IssueStatus.ASSIGNED, IssueStatus.REPORTED, False),
            (IssueStatus.RESOLVED, IssueStatus.RESOLVED, False),
            (IssueStatus.RESOLVED, IssueStatus.ASSIGNED, False),
            (IssueStatus.RESOLVED, IssueStatus.REPORTED, False),
        ],
    )
    def test_is_legal_transition(
        self, current: IssueStatus, requested: IssueStatus, legal: bool
    ) -> None:
        assert is_legal_transition(current, requested) is legal

    def test_complaint_id_format(self) -> None:
        complaint_id = generate_complaint_id(T0)
        prefix, stamp, suffix = complaint_id.split("-")
        assert prefix == "CMP"
        assert stamp == "20240301090000"
        assert len(suffix) == 8


class TestReport:
    """Tests for reporting complaints."""

    def test_report_starts_reported(
        self, lifecycle: ComplaintLifecycle, sample_create: ComplaintCreate
    ) -> None:
        complaint = lifecycle.report(sample_create)
        assert complaint.status == IssueStatus.REPORTED
        assert complaint.assignee == ""
        assert complaint.created_at == T0
        assert lifecycle.get(complaint.complaint_id) == complaint

    def test_ids_are_unique(
        self, lifecycle: ComplaintLifecycle, sample_create: ComplaintCreate
    ) -> None:
        ids = {lifecycle.report(sample_create).complaint_id for _ in range(20)}
        assert len(ids) == 20

    def test_get_unknown_raises(self, lifecycle: ComplaintLifecycle) -> None:
        with pytest.raises(NotFound) as exc_info:
            lifecycle.get("CMP-missing")
        assert exc_info.value.complaint_id == "CMP-missing"


class TestTransition:
    """Tests for status transitions and their ledger effects."""

    def test_assign_defaults_label_and_starts_tracking(
        self,
        lifecycle: ComplaintLifecycle,
        ledger: ReminderLedger,
        sample_create: ComplaintCreate,
    ) -> None:
        complaint = lifecycle.report(sample_create)
        updated = lifecycle.transition(complaint.complaint_id, IssueStatus.ASSIGNED)

        assert updated.status == IssueStatus.ASSIGNED
        assert updated.assignee == "Maintenance Staff"
        record = ledger.get_maintenance(complaint.complaint_id)
        assert record is not None
        assert record.assigned_at == T0
        assert record.last_reminder_at is None

    @pytest.mark.parametrize("label", [None, "", "   "])
    def test_blank_assignee_uses_default(
        self,
        lifecycle: ComplaintLifecycle,
        sample_create: ComplaintCreate,
        label: str | None,
    ) -> None:
        complaint = lifecycle.report(sample_create)
        updated = lifecycle.assign(complaint.complaint_id, assignee=label)
        assert updated.assignee == "Maintenance Staff"

    def test_assign_with_label(
        self, lifecycle: ComplaintLifecycle, sample_create: ComplaintCreate
    ) -> None:
        complaint = lifecycle.report(sample_create)
        updated = lifecycle.assign(complaint.complaint_id, assignee="Ravi (plumber)")
        assert updated.assignee == "Ravi (plumber)"
        assert lifecycle.get(complaint.complaint_id).assignee == "Ravi (plumber)"

    def test_custom_default_assignee(
        self,
        repository: InMemoryComplaintRepository,
        ledger: ReminderLedger,
        clock: FixedClock,
        sample_create: ComplaintCreate,
    ) -> None:
        lifecycle = ComplaintLifecycle(
            repository, ledger, clock, default_assignee="Estates Team"
        )
        complaint = lifecycle.report(sample_create)
        assert lifecycle.assign(complaint.complaint_id).assignee == "Estates Team"

    def test_resolve_clears_both_tracks(
        self,
        lifecycle: ComplaintLifecycle,
        ledger: ReminderLedger,
        clock: FixedClock,
        sample_create: ComplaintCreate,
    ) -> None:
        complaint = lifecycle.report(sample_create)
        ledger.set_pending(complaint.complaint_id, T0)
        lifecycle.assign(complaint.complaint_id)
        clock.advance(timedelta(days=3))
        ledger.set_maintenance_reminded(complaint.complaint_id, clock.now())

        resolved = lifecycle.resolve(complaint.complaint_id)

        assert resolved.status == IssueStatus.RESOLVED
        assert resolved.updated_at == T0 + timedelta(days=3)
        assert ledger.get_pending(complaint.complaint_id) is None
        assert ledger.get_maintenance(complaint.complaint_id) is None

    def test_resolve_without_ledger_entries(
        self, lifecycle: ComplaintLifecycle, ledger: ReminderLedger, sample_create
    ) -> None:
        complaint = lifecycle.report(sample_create)
        lifecycle.assign(complaint.complaint_id)
        ledger.clear_maintenance(complaint.complaint_id)

        lifecycle.resolve(complaint.complaint_id)
        assert ledger.get_maintenance(complaint.complaint_id) is None
        assert ledger.get_pending(complaint.complaint_id) is None

    def test_reported_to_resolved_rejected(
        self,
        lifecycle: ComplaintLifecycle,
        ledger: ReminderLedger,
        sample_create: ComplaintCreate,
    ) -> None:
        complaint = lifecycle.report(sample_create)
        ledger.set_pending(complaint.complaint_id, T0)

        with pytest.raises(InvalidTransition) as exc_info:
            lifecycle.transition(complaint.complaint_id, IssueStatus.RESOLVED)

        assert exc_info.value.current == IssueStatus.REPORTED
        assert exc_info.value.requested == IssueStatus.RESOLVED
        assert lifecycle.get(complaint.complaint_id).status == IssueStatus.REPORTED
        assert ledger.get_pending(complaint.complaint_id) == T0

    def test_repeat_assign_rejected_without_side_effects(
        self,
        lifecycle: ComplaintLifecycle,
        ledger: ReminderLedger,
        clock: FixedClock,
        sample_create: ComplaintCreate,
    ) -> None:
        complaint = lifecycle.report(sample_create)
        lifecycle.assign(complaint.complaint_id, assignee="First")
        clock.advance(timedelta(days=1))

        with pytest.raises(InvalidTransition):
            lifecycle.assign(complaint.complaint_id, assignee="Second")

        stored = lifecycle.get(complaint.complaint_id)
        assert stored.assignee == "First"
        record = ledger.get_maintenance(complaint.complaint_id)
        assert record is not None
        assert record.assigned_at == T0

    @pytest.mark.parametrize(
        "requested", [IssueStatus.REPORTED, IssueStatus.ASSIGNED, IssueStatus.RESOLVED]
    )
    def test_resolved_is_terminal(
        self,
        lifecycle: ComplaintLifecycle,
        sample_create: ComplaintCreate,
        requested: IssueStatus,
    ) -> None:
        complaint = lifecycle.report(sample_create)
        lifecycle.assign(complaint.complaint_id)
        lifecycle.resolve(complaint.complaint_id)

        with pytest.raises(InvalidTransition):
            lifecycle.transition(complaint.complaint_id, requested)
        assert lifecycle.get(complaint.complaint_id).status == IssueStatus.RESOLVED

    def test_unknown_complaint(self, lifecycle: ComplaintLifecycle) -> None:
        with pytest.raises(NotFound):
            lifecycle.transition("CMP-missing", IssueStatus.ASSIGNED)

    def test_ledger_failure_leaves_complaint_unchanged(
        self,
        lifecycle: ComplaintLifecycle,
        ledger: ReminderLedger,
        sample_create: ComplaintCreate,
    ) -> None:
        complaint = lifecycle.report(sample_create)
        error = LedgerError("boom", "k", "upsert_maintenance_assigned")

        with patch.object(ledger, "upsert_maintenance_assigned", side_effect=error):
            with pytest.raises(LedgerError):
                lifecycle.assign(complaint.complaint_id)

        stored = lifecycle.get(complaint.complaint_id)
        assert stored.status == IssueStatus.REPORTED
        assert stored.assignee == ""

    def test_save_failure_on_resolve_restores_reminders(
        self,
        lifecycle: ComplaintLifecycle,
        repository: InMemoryComplaintRepository,
        ledger: ReminderLedger,
        clock: FixedClock,
        sample_create: ComplaintCreate,
    ) -> None:
        complaint = lifecycle.report(sample_create)
        cid = complaint.complaint_id
        lifecycle.assign(cid)
        reminded_at = T0 + timedelta(days=3)
        ledger.set_pending(cid, reminded_at)
        ledger.set_maintenance_reminded(cid, reminded_at)
        clock.set(reminded_at + timedelta(hours=1))

        with patch.object(repository, "save", side_effect=OSError("disk full")):
            with pytest.raises(OSError):
                lifecycle.resolve(cid)

        assert lifecycle.get(cid).status == IssueStatus.ASSIGNED
        assert ledger.get_pending(cid) == reminded_at
        assert ledger.get_maintenance(cid) == MaintenanceRecord(
            assigned_at=T0, last_reminder_at=reminded_at
        )

    def test_save_failure_on_assign_leaves_no_tracking(
        self,
        lifecycle: ComplaintLifecycle,
        repository: InMemoryComplaintRepository,
        ledger: ReminderLedger,
        sample_create: ComplaintCreate,
    ) -> None:
        complaint = lifecycle.report(sample_create)

        with patch.object(repository, "save", side_effect=OSError("disk full")):
            with pytest.raises(OSError):
                lifecycle.assign(complaint.complaint_id)

        assert lifecycle.get(complaint.complaint_id).status == IssueStatus.REPORTED
        assert ledger.get_maintenance(complaint.complaint_id) is None

    def test_partial_ledger_failure_on_resolve_is_undone(
        self,
        lifecycle: ComplaintLifecycle,
        ledger: ReminderLedger,
        sample_create: ComplaintCreate,
    ) -> None:
        complaint = lifecycle.report(sample_create)
        cid = complaint.complaint_id
        lifecycle.assign(cid)
        ledger.set_pending(cid, T0)
        error = LedgerError("boom", "k", "clear_maintenance")

        with patch.object(ledger, "clear_maintenance", side_effect=error):
            with pytest.raises(LedgerError):
                lifecycle.resolve(cid)

        assert lifecycle.get(cid).status == IssueStatus.ASSIGNED
        assert ledger.get_pending(cid) == T0
        assert ledger.get_maintenance(cid) == MaintenanceRecord(assigned_at=T0)

    def test_list_filters_by_status(
        self, lifecycle: ComplaintLifecycle, clock: FixedClock, sample_create
    ) -> None:
        first = lifecycle.report(sample_create)
        clock.advance(timedelta(minutes=5))
        second = lifecycle.report(sample_create)
        lifecycle.assign(first.complaint_id)

        assert [c.complaint_id for c in lifecycle.list_complaints()] == [
            second.complaint_id,
            first.complaint_id,
        ]
        assigned = lifecycle.list_complaints(IssueStatus.ASSIGNED)
        assert [c.complaint_id for c in assigned] == [first.complaint_id]


class TestFileRepository:
    """Tests for the file-backed repository and activity trail."""

    def test_full_lifecycle_on_disk(
        self, tmp_path: Path, ledger: ReminderLedger, sample_create: ComplaintCreate
    ) -> None:
        audit_logger = AuditLogger(log_dir=tmp_path / "audit")
        lifecycle = ComplaintLifecycle(
            FileComplaintRepository(tmp_path / "complaints"),
            ledger,
            FixedClock(T0),
            audit_logger=audit_logger,
        )
        complaint = lifecycle.report(sample_create, reporter="asha")
        lifecycle.assign(complaint.complaint_id, actor="warden")
        lifecycle.resolve(complaint.complaint_id, actor="warden")

        reloaded = FileComplaintRepository(tmp_path / "complaints").get(
            complaint.complaint_id
        )
        assert reloaded is not None
        assert reloaded.status == IssueStatus.RESOLVED

        events = audit_logger.get_events(
            complaint.complaint_id, start_date=T0, end_date=T0
        )
        assert [e.action for e in events] == [
            AuditAction.COMPLAINT_REPORTED,
            AuditAction.STATUS_CHANGED,
            AuditAction.STATUS_CHANGED,
        ]
        assert events[0].user_id == "asha"
        assert events[2].details["new_status"] == "Resolved"

    def test_unreadable_file_is_none(self, tmp_path: Path) -> None:
        repository = FileComplaintRepository(tmp_path)
        (tmp_path / "CMP-bad.json").write_text("{oops")
        assert repository.get("CMP-bad") is None
        assert repository.list_all() == []

    def test_failed_save_keeps_previous_file(
        self, tmp_path: Path, sample_create: ComplaintCreate
    ) -> None:
        repository = FileComplaintRepository(tmp_path)
        lifecycle = ComplaintLifecycle(
            repository, ReminderLedger(InMemoryStore()), FixedClock(T0)
        )
        complaint = lifecycle.report(sample_create)

        with patch("src.lifecycle.repository.os.replace", side_effect=OSError("full")):
            with pytest.raises(OSError):
                lifecycle.assign(complaint.complaint_id)

        reloaded = repository.get(complaint.complaint_id)
        assert reloaded is not None
        assert reloaded.status == IssueStatus.REPORTED
        assert list(tmp_path.glob("*.tmp")) == []
