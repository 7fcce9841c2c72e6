"""Reminder ledger: per-complaint, per-track reminder timestamps.

Persisted layout (two logical collections inside one key-value store)::

    pending_reminders/<complaint_id>      -> epoch milliseconds
    maintenance_reminders/<complaint_id>  -> {"assigned_at": ms | null,
                                              "last_reminder_at": ms | null}

The ledger is the only writer of these entries.
"""

import logging
from datetime import UTC, datetime, timedelta
from typing import Any

from src.models.enums import ReminderTrack
from src.models.reminder import MaintenanceRecord
from src.reminders.store import KeyValueStore

logger = logging.getLogger(__name__)

PENDING_PREFIX = "pending_reminders/"
MAINTENANCE_PREFIX = "maintenance_reminders/"

_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)


class LedgerError(Exception):
    """Raised when the durable store fails during a ledger mutation."""

    def __init__(self, message: str, key: str, operation: str):
        """Initialize ledger error.

        Args:
            message: Error message.
            key: Store key being written.
            operation: Ledger operation that failed.
        """
        super().__init__(message)
        self.key = key
        self.operation = operation


def to_millis(instant: datetime) -> int:
    """Convert an aware datetime to integer epoch milliseconds."""
    if instant.tzinfo is None:
        raise ValueError("instants must be timezone-aware")
    return (instant - _EPOCH) // timedelta(milliseconds=1)


def from_millis(value: Any) -> datetime | None:
    """Convert stored epoch milliseconds back to a UTC datetime.

    Anything that is not a number reads as "no timestamp".
    """
    if isinstance(value, bool) or not isinstance(value, int | float):
        return None
    return _EPOCH + timedelta(milliseconds=value)


class ReminderLedger:
    """Durable record of reminder and assignment instants.

    Reads never raise for unknown complaints; they return ``None``.
    Mutations are written straight through to the store.
    """

    def __init__(self, store: KeyValueStore) -> None:
        self.store = store

    @staticmethod
    def _key(track: ReminderTrack, complaint_id: str) -> str:
        prefix = PENDING_PREFIX if track == ReminderTrack.PENDING else MAINTENANCE_PREFIX
        return f"{prefix}{complaint_id}"

    def _write(self, key: str, value: Any, operation: str) -> None:
        try:
            self.store.set(key, value)
        except (OSError, ValueError) as e:
            logger.error("Ledger %s failed for %s: %s", operation, key, e)
            raise LedgerError(f"{operation} failed: {e}", key, operation) from e

    def _delete(self, key: str, operation: str) -> None:
        try:
            self.store.delete(key)
        except (OSError, ValueError) as e:
            logger.error("Ledger %s failed for %s: %s", operation, key, e)
            raise LedgerError(f"{operation} failed: {e}", key, operation) from e

    def snapshot(self, complaint_id: str) -> dict[str, Any]:
        """Capture the raw stored entries of both tracks for one complaint.

        Absent entries are captured as ``None``. Pass the result to
        :meth:`restore` to put the entries back exactly as they were.
        """
        return {
            self._key(track, complaint_id): self.store.get(
                self._key(track, complaint_id)
            )
            for track in ReminderTrack
        }

    def restore(self, complaint_id: str, snapshot: dict[str, Any]) -> None:
        """Put back entries captured by :meth:`snapshot`."""
        for key, value in snapshot.items():
            if value is None:
                self._delete(key, "restore")
            else:
                self._write(key, value, "restore")
        logger.info("Reminder state for %s restored", complaint_id)

    # Pending track

    def get_pending(self, complaint_id: str) -> datetime | None:
        """Return the last pending-reminder instant, if any."""
        return from_millis(self.store.get(self._key(ReminderTrack.PENDING, complaint_id)))

    def set_pending(self, complaint_id: str, instant: datetime) -> None:
        """Record a pending reminder, overwriting any earlier one."""
        key = self._key(ReminderTrack.PENDING, complaint_id)
        self._write(key, to_millis(instant), "set_pending")
        logger.debug("Pending reminder for %s recorded at %s", complaint_id, instant)

    def clear_pending(self, complaint_id: str) -> None:
        """Drop the pending-track entry. No error if absent."""
        self._delete(self._key(ReminderTrack.PENDING, complaint_id), "clear_pending")

    # Maintenance track

    def get_maintenance(self, complaint_id: str) -> MaintenanceRecord | None:
        """Return the maintenance-track record, if any."""
        raw = self.store.get(self._key(ReminderTrack.MAINTENANCE, complaint_id))
        if not isinstance(raw, dict):
            return None
        try:
            return MaintenanceRecord(
                assigned_at=from_millis(raw.get("assigned_at")),
                last_reminder_at=from_millis(raw.get("last_reminder_at")),
            )
        except ValueError as e:
            logger.warning("Ignoring bad maintenance record for %s: %s", complaint_id, e)
            return None

    def _put_maintenance(
        self, complaint_id: str, record: MaintenanceRecord, operation: str
    ) -> None:
        value = {
            "assigned_at": to_millis(record.assigned_at) if record.assigned_at else None,
            "last_reminder_at": (
                to_millis(record.last_reminder_at) if record.last_reminder_at else None
            ),
        }
        self._write(self._key(ReminderTrack.MAINTENANCE, complaint_id), value, operation)

    def upsert_maintenance_assigned(self, complaint_id: str, instant: datetime) -> None:
        """Start maintenance tracking for a newly assigned complaint.

        An existing ``assigned_at`` is never moved. A record without one
        gets it filled in; a missing record is created with no reminder yet.
        """
        existing = self.get_maintenance(complaint_id)
        if existing is not None and existing.assigned_at is not None:
            logger.debug("Maintenance tracking already started for %s", complaint_id)
            return
        last = existing.last_reminder_at if existing else None
        record = MaintenanceRecord(assigned_at=instant, last_reminder_at=last)
        self._put_maintenance(complaint_id, record, "upsert_maintenance_assigned")
        logger.debug("Maintenance tracking started for %s at %s", complaint_id, instant)

    def set_maintenance_reminded(self, complaint_id: str, instant: datetime) -> None:
        """Record a maintenance reminder.

        Without a record, one is created with both instants set to ``instant``.
        Otherwise only ``last_reminder_at`` moves; a missing ``assigned_at``
        is back-filled with ``instant``.

        Raises:
            ValueError: If ``instant`` is earlier than the recorded
                ``assigned_at``; the record is left unchanged.
            LedgerError: If the store write fails.
        """
        existing = self.get_maintenance(complaint_id)
        assigned_at = existing.assigned_at if existing else None
        if assigned_at is not None and instant < assigned_at:
            raise ValueError(
                f"cannot record a maintenance reminder for {complaint_id} "
                f"before it was assigned ({assigned_at.isoformat()})"
            )
        record = MaintenanceRecord(
            assigned_at=assigned_at or instant, last_reminder_at=instant
        )
        self._put_maintenance(complaint_id, record, "set_maintenance_reminded")
        logger.debug("Maintenance reminder for %s recorded at %s", complaint_id, instant)

    def clear_maintenance(self, complaint_id: str) -> None:
        """Drop the maintenance-track entry. No error if absent."""
        self._delete(
            self._key(ReminderTrack.MAINTENANCE, complaint_id), "clear_maintenance"
        )
