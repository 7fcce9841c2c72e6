"""Activity trail logger with JSON file storage.

Events are stored in JSON Lines format, one file per UTC day:
    audit_logs/
        2024-01-15.jsonl
        2024-01-16.jsonl
        ...
"""

import json
import logging
import os
import uuid
from collections.abc import Callable
from datetime import UTC, datetime
from pathlib import Path

from src.audit.models import (
    AuditAction,
    AuditEvent,
    ComplaintReportedEvent,
    ReminderSentEvent,
    StatusChangedEvent,
)

logger = logging.getLogger(__name__)

# Type alias for all event types
EventType = AuditEvent | ComplaintReportedEvent | StatusChangedEvent | ReminderSentEvent

_EARLIEST = datetime(2020, 1, 1, tzinfo=UTC)


def generate_event_id() -> str:
    """Generate a unique event ID.

    Format: EVT-{timestamp}-{uuid4_short}
    Example: EVT-20240115143052-a1b2c3d4
    """
    timestamp = datetime.now(UTC).strftime("%Y%m%d%H%M%S")
    short_uuid = uuid.uuid4().hex[:8]
    return f"EVT-{timestamp}-{short_uuid}"


class AuditLogger:
    """Append-only activity logger.

    Attributes:
        log_dir: Directory where activity logs are stored.
    """

    def __init__(self, log_dir: Path | str | None = None) -> None:
        """Initialize the audit logger.

        Args:
            log_dir: Directory for audit logs. If None, uses './audit_logs'.
        """
        self.log_dir = Path(log_dir) if log_dir is not None else Path("audit_logs")
        self.log_dir.mkdir(parents=True, exist_ok=True)

    def _get_log_file(self, timestamp: datetime) -> Path:
        return self.log_dir / f"{timestamp.astimezone(UTC):%Y-%m-%d}.jsonl"

    def log_event(self, event: EventType) -> str:
        """Append an event to the log file for its day.

        Args:
            event: The event to log.

        Returns:
            The event ID of the logged event.

        Raises:
            OSError: If unable to write to log file.
        """
        base_event = event if isinstance(event, AuditEvent) else event.to_base_event()
        json_line = json.dumps(base_event.model_dump(mode="json"), ensure_ascii=False)
        log_file = self._get_log_file(base_event.timestamp)

        try:
            with open(log_file, "a", encoding="utf-8") as f:
                f.write(json_line + "\n")
                f.flush()
                os.fsync(f.fileno())
        except OSError as e:
            logger.error("Failed to write audit event %s: %s", base_event.event_id, e)
            raise

        logger.debug("Logged audit event %s to %s", base_event.event_id, log_file)
        return base_event.event_id

    def _read_events(
        self,
        matches: Callable[[dict], bool],
        start_date: datetime | None,
        end_date: datetime | None,
    ) -> list[AuditEvent]:
        start = (start_date or _EARLIEST).date()
        end = (end_date or datetime.now(UTC)).date()
        events: list[AuditEvent] = []

        for log_file in sorted(self.log_dir.glob("*.jsonl")):
            try:
                file_date = datetime.strptime(log_file.stem, "%Y-%m-%d").date()
            except ValueError:
                continue
            if file_date < start or file_date > end:
                continue

            try:
                with open(log_file, encoding="utf-8") as f:
                    for line in f:
                        line = line.strip()
                        if not line:
                            continue
                        try:
                            data = json.loads(line)
                            if matches(data):
                                events.append(AuditEvent.model_validate(data))
                        except (json.JSONDecodeError, ValueError) as e:
                            logger.warning(
                                "Skipping malformed event in %s: %s", log_file, e
                            )
            except OSError as e:
                logger.error("Failed to read audit log %s: %s", log_file, e)

        events.sort(key=lambda e: e.timestamp)
        return events

    def get_events(
        self,
        resource_id: str,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
    ) -> list[AuditEvent]:
        """Retrieve events for one complaint, sorted by timestamp."""
        return self._read_events(
            lambda data: data.get("resource_id") == resource_id, start_date, end_date
        )

    def get_events_by_action(
        self,
        action: AuditAction,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
    ) -> list[AuditEvent]:
        """Retrieve events of one action type, sorted by timestamp."""
        return self._read_events(
            lambda data: data.get("action") == action.value, start_date, end_date
        )

    def get_all_events(
        self,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
    ) -> list[AuditEvent]:
        """Retrieve every event within a date range, sorted by timestamp."""
        return self._read_events(lambda data: True, start_date, end_date)
