"""Pytest configuration and fixtures."""

from datetime import UTC, datetime
from pathlib import Path

import pytest

from src.lifecycle import ComplaintLifecycle, InMemoryComplaintRepository
from src.models import ComplaintCreate, IssueCategory, IssuePriority
from src.reminders import FixedClock, InMemoryStore, ReminderLedger, ReminderService

T0 = datetime(2024, 3, 1, 9, 0, 0, tzinfo=UTC)


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def clock() -> FixedClock:
    """Clock frozen at T0."""
    return FixedClock(T0)


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def ledger(store: InMemoryStore) -> ReminderLedger:
    return ReminderLedger(store)


@pytest.fixture
def repository() -> InMemoryComplaintRepository:
    return InMemoryComplaintRepository()


@pytest.fixture
def lifecycle(
    repository: InMemoryComplaintRepository,
    ledger: ReminderLedger,
    clock: FixedClock,
) -> ComplaintLifecycle:
    return ComplaintLifecycle(repository=repository, ledger=ledger, clock=clock)


@pytest.fixture
def service(ledger: ReminderLedger, clock: FixedClock) -> ReminderService:
    return ReminderService(ledger=ledger, clock=clock)


@pytest.fixture
def sample_create() -> ComplaintCreate:
    """Reporter input for a leaking tap."""
    return ComplaintCreate(
        title="Leaking tap",
        description="Tap in the second floor washroom drips all night.",
        location="Block B, 2nd floor",
        category=IssueCategory.WATER,
        priority=IssuePriority.HIGH,
    )
