"""Enumerations for the complaint tracking system."""

from enum import Enum


class IssueCategory(str, Enum):
    """Kind of maintenance problem being reported."""

    ELECTRICITY = "Electricity"
    WATER = "Water"
    CLEANLINESS = "Cleanliness"
    OTHER = "Other"


class IssuePriority(str, Enum):
    """Urgency of a complaint, ordered from lowest to highest."""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    CRITICAL = "Critical"

    @property
    def rank(self) -> int:
        """Position in the ordering (LOW is 0)."""
        return list(IssuePriority).index(self)


class IssueStatus(str, Enum):
    """Lifecycle status of a complaint.

    Statuses only move forward: REPORTED -> ASSIGNED -> RESOLVED.
    """

    REPORTED = "Reported"
    ASSIGNED = "Assigned"
    RESOLVED = "Resolved"


class ReminderTrack(str, Enum):
    """Independent reminder channels kept per complaint."""

    PENDING = "pending"  # reporter nudging admin about an unassigned item
    MAINTENANCE = "maintenance"  # nudging admin to chase maintenance
