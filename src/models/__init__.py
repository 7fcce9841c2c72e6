"""Data models for the complaint tracking system."""

from src.models.complaint import Complaint, ComplaintCreate
from src.models.enums import IssueCategory, IssuePriority, IssueStatus, ReminderTrack
from src.models.reminder import MaintenanceRecord, ReminderReceipt

__all__ = [
    # Enums
    "IssueCategory",
    "IssuePriority",
    "IssueStatus",
    "ReminderTrack",
    # Complaint models
    "Complaint",
    "ComplaintCreate",
    # Reminder models
    "MaintenanceRecord",
    "ReminderReceipt",
]
