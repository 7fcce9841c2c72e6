"""Complaint lifecycle: reporting and forward-only status transitions."""

from src.lifecycle.errors import InvalidTransition, LifecycleError, NotFound
from src.lifecycle.machine import (
    NEXT_STATUS,
    ComplaintLifecycle,
    generate_complaint_id,
    is_legal_transition,
)
from src.lifecycle.repository import (
    ComplaintRepository,
    FileComplaintRepository,
    InMemoryComplaintRepository,
)

__all__ = [
    "NEXT_STATUS",
    "ComplaintLifecycle",
    "ComplaintRepository",
    "FileComplaintRepository",
    "InMemoryComplaintRepository",
    "InvalidTransition",
    "LifecycleError",
    "NotFound",
    "generate_complaint_id",
    "is_legal_transition",
]
