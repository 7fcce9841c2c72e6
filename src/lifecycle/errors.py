"""Errors raised by the complaint lifecycle."""

from src.models.enums import IssueStatus


class LifecycleError(Exception):
    """Base class for rejected lifecycle operations."""

    def __init__(self, message: str, complaint_id: str):
        super().__init__(message)
        self.complaint_id = complaint_id


class NotFound(LifecycleError):
    """The referenced complaint does not exist."""

    def __init__(self, complaint_id: str):
        super().__init__(f"Complaint '{complaint_id}' not found", complaint_id)


class InvalidTransition(LifecycleError):
    """The requested status change is not the next forward step."""

    def __init__(
        self, complaint_id: str, current: IssueStatus, requested: IssueStatus
    ):
        super().__init__(
            f"Cannot move complaint '{complaint_id}' "
            f"from {current.value} to {requested.value}",
            complaint_id,
        )
        self.current = current
        self.requested = requested
