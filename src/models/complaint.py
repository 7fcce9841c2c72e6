"""Core complaint data models."""

from datetime import UTC, datetime

from pydantic import BaseModel, Field, field_validator, model_validator

from src.models.enums import IssueCategory, IssuePriority, IssueStatus


def _utc_now() -> datetime:
    """Return current UTC time (timezone-aware)."""
    return datetime.now(UTC)


class ComplaintCreate(BaseModel):
    """Fields supplied by a reporter when raising a complaint."""

    title: str = Field(..., description="Short summary of the problem")
    description: str = Field(..., description="Details of what is wrong")
    location: str = Field(..., description="Where the problem is (room, block)")
    category: IssueCategory = Field(..., description="Kind of problem")
    priority: IssuePriority = Field(
        default=IssuePriority.MEDIUM, description="How urgent the problem is"
    )

    @field_validator("title", "description", "location")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value


class Complaint(BaseModel):
    """A maintenance complaint and its lifecycle state."""

    complaint_id: str = Field(..., description="Unique complaint identifier")
    title: str = Field(..., description="Short summary of the problem")
    description: str = Field(..., description="Details of what is wrong")
    location: str = Field(..., description="Where the problem is")
    category: IssueCategory = Field(..., description="Kind of problem")
    priority: IssuePriority = Field(
        default=IssuePriority.MEDIUM, description="How urgent the problem is"
    )
    status: IssueStatus = Field(
        default=IssueStatus.REPORTED, description="Current lifecycle status"
    )
    assignee: str = Field(
        default="", description="Who is handling it (empty until assigned)"
    )
    created_at: datetime = Field(
        default_factory=_utc_now, description="When the complaint was reported"
    )
    updated_at: datetime = Field(
        default_factory=_utc_now, description="Last status change"
    )

    @model_validator(mode="after")
    def _assignee_matches_status(self) -> "Complaint":
        if self.status == IssueStatus.REPORTED and self.assignee:
            raise ValueError("a reported complaint cannot have an assignee")
        if self.status != IssueStatus.REPORTED and not self.assignee.strip():
            raise ValueError(
                f"a complaint in status {self.status.value} needs an assignee"
            )
        return self

    @property
    def is_open(self) -> bool:
        """Whether the complaint still awaits resolution."""
        return self.status != IssueStatus.RESOLVED
