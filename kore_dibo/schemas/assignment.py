# kore_dibo/schemas/assignment.py
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from kore_dibo.core.timeutils import as_utc, utcnow
from kore_dibo.schemas.user import HelperSummary, UserSummary

AssignmentStatusValue = Literal["open", "in-progress", "completed"]


def _future_deadline(value: datetime) -> datetime:
    value = as_utc(value)
    if value <= utcnow():
        raise ValueError("Deadline must be in the future")
    return value


class AssignmentBase(BaseModel):
    title: str = Field(min_length=3, max_length=255)
    description: str = Field(min_length=10)
    budget: int = Field(gt=0)
    deadline: datetime
    category: str = Field(min_length=1, max_length=100)
    photos: list[str] | None = None


class AssignmentCreate(AssignmentBase):
    @field_validator("deadline")
    @classmethod
    def deadline_in_future(cls, value: datetime) -> datetime:
        return _future_deadline(value)


class AssignmentUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=3, max_length=255)
    description: str | None = Field(default=None, min_length=10)
    budget: int | None = Field(default=None, gt=0)
    deadline: datetime | None = None
    category: str | None = Field(default=None, min_length=1, max_length=100)
    photos: list[str] | None = None

    @field_validator("deadline")
    @classmethod
    def deadline_in_future(cls, value: datetime | None) -> datetime | None:
        if value is None:
            return value
        return _future_deadline(value)


class AssignmentFilters(BaseModel):
    """Recognised filters for browsing assignments."""
    category: str | None = None
    status: AssignmentStatusValue | None = None
    budget_ceiling: int | None = None
    deadline_after: datetime | None = None
    deadline_before: datetime | None = None


class AssignmentRef(BaseModel):
    id: int
    title: str

    model_config = {"from_attributes": True}


class AssignmentPublic(AssignmentBase):
    id: int
    student_id: int
    helper_id: int | None = None
    is_open: bool
    status: str
    created_at: datetime

    model_config = {"from_attributes": True}


class AssignmentWithBidCount(AssignmentPublic):
    bid_count: int


class AssignmentDetail(AssignmentWithBidCount):
    student: UserSummary | None = None
    helper: HelperSummary | None = None
