# kore_dibo/schemas/review.py
from datetime import datetime

from pydantic import BaseModel, Field

from kore_dibo.schemas.assignment import AssignmentRef
from kore_dibo.schemas.user import UserSummary


class ReviewCreate(BaseModel):
    assignment_id: int
    rating: int = Field(ge=1, le=5)
    comment: str | None = None


class ReviewPublic(BaseModel):
    id: int
    assignment_id: int
    student_id: int
    helper_id: int
    rating: int
    comment: str | None = None
    created_at: datetime

    model_config = {"from_attributes": True}


class ReviewWithContext(ReviewPublic):
    student: UserSummary | None = None
    assignment: AssignmentRef | None = None
