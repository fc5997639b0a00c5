# kore_dibo/schemas/bid.py
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from kore_dibo.schemas.assignment import AssignmentPublic
from kore_dibo.schemas.user import HelperSummary


class BidCreate(BaseModel):
    assignment_id: int
    amount: int = Field(gt=0)
    description: str = Field(min_length=10)


class BidStatusUpdate(BaseModel):
    """Only a status transition is patchable on a bid."""
    status: Literal["accepted", "rejected"]


class BidPublic(BaseModel):
    id: int
    assignment_id: int
    helper_id: int
    amount: int
    description: str
    status: str  # pending / accepted / rejected
    created_at: datetime

    model_config = {"from_attributes": True}


class BidWithHelper(BidPublic):
    helper: HelperSummary | None = None


class BidWithAssignment(BidPublic):
    assignment: AssignmentPublic | None = None
