# kore_dibo/api/v1/endpoints/bids.py
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from kore_dibo.core.security import get_current_helper, get_current_user
from kore_dibo.db.session import get_db
from kore_dibo.models.user import User
from kore_dibo.schemas.assignment import AssignmentPublic
from kore_dibo.schemas.bid import (
    BidCreate,
    BidPublic,
    BidStatusUpdate,
    BidWithAssignment,
    BidWithHelper,
)
from kore_dibo.schemas.user import HelperSummary
from kore_dibo.services import assignment_service, bid_service, user_service

router = APIRouter(prefix="/bids", tags=["bids"])


@router.get("/assignment/{assignment_id}", response_model=List[BidWithHelper])
def list_assignment_bids(assignment_id: int, db: Session = Depends(get_db)):
    bids = bid_service.list_for_assignment(db, assignment_id=assignment_id)
    helpers = user_service.get_users_by_ids(db, [b.helper_id for b in bids])
    return [
        BidWithHelper(
            **BidPublic.model_validate(bid).model_dump(),
            helper=(
                HelperSummary.model_validate(helpers[bid.helper_id])
                if bid.helper_id in helpers
                else None
            ),
        )
        for bid in bids
    ]


@router.get("/helper/{helper_id}", response_model=List[BidWithAssignment])
def list_helper_bids(
    helper_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    bids = bid_service.list_for_helper(db, helper_id=helper_id, viewer=current_user)
    assignments = assignment_service.get_assignments_by_ids(
        db, [b.assignment_id for b in bids]
    )
    return [
        BidWithAssignment(
            **BidPublic.model_validate(bid).model_dump(),
            assignment=(
                AssignmentPublic.model_validate(assignments[bid.assignment_id])
                if bid.assignment_id in assignments
                else None
            ),
        )
        for bid in bids
    ]


@router.post("", response_model=BidPublic, status_code=status.HTTP_201_CREATED)
def place_bid(
    obj_in: BidCreate,
    db: Session = Depends(get_db),
    current_helper: User = Depends(get_current_helper),
):
    return bid_service.place_bid(db, helper=current_helper, obj_in=obj_in)


@router.patch("/{bid_id}", response_model=BidPublic)
def update_bid_status(
    bid_id: int,
    obj_in: BidStatusUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    The student who posted the assignment accepts or rejects a pending bid.
    Accepting closes the assignment and rejects every other pending bid.
    """
    return bid_service.update_bid_status(db, bid_id=bid_id, user=current_user, obj_in=obj_in)
