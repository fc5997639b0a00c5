# kore_dibo/api/v1/endpoints/assignments.py
from datetime import datetime
from typing import List

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from kore_dibo.core.config import settings
from kore_dibo.core.security import get_current_student
from kore_dibo.db.session import get_db
from kore_dibo.models.assignment import Assignment
from kore_dibo.models.user import User
from kore_dibo.schemas.assignment import (
    AssignmentCreate,
    AssignmentDetail,
    AssignmentFilters,
    AssignmentPublic,
    AssignmentStatusValue,
    AssignmentUpdate,
    AssignmentWithBidCount,
)
from kore_dibo.schemas.user import HelperSummary, UserSummary
from kore_dibo.services import assignment_service, user_service

router = APIRouter(prefix="/assignments", tags=["assignments"])


def _with_bid_counts(db: Session, assignments: List[Assignment]) -> List[AssignmentWithBidCount]:
    counts = assignment_service.bid_counts(db, [a.id for a in assignments])
    return [
        AssignmentWithBidCount(
            **AssignmentPublic.model_validate(a).model_dump(),
            bid_count=counts.get(a.id, 0),
        )
        for a in assignments
    ]


@router.get("", response_model=List[AssignmentPublic])
def list_assignments(
    db: Session = Depends(get_db),
    category: str | None = None,
    status_: AssignmentStatusValue | None = Query(default=None, alias="status"),
    budget: int | None = Query(default=None, description="Budget ceiling"),
    deadline: datetime | None = Query(default=None, description="Deadline on or after"),
    deadline_before: datetime | None = None,
    skip: int = 0,
    limit: int = 100,
):
    """
    Browse assignments newest first. Every filter is optional.
    """
    filters = AssignmentFilters(
        category=category,
        status=status_,
        budget_ceiling=budget,
        deadline_after=deadline,
        deadline_before=deadline_before,
    )
    return assignment_service.list_assignments(db, filters=filters, skip=skip, limit=limit)


@router.get("/recent", response_model=List[AssignmentWithBidCount])
def list_recent_assignments(
    db: Session = Depends(get_db),
    limit: int = Query(default=settings.RECENT_ASSIGNMENTS_LIMIT, ge=1, le=100),
):
    assignments = assignment_service.list_recent_open(db, limit=limit)
    return _with_bid_counts(db, assignments)


@router.get("/student/{student_id}", response_model=List[AssignmentWithBidCount])
def list_student_assignments(student_id: int, db: Session = Depends(get_db)):
    assignments = assignment_service.list_for_student(db, student_id=student_id)
    return _with_bid_counts(db, assignments)


@router.get("/helper/{helper_id}", response_model=List[AssignmentPublic])
def list_helper_assignments(helper_id: int, db: Session = Depends(get_db)):
    return assignment_service.list_for_helper(db, helper_id=helper_id)


@router.get("/{assignment_id}", response_model=AssignmentDetail)
def get_assignment(assignment_id: int, db: Session = Depends(get_db)):
    assignment = assignment_service.get_assignment_or_404(db, assignment_id)
    bid_count = assignment_service.bid_counts(db, [assignment.id])[assignment.id]

    student = user_service.get_user(db, assignment.student_id)
    helper = (
        user_service.get_user(db, assignment.helper_id)
        if assignment.helper_id is not None
        else None
    )
    return AssignmentDetail(
        **AssignmentPublic.model_validate(assignment).model_dump(),
        bid_count=bid_count,
        student=UserSummary.model_validate(student) if student else None,
        helper=HelperSummary.model_validate(helper) if helper else None,
    )


@router.post("", response_model=AssignmentPublic, status_code=status.HTTP_201_CREATED)
def create_assignment(
    obj_in: AssignmentCreate,
    db: Session = Depends(get_db),
    current_student: User = Depends(get_current_student),
):
    return assignment_service.create_assignment(db, student=current_student, obj_in=obj_in)


@router.patch("/{assignment_id}", response_model=AssignmentPublic)
def update_assignment(
    assignment_id: int,
    obj_in: AssignmentUpdate,
    db: Session = Depends(get_db),
    current_student: User = Depends(get_current_student),
):
    """
    The owning student edits an open assignment.
    """
    assignment = assignment_service.get_assignment_or_404(db, assignment_id)
    return assignment_service.update_assignment(
        db, assignment=assignment, student=current_student, obj_in=obj_in
    )
