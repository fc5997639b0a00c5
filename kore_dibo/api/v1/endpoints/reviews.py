# kore_dibo/api/v1/endpoints/reviews.py
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from kore_dibo.core.security import get_current_student
from kore_dibo.db.session import get_db
from kore_dibo.models.review import Review
from kore_dibo.models.user import User
from kore_dibo.schemas.assignment import AssignmentRef
from kore_dibo.schemas.review import ReviewCreate, ReviewPublic, ReviewWithContext
from kore_dibo.schemas.user import UserSummary
from kore_dibo.services import assignment_service, review_service, user_service

router = APIRouter(prefix="/reviews", tags=["reviews"])


def with_context(db: Session, reviews: List[Review]) -> List[ReviewWithContext]:
    """Attach the reviewing student and the reviewed assignment's title."""
    students = user_service.get_users_by_ids(db, [r.student_id for r in reviews])
    assignments = assignment_service.get_assignments_by_ids(
        db, [r.assignment_id for r in reviews]
    )
    result = []
    for review in reviews:
        student = students.get(review.student_id)
        assignment = assignments.get(review.assignment_id)
        result.append(
            ReviewWithContext(
                **ReviewPublic.model_validate(review).model_dump(),
                student=UserSummary.model_validate(student) if student else None,
                assignment=AssignmentRef.model_validate(assignment) if assignment else None,
            )
        )
    return result


@router.post("", response_model=ReviewPublic, status_code=status.HTTP_201_CREATED)
def create_review(
    obj_in: ReviewCreate,
    db: Session = Depends(get_db),
    current_student: User = Depends(get_current_student),
):
    """
    The owning student reviews the assigned helper; this completes the
    assignment and refreshes the helper's rating.
    """
    return review_service.create_review(db, student=current_student, obj_in=obj_in)


@router.get("/helper/{helper_id}", response_model=List[ReviewWithContext])
def list_helper_reviews(helper_id: int, db: Session = Depends(get_db)):
    reviews = review_service.list_for_helper(db, helper_id=helper_id)
    return with_context(db, reviews)


@router.get("/assignment/{assignment_id}", response_model=List[ReviewPublic])
def list_assignment_reviews(assignment_id: int, db: Session = Depends(get_db)):
    return review_service.list_for_assignment(db, assignment_id=assignment_id)
