# kore_dibo/services/review_service.py
from __future__ import annotations

import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import List

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from kore_dibo.core.errors import AuthorizationError, ConflictError, NotFoundError
from kore_dibo.models.assignment import Assignment, AssignmentStatus
from kore_dibo.models.notification import NotificationType
from kore_dibo.models.review import Review
from kore_dibo.models.user import User
from kore_dibo.schemas.review import ReviewCreate
from kore_dibo.services.notification_service import add_notification

logger = logging.getLogger(__name__)

ALREADY_REVIEWED_MESSAGE = "You have already reviewed this assignment"


def compute_rating(total: int, count: int) -> int:
    """
    Mean of all ratings rounded half up (4.5 -> 5, 2.5 -> 3).
    A helper with no reviews has rating 0.
    """
    if count == 0:
        return 0
    mean = Decimal(total) / Decimal(count)
    return int(mean.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def _recompute_helper_rating(db: Session, helper: User) -> None:
    count, total = (
        db.query(func.count(Review.id), func.coalesce(func.sum(Review.rating), 0))
        .filter(Review.helper_id == helper.id)
        .one()
    )
    helper.rating = compute_rating(int(total), int(count))
    helper.review_count = int(count)


def create_review(db: Session, *, student: User, obj_in: ReviewCreate) -> Review:
    """
    Record the owning student's review of the assigned helper.

    In one transaction:
      - insert the review (unique per assignment)
      - recompute the helper's rating and review_count over all reviews
      - move the assignment in-progress -> completed
    The helper row is locked first so concurrent reviews for the same
    helper aggregate one after the other.
    """
    assignment = (
        db.query(Assignment)
        .filter(Assignment.id == obj_in.assignment_id)
        .with_for_update()
        .first()
    )
    if assignment is None:
        raise NotFoundError("Assignment not found")

    if assignment.student_id != student.id:
        raise AuthorizationError("You can only review assignments that you posted")

    if assignment.helper_id is None or assignment.status == AssignmentStatus.OPEN:
        raise ConflictError("This assignment has no assigned helper to review")

    existing = db.query(Review).filter(Review.assignment_id == assignment.id).first()
    if existing is not None:
        raise ConflictError(ALREADY_REVIEWED_MESSAGE)

    try:
        helper = (
            db.query(User)
            .filter(User.id == assignment.helper_id)
            .with_for_update()
            .one()
        )
        review = Review(
            assignment_id=assignment.id,
            student_id=student.id,
            helper_id=helper.id,
            rating=obj_in.rating,
            comment=obj_in.comment,
        )
        db.add(review)
        db.flush()

        _recompute_helper_rating(db, helper)

        if assignment.status == AssignmentStatus.IN_PROGRESS:
            assignment.status = AssignmentStatus.COMPLETED

        add_notification(
            db,
            user_id=helper.id,
            type=NotificationType.REVIEW,
            message=f"{student.full_name} left a {obj_in.rating}-star review on \"{assignment.title}\"",
            link=f"/helpers/{helper.id}",
        )
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError(ALREADY_REVIEWED_MESSAGE)
    except Exception:
        db.rollback()
        raise

    db.refresh(review)
    logger.info(
        "Review %s recorded for helper %s (rating now %s over %s reviews)",
        review.id,
        helper.id,
        helper.rating,
        helper.review_count,
    )
    return review


def list_for_helper(db: Session, *, helper_id: int) -> List[Review]:
    return (
        db.query(Review)
        .filter(Review.helper_id == helper_id)
        .order_by(Review.created_at.desc(), Review.id.desc())
        .all()
    )


def list_for_assignment(db: Session, *, assignment_id: int) -> List[Review]:
    return db.query(Review).filter(Review.assignment_id == assignment_id).all()
