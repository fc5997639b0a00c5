# kore_dibo/services/assignment_service.py
import logging
from typing import Iterable, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from kore_dibo.core.errors import AuthorizationError, ConflictError, NotFoundError
from kore_dibo.core.timeutils import as_utc
from kore_dibo.models.assignment import Assignment, AssignmentStatus
from kore_dibo.models.bid import Bid
from kore_dibo.models.user import User
from kore_dibo.schemas.assignment import (
    AssignmentCreate,
    AssignmentFilters,
    AssignmentUpdate,
)

logger = logging.getLogger(__name__)


def create_assignment(
    db: Session,
    *,
    student: User,
    obj_in: AssignmentCreate,
) -> Assignment:
    """
    student posts an assignment; it starts open with no helper
    """
    db_obj = Assignment(
        title=obj_in.title,
        description=obj_in.description,
        budget=obj_in.budget,
        deadline=as_utc(obj_in.deadline),
        category=obj_in.category,
        photos=obj_in.photos,
        student_id=student.id,
        helper_id=None,
        is_open=True,
        status=AssignmentStatus.OPEN,
    )
    db.add(db_obj)
    db.commit()
    db.refresh(db_obj)
    logger.info("Assignment %s created by student %s", db_obj.id, student.id)
    return db_obj


def get_assignment(db: Session, assignment_id: int) -> Optional[Assignment]:
    return db.query(Assignment).filter(Assignment.id == assignment_id).first()


def get_assignment_or_404(db: Session, assignment_id: int) -> Assignment:
    assignment = get_assignment(db, assignment_id)
    if assignment is None:
        raise NotFoundError("Assignment not found")
    return assignment


def _newest_first(query):
    return query.order_by(Assignment.created_at.desc(), Assignment.id.desc())


def list_assignments(
    db: Session,
    *,
    filters: AssignmentFilters | None = None,
    skip: int = 0,
    limit: int = 100,
) -> List[Assignment]:
    query = db.query(Assignment)
    if filters is not None:
        if filters.category is not None:
            query = query.filter(Assignment.category == filters.category)
        if filters.status is not None:
            query = query.filter(Assignment.status == filters.status)
        if filters.budget_ceiling is not None:
            query = query.filter(Assignment.budget <= filters.budget_ceiling)
        if filters.deadline_after is not None:
            query = query.filter(Assignment.deadline >= as_utc(filters.deadline_after))
        if filters.deadline_before is not None:
            query = query.filter(Assignment.deadline <= as_utc(filters.deadline_before))
    return _newest_first(query).offset(skip).limit(limit).all()


def list_recent_open(db: Session, *, limit: int) -> List[Assignment]:
    return (
        _newest_first(db.query(Assignment).filter(Assignment.is_open.is_(True)))
        .limit(limit)
        .all()
    )


def list_for_student(db: Session, *, student_id: int) -> List[Assignment]:
    return _newest_first(
        db.query(Assignment).filter(Assignment.student_id == student_id)
    ).all()


def list_for_helper(db: Session, *, helper_id: int) -> List[Assignment]:
    return _newest_first(
        db.query(Assignment).filter(Assignment.helper_id == helper_id)
    ).all()


def bid_counts(db: Session, assignment_ids: Iterable[int]) -> dict[int, int]:
    ids = list(assignment_ids)
    if not ids:
        return {}
    rows = (
        db.query(Bid.assignment_id, func.count(Bid.id))
        .filter(Bid.assignment_id.in_(ids))
        .group_by(Bid.assignment_id)
        .all()
    )
    counts = {assignment_id: 0 for assignment_id in ids}
    counts.update({assignment_id: count for assignment_id, count in rows})
    return counts


def update_assignment(
    db: Session,
    *,
    assignment: Assignment,
    student: User,
    obj_in: AssignmentUpdate,
) -> Assignment:
    """
    owner edits the posting while it is still open; lifecycle fields are
    only changed by bid acceptance and reviews
    """
    if assignment.student_id != student.id:
        raise AuthorizationError("Unauthorized to update this assignment")
    if assignment.status != AssignmentStatus.OPEN:
        raise ConflictError("Only open assignments can be edited")

    update_data = obj_in.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        # photos is the only nullable column in the DTO
        if value is None and field != "photos":
            continue
        if field == "deadline":
            value = as_utc(value)
        setattr(assignment, field, value)
    db.add(assignment)
    db.commit()
    db.refresh(assignment)
    return assignment


def get_assignments_by_ids(db: Session, assignment_ids: Iterable[int]) -> dict[int, Assignment]:
    ids = set(assignment_ids)
    if not ids:
        return {}
    return {a.id: a for a in db.query(Assignment).filter(Assignment.id.in_(ids)).all()}
