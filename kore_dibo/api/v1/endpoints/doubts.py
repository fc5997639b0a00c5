# kore_dibo/api/v1/endpoints/doubts.py
from typing import List, Literal

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from kore_dibo.api.v1.endpoints.answers import with_helpers
from kore_dibo.core.config import settings
from kore_dibo.core.security import get_current_student
from kore_dibo.db.session import get_db
from kore_dibo.models.user import User
from kore_dibo.schemas.doubt import (
    DoubtCreate,
    DoubtDetail,
    DoubtPublic,
    DoubtUpdate,
    DoubtWithStudent,
)
from kore_dibo.schemas.user import UserSummary
from kore_dibo.services import doubt_service, user_service

router = APIRouter(prefix="/doubts", tags=["doubts"])


@router.get("", response_model=List[DoubtPublic])
def list_doubts(
    db: Session = Depends(get_db),
    subject: str | None = None,
    status_: Literal["open", "answered", "closed"] | None = Query(default=None, alias="status"),
    skip: int = 0,
    limit: int = 100,
):
    return doubt_service.list_doubts(
        db, subject=subject, status=status_, skip=skip, limit=limit
    )


@router.get("/recent", response_model=List[DoubtWithStudent])
def list_recent_doubts(
    db: Session = Depends(get_db),
    limit: int = Query(default=settings.RECENT_DOUBTS_LIMIT, ge=1, le=100),
):
    """Open doubts, newest first, with answer counts."""
    doubts = doubt_service.list_recent_open(db, limit=limit)
    counts = doubt_service.answer_counts(db, [d.id for d in doubts])
    students = user_service.get_users_by_ids(db, [d.student_id for d in doubts])
    result = []
    for doubt in doubts:
        student = students.get(doubt.student_id)
        result.append(
            DoubtWithStudent(
                **DoubtPublic.model_validate(doubt).model_dump(),
                answer_count=counts.get(doubt.id, 0),
                student=UserSummary.model_validate(student) if student else None,
            )
        )
    return result


@router.get("/student/{student_id}", response_model=List[DoubtPublic])
def list_student_doubts(student_id: int, db: Session = Depends(get_db)):
    return doubt_service.list_for_student(db, student_id=student_id)


@router.get("/helper/{helper_id}", response_model=List[DoubtPublic])
def list_helper_doubts(helper_id: int, db: Session = Depends(get_db)):
    return doubt_service.list_for_helper(db, helper_id=helper_id)


@router.get("/subject/{subject}", response_model=List[DoubtPublic])
def list_subject_doubts(subject: str, db: Session = Depends(get_db)):
    return doubt_service.list_doubts(db, subject=subject)


@router.get("/{doubt_id}", response_model=DoubtDetail)
def get_doubt(doubt_id: int, db: Session = Depends(get_db)):
    doubt = doubt_service.get_doubt_or_404(db, doubt_id)
    student = user_service.get_user(db, doubt.student_id)
    answers = doubt_service.list_answers_for_doubt(db, doubt_id=doubt.id)
    return DoubtDetail(
        **DoubtPublic.model_validate(doubt).model_dump(),
        student=UserSummary.model_validate(student) if student else None,
        answers=with_helpers(db, answers),
    )


@router.post("", response_model=DoubtPublic, status_code=status.HTTP_201_CREATED)
def create_doubt(
    obj_in: DoubtCreate,
    db: Session = Depends(get_db),
    current_student: User = Depends(get_current_student),
):
    return doubt_service.create_doubt(db, student=current_student, obj_in=obj_in)


@router.patch("/{doubt_id}", response_model=DoubtPublic)
def update_doubt(
    doubt_id: int,
    obj_in: DoubtUpdate,
    db: Session = Depends(get_db),
    current_student: User = Depends(get_current_student),
):
    doubt = doubt_service.get_doubt_or_404(db, doubt_id)
    return doubt_service.update_doubt(db, doubt=doubt, student=current_student, obj_in=obj_in)
