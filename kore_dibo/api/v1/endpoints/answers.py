# kore_dibo/api/v1/endpoints/answers.py
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from kore_dibo.core.security import get_current_helper, get_current_user
from kore_dibo.db.session import get_db
from kore_dibo.models.doubt import Answer
from kore_dibo.models.user import User
from kore_dibo.schemas.doubt import AnswerCreate, AnswerPublic, AnswerWithHelper
from kore_dibo.schemas.user import HelperSummary
from kore_dibo.services import doubt_service, user_service

router = APIRouter(prefix="/answers", tags=["answers"])


def with_helpers(db: Session, answers: List[Answer]) -> List[AnswerWithHelper]:
    helpers = user_service.get_users_by_ids(db, [a.helper_id for a in answers])
    return [
        AnswerWithHelper(
            **AnswerPublic.model_validate(answer).model_dump(),
            helper=(
                HelperSummary.model_validate(helpers[answer.helper_id])
                if answer.helper_id in helpers
                else None
            ),
        )
        for answer in answers
    ]


@router.get("/doubt/{doubt_id}", response_model=List[AnswerWithHelper])
def list_doubt_answers(doubt_id: int, db: Session = Depends(get_db)):
    answers = doubt_service.list_answers_for_doubt(db, doubt_id=doubt_id)
    return with_helpers(db, answers)


@router.get("/helper/{helper_id}", response_model=List[AnswerPublic])
def list_helper_answers(helper_id: int, db: Session = Depends(get_db)):
    return doubt_service.list_answers_for_helper(db, helper_id=helper_id)


@router.post("", response_model=AnswerPublic, status_code=status.HTTP_201_CREATED)
def create_answer(
    obj_in: AnswerCreate,
    db: Session = Depends(get_db),
    current_helper: User = Depends(get_current_helper),
):
    return doubt_service.create_answer(db, helper=current_helper, obj_in=obj_in)


@router.patch("/{answer_id}/accept", response_model=AnswerPublic)
def accept_answer(
    answer_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Only the student who posted the doubt can accept an answer."""
    return doubt_service.accept_answer(db, answer_id=answer_id, student=current_user)
