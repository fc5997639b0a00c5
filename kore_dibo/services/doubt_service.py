# kore_dibo/services/doubt_service.py
import logging
from typing import Iterable, List, Optional

from sqlalchemy import func, update
from sqlalchemy.orm import Session

from kore_dibo.core.errors import AuthorizationError, ConflictError, NotFoundError
from kore_dibo.models.doubt import Answer, Doubt, DoubtStatus
from kore_dibo.models.notification import NotificationType
from kore_dibo.models.user import User
from kore_dibo.schemas.doubt import AnswerCreate, DoubtCreate, DoubtUpdate
from kore_dibo.services.notification_service import add_notification

logger = logging.getLogger(__name__)


def _doubt_link(doubt_id: int) -> str:
    return f"/doubts/{doubt_id}"


def _newest_first(query):
    return query.order_by(Doubt.created_at.desc(), Doubt.id.desc())


def create_doubt(db: Session, *, student: User, obj_in: DoubtCreate) -> Doubt:
    db_obj = Doubt(
        title=obj_in.title,
        question=obj_in.question,
        subject=obj_in.subject,
        sub_topic=obj_in.sub_topic,
        image=obj_in.image,
        budget=obj_in.budget,
        student_id=student.id,
        helper_id=None,
        status=DoubtStatus.OPEN,
    )
    db.add(db_obj)
    db.commit()
    db.refresh(db_obj)
    return db_obj


def get_doubt(db: Session, doubt_id: int) -> Optional[Doubt]:
    return db.query(Doubt).filter(Doubt.id == doubt_id).first()


def get_doubt_or_404(db: Session, doubt_id: int) -> Doubt:
    doubt = get_doubt(db, doubt_id)
    if doubt is None:
        raise NotFoundError("Doubt not found")
    return doubt


def list_doubts(
    db: Session,
    *,
    subject: str | None = None,
    status: str | None = None,
    skip: int = 0,
    limit: int = 100,
) -> List[Doubt]:
    query = db.query(Doubt)
    if subject is not None:
        query = query.filter(Doubt.subject == subject)
    if status is not None:
        query = query.filter(Doubt.status == status)
    return _newest_first(query).offset(skip).limit(limit).all()


def list_recent_open(db: Session, *, limit: int) -> List[Doubt]:
    return (
        _newest_first(db.query(Doubt).filter(Doubt.status == DoubtStatus.OPEN))
        .limit(limit)
        .all()
    )


def list_for_student(db: Session, *, student_id: int) -> List[Doubt]:
    return _newest_first(db.query(Doubt).filter(Doubt.student_id == student_id)).all()


def list_for_helper(db: Session, *, helper_id: int) -> List[Doubt]:
    return _newest_first(db.query(Doubt).filter(Doubt.helper_id == helper_id)).all()


def update_doubt(
    db: Session,
    *,
    doubt: Doubt,
    student: User,
    obj_in: DoubtUpdate,
) -> Doubt:
    if doubt.student_id != student.id:
        raise AuthorizationError("Unauthorized to update this doubt")
    if doubt.status == DoubtStatus.CLOSED:
        raise ConflictError("Closed doubts cannot be edited")

    update_data = obj_in.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        if value is None and field not in ("sub_topic", "image"):
            continue
        setattr(doubt, field, value)
    db.add(doubt)
    db.commit()
    db.refresh(doubt)
    return doubt


# Answers

def create_answer(db: Session, *, helper: User, obj_in: AnswerCreate) -> Answer:
    doubt = get_doubt_or_404(db, obj_in.doubt_id)
    if doubt.status != DoubtStatus.OPEN:
        raise ConflictError("This doubt is not open for answers")

    answer = Answer(
        doubt_id=doubt.id,
        helper_id=helper.id,
        answer=obj_in.answer,
        image=obj_in.image,
        is_accepted=False,
    )
    db.add(answer)
    add_notification(
        db,
        user_id=doubt.student_id,
        type=NotificationType.ANSWER,
        message=f"{helper.full_name} answered \"{doubt.title}\"",
        link=_doubt_link(doubt.id),
    )
    db.commit()
    db.refresh(answer)
    return answer


def get_answer_or_404(db: Session, answer_id: int) -> Answer:
    answer = db.query(Answer).filter(Answer.id == answer_id).first()
    if answer is None:
        raise NotFoundError("Answer not found")
    return answer


def list_answers_for_doubt(db: Session, *, doubt_id: int) -> List[Answer]:
    return (
        db.query(Answer)
        .filter(Answer.doubt_id == doubt_id)
        .order_by(Answer.created_at.desc(), Answer.id.desc())
        .all()
    )


def list_answers_for_helper(db: Session, *, helper_id: int) -> List[Answer]:
    return (
        db.query(Answer)
        .filter(Answer.helper_id == helper_id)
        .order_by(Answer.created_at.desc(), Answer.id.desc())
        .all()
    )


def answer_counts(db: Session, doubt_ids: Iterable[int]) -> dict[int, int]:
    ids = list(doubt_ids)
    if not ids:
        return {}
    rows = (
        db.query(Answer.doubt_id, func.count(Answer.id))
        .filter(Answer.doubt_id.in_(ids))
        .group_by(Answer.doubt_id)
        .all()
    )
    counts = {doubt_id: 0 for doubt_id in ids}
    counts.update({doubt_id: count for doubt_id, count in rows})
    return counts


def accept_answer(db: Session, *, answer_id: int, student: User) -> Answer:
    """
    Owner accepts one answer: doubt open -> answered with the answering
    helper recorded. Other answers keep their state.
    """
    answer = get_answer_or_404(db, answer_id)
    doubt = get_doubt(db, answer.doubt_id)
    if doubt is None or doubt.student_id != student.id:
        raise AuthorizationError("Unauthorized to accept this answer")

    try:
        claimed = db.execute(
            update(Doubt)
            .where(Doubt.id == doubt.id, Doubt.status == DoubtStatus.OPEN)
            .values(status=DoubtStatus.ANSWERED, helper_id=answer.helper_id)
        ).rowcount
        if claimed != 1:
            raise ConflictError("This doubt is no longer open")

        answer.is_accepted = True
        add_notification(
            db,
            user_id=answer.helper_id,
            type=NotificationType.ANSWER_ACCEPTED,
            message=f"Your answer to \"{doubt.title}\" was accepted",
            link=_doubt_link(doubt.id),
        )
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(answer)
    logger.info("Answer %s accepted for doubt %s", answer.id, doubt.id)
    return answer
