# kore_dibo/services/notification_service.py
from typing import List

from sqlalchemy.orm import Session

from kore_dibo.core.errors import NotFoundError
from kore_dibo.models.notification import Notification


def add_notification(
    db: Session,
    *,
    user_id: int,
    type: str,
    message: str,
    link: str | None = None,
) -> Notification:
    """
    Stage a notification in the caller's transaction; the caller commits
    together with the event that produced it.
    """
    notification = Notification(
        user_id=user_id,
        type=type,
        message=message,
        link=link,
        is_read=False,
    )
    db.add(notification)
    return notification


def list_notifications(
    db: Session,
    *,
    user_id: int,
    skip: int = 0,
    limit: int = 100,
) -> List[Notification]:
    return (
        db.query(Notification)
        .filter(Notification.user_id == user_id)
        .order_by(Notification.created_at.desc(), Notification.id.desc())
        .offset(skip)
        .limit(limit)
        .all()
    )


def count_unread(db: Session, *, user_id: int) -> int:
    return (
        db.query(Notification)
        .filter(Notification.user_id == user_id, Notification.is_read.is_(False))
        .count()
    )


def mark_read(db: Session, *, user_id: int, notification_id: int) -> Notification:
    notification = (
        db.query(Notification)
        .filter(Notification.id == notification_id, Notification.user_id == user_id)
        .first()
    )
    if notification is None:
        raise NotFoundError("Notification not found")

    notification.is_read = True
    db.commit()
    db.refresh(notification)
    return notification


def mark_all_read(db: Session, *, user_id: int) -> int:
    updated = (
        db.query(Notification)
        .filter(Notification.user_id == user_id, Notification.is_read.is_(False))
        .update({Notification.is_read: True}, synchronize_session=False)
    )
    db.commit()
    return updated
