# kore_dibo/api/v1/endpoints/notifications.py
from typing import List

from fastapi import APIRouter, Body, Depends
from sqlalchemy.orm import Session

from kore_dibo.core.security import get_current_user
from kore_dibo.db.session import get_db
from kore_dibo.models.user import User
from kore_dibo.schemas.common import CountResponse, StatusResponse
from kore_dibo.schemas.notification import MarkReadRequest, NotificationPublic
from kore_dibo.services import notification_service

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("", response_model=List[NotificationPublic])
def list_notifications(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    skip: int = 0,
    limit: int = 100,
):
    return notification_service.list_notifications(
        db, user_id=current_user.id, skip=skip, limit=limit
    )


@router.get("/unread-count", response_model=CountResponse)
def unread_count(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return CountResponse(count=notification_service.count_unread(db, user_id=current_user.id))


@router.post("/mark-read", response_model=StatusResponse)
def mark_read(
    payload: MarkReadRequest | None = Body(default=None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    if payload is not None and payload.id is not None:
        notification_service.mark_read(
            db, user_id=current_user.id, notification_id=payload.id
        )
        return StatusResponse(message="Notification marked as read")

    updated = notification_service.mark_all_read(db, user_id=current_user.id)
    return StatusResponse(message=f"{updated} notifications marked as read")
