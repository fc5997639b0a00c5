# kore_dibo/api/v1/endpoints/messages.py
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from kore_dibo.core.security import get_current_user
from kore_dibo.db.session import get_db
from kore_dibo.models.user import User
from kore_dibo.schemas.common import CountResponse
from kore_dibo.schemas.message import (
    ConversationDetail,
    ConversationSummary,
    MessageCreate,
    MessagePublic,
)
from kore_dibo.schemas.user import ParticipantSummary
from kore_dibo.services import message_service

router = APIRouter(prefix="/messages", tags=["messages"])


@router.get("", response_model=List[ConversationSummary])
def list_conversations(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    conversations = message_service.list_conversations(db, user=current_user)
    return [
        ConversationSummary(
            user=ParticipantSummary.model_validate(c["user"]) if c["user"] else None,
            last_message=MessagePublic.model_validate(c["last_message"]),
            unread_count=c["unread_count"],
        )
        for c in conversations
    ]


@router.get("/unread-count", response_model=CountResponse)
def unread_count(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return CountResponse(count=message_service.count_unread(db, user_id=current_user.id))


@router.get("/{user_id}", response_model=ConversationDetail)
def get_conversation(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Messages with one counterpart, oldest first. Opening the conversation
    marks the messages received from that user as read.
    """
    messages, other_user = message_service.get_conversation(
        db, user=current_user, other_user_id=user_id
    )
    return ConversationDetail(
        messages=[MessagePublic.model_validate(m) for m in messages],
        user=ParticipantSummary.model_validate(other_user),
    )


@router.post("", response_model=MessagePublic, status_code=status.HTTP_201_CREATED)
def send_message(
    obj_in: MessageCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return message_service.send_message(db, sender=current_user, obj_in=obj_in)
