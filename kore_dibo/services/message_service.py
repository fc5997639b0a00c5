# kore_dibo/services/message_service.py
from typing import List

from sqlalchemy import and_, or_
from sqlalchemy.orm import Session

from kore_dibo.core.errors import NotFoundError, ValidationError
from kore_dibo.models.message import Message
from kore_dibo.models.notification import NotificationType
from kore_dibo.models.user import User
from kore_dibo.schemas.message import MessageCreate
from kore_dibo.services import user_service
from kore_dibo.services.notification_service import add_notification


def send_message(db: Session, *, sender: User, obj_in: MessageCreate) -> Message:
    receiver = user_service.get_user(db, obj_in.receiver_id)
    if receiver is None:
        raise NotFoundError("Receiver not found")
    if receiver.id == sender.id:
        raise ValidationError("You cannot send a message to yourself")

    message = Message(
        sender_id=sender.id,
        receiver_id=receiver.id,
        content=obj_in.content,
        is_read=False,
    )
    db.add(message)
    add_notification(
        db,
        user_id=receiver.id,
        type=NotificationType.MESSAGE,
        message=f"New message from {sender.full_name}",
        link=f"/messages/{sender.id}",
    )
    db.commit()
    db.refresh(message)
    return message


def list_conversations(db: Session, *, user: User) -> List[dict]:
    """
    Group every message the user sent or received by counterpart.

    Each entry carries the counterpart, the latest message and how many
    messages from that counterpart the user has not read yet. The most
    recently active conversation comes first.
    """
    messages = (
        db.query(Message)
        .filter(or_(Message.sender_id == user.id, Message.receiver_id == user.id))
        .order_by(Message.created_at.desc(), Message.id.desc())
        .all()
    )

    conversations: dict[int, dict] = {}
    for message in messages:
        other_id = message.receiver_id if message.sender_id == user.id else message.sender_id
        conversation = conversations.get(other_id)
        if conversation is None:
            # newest-first ordering: the first message seen is the latest
            conversation = {"user_id": other_id, "last_message": message, "unread_count": 0}
            conversations[other_id] = conversation
        if message.receiver_id == user.id and not message.is_read:
            conversation["unread_count"] += 1

    users = user_service.get_users_by_ids(db, conversations.keys())
    result = []
    for other_id, conversation in conversations.items():
        result.append(
            {
                "user": users.get(other_id),
                "last_message": conversation["last_message"],
                "unread_count": conversation["unread_count"],
            }
        )
    return result


def get_conversation(
    db: Session, *, user: User, other_user_id: int
) -> tuple[List[Message], User]:
    """Messages between the two users in time order; marks received ones read."""
    other_user = user_service.get_user(db, other_user_id)
    if other_user is None:
        raise NotFoundError("User not found")

    messages = (
        db.query(Message)
        .filter(
            or_(
                and_(Message.sender_id == user.id, Message.receiver_id == other_user_id),
                and_(Message.sender_id == other_user_id, Message.receiver_id == user.id),
            )
        )
        .order_by(Message.created_at.asc(), Message.id.asc())
        .all()
    )

    (
        db.query(Message)
        .filter(
            Message.sender_id == other_user_id,
            Message.receiver_id == user.id,
            Message.is_read.is_(False),
        )
        .update({Message.is_read: True}, synchronize_session="evaluate")
    )
    db.commit()
    return messages, other_user


def count_unread(db: Session, *, user_id: int) -> int:
    return (
        db.query(Message)
        .filter(Message.receiver_id == user_id, Message.is_read.is_(False))
        .count()
    )
