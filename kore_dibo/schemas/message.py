# kore_dibo/schemas/message.py
from datetime import datetime

from pydantic import BaseModel, Field

from kore_dibo.schemas.user import ParticipantSummary


class MessageCreate(BaseModel):
    receiver_id: int
    content: str = Field(min_length=1, description="Message cannot be empty")


class MessagePublic(BaseModel):
    id: int
    sender_id: int
    receiver_id: int
    content: str
    is_read: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class ConversationSummary(BaseModel):
    user: ParticipantSummary | None = None
    last_message: MessagePublic
    unread_count: int


class ConversationDetail(BaseModel):
    messages: list[MessagePublic]
    user: ParticipantSummary | None = None
