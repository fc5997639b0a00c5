# kore_dibo/schemas/notification.py
from datetime import datetime

from pydantic import BaseModel


class NotificationPublic(BaseModel):
    id: int
    user_id: int
    type: str
    message: str
    link: str | None = None
    is_read: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class MarkReadRequest(BaseModel):
    """Mark one notification when ``id`` is given, otherwise all of them."""
    id: int | None = None
