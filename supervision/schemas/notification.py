# supervision/schemas/notification.py
from pydantic import BaseModel
from typing import Optional
from datetime import datetime

from supervision.models.notification import RecipientKind


class NotificationOut(BaseModel):
    id: int
    user_id: int
    user_type: RecipientKind
    notification_type: str
    title: str
    message: str
    is_read: bool
    related_entity_id: Optional[int] = None
    related_entity_type: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class UnreadCount(BaseModel):
    unread_count: int
