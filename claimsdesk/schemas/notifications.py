from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from claimsdesk.shared.base import BaseSchema


class Notification(BaseSchema):
    id: str
    recipient_id: str
    sender_id: str
    type: str
    message: str
    related_entity: Optional[str] = None
    related_id: Optional[str] = None
    is_read: bool
    created_at: Optional[datetime] = None


class NotificationList(BaseSchema):
    items: List[Notification]
    unread_count: int


class MarkReadResult(BaseSchema):
    updated: int
