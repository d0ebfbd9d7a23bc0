from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class SalespersonRecord(BaseModel):
    id: str
    name: str
    email: Optional[str] = None
    role: Optional[str] = None
    manager_id: Optional[str] = None
    is_active: bool = True


class AdjusterRecord(BaseModel):
    id: str
    name: str
    full_name: Optional[str] = None
    office: Optional[str] = None
    is_active: bool = True


class NotificationRecord(BaseModel):
    id: str
    recipient_id: str
    sender_id: str
    type: str
    message: str
    related_entity: Optional[str] = None
    related_id: Optional[str] = None
    is_read: bool = False
    created_at: Optional[datetime] = None
