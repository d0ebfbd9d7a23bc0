from __future__ import annotations

from typing import Any, Dict, List

from claimsdesk.core.supabase import SupabaseClient
from claimsdesk.models.people import NotificationRecord

MAX_NOTIFICATIONS = 200


class NotificationsRepository:
    def __init__(self) -> None:
        self.client = SupabaseClient()

    def list_for_recipient(self, recipient_id: str) -> List[NotificationRecord]:
        rows, _ = self.client.select(
            table="notifications",
            select="*",
            filters=[("recipient_id", f"eq.{recipient_id}")],
            limit=MAX_NOTIFICATIONS,
            order="created_at.desc",
        )
        return [NotificationRecord.model_validate(row) for row in rows]

    def insert_notification(self, payload: Dict[str, Any]) -> NotificationRecord:
        rows = self.client.insert(table="notifications", payload=payload)
        return NotificationRecord.model_validate(rows[0])

    def mark_read(self, notification_id: str) -> int:
        rows = self.client.update(
            table="notifications",
            payload={"is_read": True},
            filters=[("id", f"eq.{notification_id}")],
        )
        return len(rows)

    def mark_all_read(self, recipient_id: str) -> int:
        rows = self.client.update(
            table="notifications",
            payload={"is_read": True},
            filters=[("recipient_id", f"eq.{recipient_id}"), ("is_read", "eq.false")],
        )
        return len(rows)
