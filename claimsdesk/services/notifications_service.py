from __future__ import annotations

from claimsdesk.core.errors import NotFoundError
from claimsdesk.repositories.notifications_repository import NotificationsRepository
from claimsdesk.schemas.notifications import MarkReadResult, Notification, NotificationList


class NotificationsService:
    def __init__(self, repository: NotificationsRepository) -> None:
        self.repository = repository

    def list_notifications(self, recipient_id: str) -> NotificationList:
        items = [
            Notification.model_validate(record.model_dump())
            for record in self.repository.list_for_recipient(recipient_id)
        ]
        return NotificationList(
            items=items,
            unread_count=sum(1 for item in items if not item.is_read),
        )

    def mark_read(self, notification_id: str) -> MarkReadResult:
        updated = self.repository.mark_read(notification_id)
        if not updated:
            raise NotFoundError("Notification not found")
        return MarkReadResult(updated=updated)

    def mark_all_read(self, recipient_id: str) -> MarkReadResult:
        return MarkReadResult(updated=self.repository.mark_all_read(recipient_id))
