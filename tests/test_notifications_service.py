from __future__ import annotations

from typing import List

import pytest

from claimsdesk.core.errors import NotFoundError
from claimsdesk.models.people import NotificationRecord
from claimsdesk.services.notifications_service import NotificationsService


class StubNotificationsRepository:
    def __init__(self, records: List[NotificationRecord]) -> None:
        self.records = records

    def list_for_recipient(self, recipient_id: str) -> List[NotificationRecord]:
        return [r for r in self.records if r.recipient_id == recipient_id]

    def mark_read(self, notification_id: str) -> int:
        updated = 0
        for index, record in enumerate(self.records):
            if record.id == notification_id:
                self.records[index] = record.model_copy(update={"is_read": True})
                updated += 1
        return updated

    def mark_all_read(self, recipient_id: str) -> int:
        updated = 0
        for index, record in enumerate(self.records):
            if record.recipient_id == recipient_id and not record.is_read:
                self.records[index] = record.model_copy(update={"is_read": True})
                updated += 1
        return updated


def _notification(notification_id: str, recipient_id: str = "sp-1", is_read: bool = False) -> NotificationRecord:
    return NotificationRecord(
        id=notification_id,
        recipient_id=recipient_id,
        sender_id="dir-1",
        type="plan_approved",
        message="Dana Director has approved your sales plan",
        related_entity="sales_plan",
        related_id="plan-1",
        is_read=is_read,
    )


@pytest.fixture()
def service() -> NotificationsService:
    return NotificationsService(
        StubNotificationsRepository(
            [
                _notification("n1"),
                _notification("n2", is_read=True),
                _notification("n3"),
                _notification("n4", recipient_id="sp-2"),
            ]
        )
    )


def test_list_counts_unread_for_recipient(service: NotificationsService) -> None:
    result = service.list_notifications("sp-1")
    assert [item.id for item in result.items] == ["n1", "n2", "n3"]
    assert result.unread_count == 2


def test_mark_read(service: NotificationsService) -> None:
    assert service.mark_read("n1").updated == 1
    assert service.list_notifications("sp-1").unread_count == 1
    with pytest.raises(NotFoundError):
        service.mark_read("missing")


def test_mark_all_read_only_touches_recipient(service: NotificationsService) -> None:
    assert service.mark_all_read("sp-1").updated == 2
    assert service.list_notifications("sp-1").unread_count == 0
    assert service.list_notifications("sp-2").unread_count == 1
