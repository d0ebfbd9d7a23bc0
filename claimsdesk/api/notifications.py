from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query

from claimsdesk.api.dependencies import get_notifications_service, get_view_as_context, resolve_salesperson_id
from claimsdesk.core.context import ViewAsContext
from claimsdesk.schemas.notifications import MarkReadResult, NotificationList
from claimsdesk.services.notifications_service import NotificationsService
from claimsdesk.shared.response import ResponseEnvelope, build_meta

router = APIRouter(prefix="/notifications", tags=["notifications"])

SOURCE = "notifications"


@router.get("")
def list_notifications(
    recipient_id: Optional[str] = Query(default=None),
    context: ViewAsContext = Depends(get_view_as_context),
    service: NotificationsService = Depends(get_notifications_service),
) -> ResponseEnvelope[NotificationList]:
    data = service.list_notifications(resolve_salesperson_id(recipient_id, context))
    return ResponseEnvelope(data=data, pagination=None, meta=build_meta(SOURCE, "recent"))


@router.post("/read-all")
def mark_all_notifications_read(
    recipient_id: Optional[str] = Query(default=None),
    context: ViewAsContext = Depends(get_view_as_context),
    service: NotificationsService = Depends(get_notifications_service),
) -> ResponseEnvelope[MarkReadResult]:
    data = service.mark_all_read(resolve_salesperson_id(recipient_id, context))
    return ResponseEnvelope(data=data, pagination=None, meta=build_meta(SOURCE))


@router.post("/{notification_id}/read")
def mark_notification_read(
    notification_id: str,
    service: NotificationsService = Depends(get_notifications_service),
) -> ResponseEnvelope[MarkReadResult]:
    data = service.mark_read(notification_id)
    return ResponseEnvelope(data=data, pagination=None, meta=build_meta(SOURCE))
