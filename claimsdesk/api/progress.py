from __future__ import annotations

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query

from claimsdesk.api.dependencies import get_progress_service, get_view_as_context, resolve_salesperson_id
from claimsdesk.core.context import ViewAsContext
from claimsdesk.schemas.pacing import ProgressResponse
from claimsdesk.services.progress_service import ProgressService
from claimsdesk.shared.response import Meta, ResponseEnvelope

router = APIRouter(prefix="/progress", tags=["progress"])


@router.get("")
def plan_progress(
    salesperson_id: Optional[str] = Query(default=None),
    year: Optional[int] = Query(default=None, ge=2000, le=2100),
    context: ViewAsContext = Depends(get_view_as_context),
    service: ProgressService = Depends(get_progress_service),
) -> ResponseEnvelope[ProgressResponse]:
    target_year = year or date.today().year
    data = service.get_progress(resolve_salesperson_id(salesperson_id, context), target_year)
    meta = Meta(
        as_of_date=data.snapshot.as_of.isoformat(),
        source="sales_plans,sales_commissions",
        time_window=str(target_year),
        calculation_version="v1",
    )
    return ResponseEnvelope(data=data, pagination=None, meta=meta)
