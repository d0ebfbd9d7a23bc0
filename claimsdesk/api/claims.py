from __future__ import annotations

from datetime import date
from typing import List

from fastapi import APIRouter, Depends

from claimsdesk.api.dependencies import get_claims_service
from claimsdesk.schemas.claims import AdjusterSummary, ClaimSummary, DashboardStats, OfficeSummary
from claimsdesk.services.claims_service import ClaimsService
from claimsdesk.shared.response import Meta, ResponseEnvelope

router = APIRouter(prefix="/claims", tags=["claims"])


def _claims_meta() -> Meta:
    return Meta(
        as_of_date=date.today().isoformat(),
        source="claims",
        time_window="all",
        calculation_version="v1",
    )


@router.get("")
def list_claims(
    service: ClaimsService = Depends(get_claims_service),
) -> ResponseEnvelope[List[ClaimSummary]]:
    return ResponseEnvelope(data=service.list_claims(), pagination=None, meta=_claims_meta())


@router.get("/adjusters")
def claim_adjusters(
    service: ClaimsService = Depends(get_claims_service),
) -> ResponseEnvelope[List[AdjusterSummary]]:
    return ResponseEnvelope(data=service.get_adjusters(), pagination=None, meta=_claims_meta())


@router.get("/offices")
def claim_offices(
    service: ClaimsService = Depends(get_claims_service),
) -> ResponseEnvelope[List[OfficeSummary]]:
    return ResponseEnvelope(data=service.get_offices(), pagination=None, meta=_claims_meta())


@router.get("/dashboard")
def claims_dashboard(
    service: ClaimsService = Depends(get_claims_service),
) -> ResponseEnvelope[DashboardStats]:
    return ResponseEnvelope(data=service.get_dashboard_stats(), pagination=None, meta=_claims_meta())
