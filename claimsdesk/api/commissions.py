from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from claimsdesk.api.dependencies import get_commissions_service
from claimsdesk.schemas.claims import AdjusterSummary
from claimsdesk.schemas.commissions import (
    CheckCreateRequest,
    CheckUpdateRequest,
    CommissionCheck,
    CommissionCreateRequest,
    CommissionFilters,
    CommissionSummary,
    EstimateUpdateRequest,
    SplitCommissionCreateRequest,
    YearSummary,
)
from claimsdesk.services.commissions_service import CommissionsService
from claimsdesk.shared.response import ResponseEnvelope, build_meta

router = APIRouter(prefix="/commissions", tags=["commissions"])

SOURCE = "sales_commissions"


def get_commission_filters(
    salesperson_id: Optional[str] = Query(default=None),
    year: Optional[int] = Query(default=None, ge=2000, le=2100),
) -> CommissionFilters:
    return CommissionFilters(salesperson_id=salesperson_id, year=year)


@router.get("")
def list_commissions(
    filters: CommissionFilters = Depends(get_commission_filters),
    service: CommissionsService = Depends(get_commissions_service),
) -> ResponseEnvelope[List[CommissionSummary]]:
    data = service.list_commissions(filters)
    meta = build_meta(SOURCE, str(filters.year) if filters.year else "all")
    return ResponseEnvelope(data=data, pagination=None, meta=meta)


@router.post("", status_code=201)
def add_commission(
    payload: CommissionCreateRequest,
    service: CommissionsService = Depends(get_commissions_service),
) -> ResponseEnvelope[CommissionSummary]:
    return ResponseEnvelope(data=service.add_commission(payload), pagination=None, meta=build_meta(SOURCE))


@router.post("/split", status_code=201)
def add_split_commission(
    payload: SplitCommissionCreateRequest,
    service: CommissionsService = Depends(get_commissions_service),
) -> ResponseEnvelope[List[CommissionSummary]]:
    data = service.add_split_commission(payload)
    return ResponseEnvelope(data=data, pagination=None, meta=build_meta(SOURCE))


@router.get("/years")
def commission_year_summaries(
    salesperson_id: Optional[str] = Query(default=None),
    service: CommissionsService = Depends(get_commissions_service),
) -> ResponseEnvelope[List[YearSummary]]:
    data = service.get_year_summaries(salesperson_id)
    return ResponseEnvelope(data=data, pagination=None, meta=build_meta(SOURCE, "all"))


@router.get("/available-years")
def commission_available_years(
    salesperson_id: Optional[str] = Query(default=None),
    service: CommissionsService = Depends(get_commissions_service),
) -> ResponseEnvelope[List[int]]:
    data = service.get_available_years(salesperson_id)
    return ResponseEnvelope(data=data, pagination=None, meta=build_meta(SOURCE, "all"))


@router.get("/adjusters")
def commission_adjusters(
    filters: CommissionFilters = Depends(get_commission_filters),
    service: CommissionsService = Depends(get_commissions_service),
) -> ResponseEnvelope[List[AdjusterSummary]]:
    data = service.get_adjuster_summaries(filters)
    meta = build_meta(f"{SOURCE},adjusters", str(filters.year) if filters.year else "all")
    return ResponseEnvelope(data=data, pagination=None, meta=meta)


@router.patch("/checks/{check_id}")
def update_check(
    check_id: str,
    payload: CheckUpdateRequest,
    service: CommissionsService = Depends(get_commissions_service),
) -> ResponseEnvelope[CommissionCheck]:
    data = service.update_check(check_id, payload)
    return ResponseEnvelope(data=data, pagination=None, meta=build_meta("commission_checks"))


@router.delete("/checks/{check_id}")
def delete_check(
    check_id: str,
    service: CommissionsService = Depends(get_commissions_service),
) -> ResponseEnvelope[dict]:
    service.delete_check(check_id)
    return ResponseEnvelope(data={"deleted": True}, pagination=None, meta=build_meta("commission_checks"))


@router.get("/{commission_id}")
def get_commission(
    commission_id: str,
    service: CommissionsService = Depends(get_commissions_service),
) -> ResponseEnvelope[CommissionSummary]:
    return ResponseEnvelope(data=service.get_commission(commission_id), pagination=None, meta=build_meta(SOURCE))


@router.patch("/{commission_id}/estimate")
def update_estimate(
    commission_id: str,
    payload: EstimateUpdateRequest,
    service: CommissionsService = Depends(get_commissions_service),
) -> ResponseEnvelope[CommissionSummary]:
    data = service.update_estimate(commission_id, payload)
    return ResponseEnvelope(data=data, pagination=None, meta=build_meta(SOURCE))


@router.get("/{commission_id}/checks")
def list_checks(
    commission_id: str,
    service: CommissionsService = Depends(get_commissions_service),
) -> ResponseEnvelope[List[CommissionCheck]]:
    data = service.list_checks(commission_id)
    return ResponseEnvelope(data=data, pagination=None, meta=build_meta("commission_checks"))


@router.post("/{commission_id}/checks", status_code=201)
def record_check(
    commission_id: str,
    payload: CheckCreateRequest,
    service: CommissionsService = Depends(get_commissions_service),
) -> ResponseEnvelope[CommissionCheck]:
    data = service.record_check(commission_id, payload)
    return ResponseEnvelope(data=data, pagination=None, meta=build_meta("commission_checks,sales_commissions"))
