from __future__ import annotations

from fastapi import APIRouter, Depends

from claimsdesk.api.dependencies import get_sandbox_service
from claimsdesk.schemas.sandbox import (
    HypotheticalDealCreateRequest,
    HypotheticalDealUpdateRequest,
    SandboxResponse,
)
from claimsdesk.services.sandbox_service import SandboxService
from claimsdesk.shared.response import ResponseEnvelope, build_meta

router = APIRouter(prefix="/sandbox", tags=["sandbox"])

SOURCE = "local_sandbox"


@router.get("")
def get_sandbox(
    service: SandboxService = Depends(get_sandbox_service),
) -> ResponseEnvelope[SandboxResponse]:
    return ResponseEnvelope(data=service.get_sandbox(), pagination=None, meta=build_meta(SOURCE))


@router.post("/toggle")
def toggle_sandbox(
    service: SandboxService = Depends(get_sandbox_service),
) -> ResponseEnvelope[SandboxResponse]:
    return ResponseEnvelope(data=service.toggle(), pagination=None, meta=build_meta(SOURCE))


@router.delete("")
def clear_sandbox(
    service: SandboxService = Depends(get_sandbox_service),
) -> ResponseEnvelope[SandboxResponse]:
    return ResponseEnvelope(data=service.clear(), pagination=None, meta=build_meta(SOURCE))


@router.post("/deals", status_code=201)
def add_hypothetical_deal(
    payload: HypotheticalDealCreateRequest,
    service: SandboxService = Depends(get_sandbox_service),
) -> ResponseEnvelope[SandboxResponse]:
    return ResponseEnvelope(data=service.add_deal(payload), pagination=None, meta=build_meta(SOURCE))


@router.patch("/deals/{deal_id}")
def update_hypothetical_deal(
    deal_id: str,
    payload: HypotheticalDealUpdateRequest,
    service: SandboxService = Depends(get_sandbox_service),
) -> ResponseEnvelope[SandboxResponse]:
    return ResponseEnvelope(data=service.update_deal(deal_id, payload), pagination=None, meta=build_meta(SOURCE))


@router.delete("/deals/{deal_id}")
def remove_hypothetical_deal(
    deal_id: str,
    service: SandboxService = Depends(get_sandbox_service),
) -> ResponseEnvelope[SandboxResponse]:
    return ResponseEnvelope(data=service.remove_deal(deal_id), pagination=None, meta=build_meta(SOURCE))
