from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query

from claimsdesk.api.dependencies import get_pipeline_service, get_view_as_context, resolve_salesperson_id
from claimsdesk.core.context import ViewAsContext
from claimsdesk.schemas.pipeline import (
    PipelineConversionResult,
    PipelineDeal,
    PipelineDealCreateRequest,
    PipelineDealUpdateRequest,
    PipelineOverview,
)
from claimsdesk.services.pipeline_service import PipelineService
from claimsdesk.shared.response import ResponseEnvelope, build_meta

router = APIRouter(prefix="/pipeline", tags=["pipeline"])

SOURCE = "deal_pipeline"


@router.get("")
def pipeline_overview(
    salesperson_id: Optional[str] = Query(default=None),
    context: ViewAsContext = Depends(get_view_as_context),
    service: PipelineService = Depends(get_pipeline_service),
) -> ResponseEnvelope[PipelineOverview]:
    data = service.get_overview(resolve_salesperson_id(salesperson_id, context))
    return ResponseEnvelope(data=data, pagination=None, meta=build_meta(SOURCE))


@router.post("", status_code=201)
def add_pipeline_deal(
    payload: PipelineDealCreateRequest,
    service: PipelineService = Depends(get_pipeline_service),
) -> ResponseEnvelope[PipelineDeal]:
    return ResponseEnvelope(data=service.add_deal(payload), pagination=None, meta=build_meta(SOURCE))


@router.patch("/{deal_id}")
def update_pipeline_deal(
    deal_id: str,
    payload: PipelineDealUpdateRequest,
    service: PipelineService = Depends(get_pipeline_service),
) -> ResponseEnvelope[PipelineDeal]:
    return ResponseEnvelope(data=service.update_deal(deal_id, payload), pagination=None, meta=build_meta(SOURCE))


@router.delete("/{deal_id}")
def delete_pipeline_deal(
    deal_id: str,
    service: PipelineService = Depends(get_pipeline_service),
) -> ResponseEnvelope[dict]:
    service.delete_deal(deal_id)
    return ResponseEnvelope(data={"deleted": True}, pagination=None, meta=build_meta(SOURCE))


@router.post("/{deal_id}/convert")
def convert_pipeline_deal(
    deal_id: str,
    service: PipelineService = Depends(get_pipeline_service),
) -> ResponseEnvelope[PipelineConversionResult]:
    data = service.convert_to_commission(deal_id)
    return ResponseEnvelope(
        data=data,
        pagination=None,
        meta=build_meta(f"{SOURCE},sales_commissions"),
    )
