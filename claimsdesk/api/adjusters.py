from __future__ import annotations

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from claimsdesk.api.dependencies import (
    get_people_service,
    get_ratings_service,
    get_view_as_context,
    resolve_salesperson_id,
)
from claimsdesk.core.context import ViewAsContext
from claimsdesk.schemas.people import Adjuster, AdjusterUpdateRequest
from claimsdesk.schemas.ratings import (
    AdjusterRating,
    AggregatedAdjusterRating,
    ClaimAlert,
    RatingCreateRequest,
    RatingUpdateRequest,
    TeamClaimAlerts,
)
from claimsdesk.services.people_service import PeopleService
from claimsdesk.services.ratings_service import RatingsService
from claimsdesk.shared.response import Meta, ResponseEnvelope, build_meta

router = APIRouter(prefix="/adjusters", tags=["adjusters"])

RATINGS_SOURCE = "adjuster_ratings"


@router.get("")
def list_adjusters(
    service: PeopleService = Depends(get_people_service),
) -> ResponseEnvelope[List[Adjuster]]:
    return ResponseEnvelope(data=service.list_adjusters(), pagination=None, meta=build_meta("adjusters"))


@router.get("/ratings")
def list_ratings(
    salesperson_id: Optional[str] = Query(default=None),
    adjuster: Optional[str] = Query(default=None),
    service: RatingsService = Depends(get_ratings_service),
) -> ResponseEnvelope[List[AdjusterRating]]:
    data = service.list_ratings(salesperson_id, adjuster)
    return ResponseEnvelope(data=data, pagination=None, meta=build_meta(RATINGS_SOURCE, "all"))


@router.post("/ratings", status_code=201)
def create_rating(
    payload: RatingCreateRequest,
    service: RatingsService = Depends(get_ratings_service),
) -> ResponseEnvelope[AdjusterRating]:
    return ResponseEnvelope(data=service.create_rating(payload), pagination=None, meta=build_meta(RATINGS_SOURCE))


@router.patch("/ratings/{rating_id}")
def update_rating(
    rating_id: str,
    payload: RatingUpdateRequest,
    service: RatingsService = Depends(get_ratings_service),
) -> ResponseEnvelope[AdjusterRating]:
    data = service.update_rating(rating_id, payload)
    return ResponseEnvelope(data=data, pagination=None, meta=build_meta(RATINGS_SOURCE))


@router.get("/ratings/aggregated")
def aggregated_ratings(
    service: RatingsService = Depends(get_ratings_service),
) -> ResponseEnvelope[List[AggregatedAdjusterRating]]:
    data = service.get_aggregated_ratings()
    return ResponseEnvelope(data=data, pagination=None, meta=build_meta(RATINGS_SOURCE, "all"))


@router.get("/rating-alerts")
def rating_alerts(
    salesperson_id: Optional[str] = Query(default=None),
    context: ViewAsContext = Depends(get_view_as_context),
    service: RatingsService = Depends(get_ratings_service),
) -> ResponseEnvelope[List[ClaimAlert]]:
    data = service.get_claim_alerts(resolve_salesperson_id(salesperson_id, context))
    meta = Meta(
        as_of_date=date.today().isoformat(),
        source=f"sales_commissions,{RATINGS_SOURCE}",
        time_window="milestones",
        calculation_version="v1",
    )
    return ResponseEnvelope(data=data, pagination=None, meta=meta)


@router.get("/rating-alerts/team")
def team_rating_alerts(
    manager_id: Optional[str] = Query(default=None),
    context: ViewAsContext = Depends(get_view_as_context),
    service: RatingsService = Depends(get_ratings_service),
) -> ResponseEnvelope[List[TeamClaimAlerts]]:
    data = service.get_team_alerts(resolve_salesperson_id(manager_id, context))
    meta = build_meta(f"salespeople,sales_commissions,{RATINGS_SOURCE}", "milestones")
    return ResponseEnvelope(data=data, pagination=None, meta=meta)


@router.patch("/{adjuster_id}")
def update_adjuster(
    adjuster_id: str,
    payload: AdjusterUpdateRequest,
    service: PeopleService = Depends(get_people_service),
) -> ResponseEnvelope[Adjuster]:
    data = service.update_adjuster(adjuster_id, payload)
    return ResponseEnvelope(data=data, pagination=None, meta=build_meta("adjusters"))
