from __future__ import annotations

from datetime import date
from typing import List, Optional

from claimsdesk.analytics.ratings import (
    aggregate_ratings,
    claim_alerts,
    group_team_alerts,
    survey_average,
)
from claimsdesk.core.errors import NotFoundError
from claimsdesk.repositories.commissions_repository import CommissionsRepository
from claimsdesk.repositories.people_repository import PeopleRepository
from claimsdesk.repositories.ratings_repository import RatingsRepository
from claimsdesk.schemas.ratings import (
    AdjusterRating,
    AggregatedAdjusterRating,
    ClaimAlert,
    RatingCreateRequest,
    RatingUpdateRequest,
    TeamClaimAlerts,
)


class RatingsService:
    def __init__(
        self,
        repository: RatingsRepository,
        commissions_repository: CommissionsRepository,
        people_repository: PeopleRepository,
    ) -> None:
        self.repository = repository
        self.commissions_repository = commissions_repository
        self.people_repository = people_repository

    def list_ratings(
        self, salesperson_id: Optional[str] = None, adjuster: Optional[str] = None
    ) -> List[AdjusterRating]:
        salesperson_ids = [salesperson_id] if salesperson_id else None
        records = self.repository.list_ratings(salesperson_ids=salesperson_ids, adjuster=adjuster)
        return [AdjusterRating.model_validate(record.model_dump()) for record in records]

    def create_rating(self, request: RatingCreateRequest) -> AdjusterRating:
        payload = request.model_dump()
        payload["adjuster"] = request.adjuster.strip()
        payload["rating"] = survey_average(
            request.rating_communication, request.rating_settlement, request.rating_overall
        )
        record = self.repository.insert_rating(payload)
        return AdjusterRating.model_validate(record.model_dump())

    def update_rating(self, rating_id: str, request: RatingUpdateRequest) -> AdjusterRating:
        payload = request.model_dump()
        payload["rating"] = survey_average(
            request.rating_communication, request.rating_settlement, request.rating_overall
        )
        record = self.repository.update_rating(rating_id, payload)
        if not record:
            raise NotFoundError("Adjuster rating not found")
        return AdjusterRating.model_validate(record.model_dump())

    def get_claim_alerts(self, salesperson_id: str, today: Optional[date] = None) -> List[ClaimAlert]:
        records = self.commissions_repository.list_commissions(salesperson_ids=[salesperson_id])
        ratings = self.repository.list_ratings(salesperson_ids=[salesperson_id])
        return claim_alerts(records, ratings, today or date.today())

    def get_team_alerts(self, manager_id: str, today: Optional[date] = None) -> List[TeamClaimAlerts]:
        members = self.people_repository.list_team_members(manager_id)
        names = {member.id: member.name for member in members}
        manager = self.people_repository.get_salesperson(manager_id)
        if manager:
            names[manager.id] = manager.name
        salesperson_ids = sorted(names)
        records = self.commissions_repository.list_commissions(salesperson_ids=salesperson_ids)
        ratings = self.repository.list_ratings(salesperson_ids=salesperson_ids)
        alerts = claim_alerts(records, ratings, today or date.today(), salesperson_names=names)
        return group_team_alerts(alerts)

    def get_aggregated_ratings(self) -> List[AggregatedAdjusterRating]:
        return aggregate_ratings(self.repository.list_ratings())
