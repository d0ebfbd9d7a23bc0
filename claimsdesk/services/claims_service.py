from __future__ import annotations

from typing import List

from claimsdesk.analytics.aggregation import dashboard_stats, summarize_adjusters, summarize_offices
from claimsdesk.repositories.claims_repository import ClaimsRepository
from claimsdesk.schemas.claims import AdjusterSummary, ClaimSummary, DashboardStats, OfficeSummary


class ClaimsService:
    def __init__(self, repository: ClaimsRepository) -> None:
        self.repository = repository

    def list_claims(self) -> List[ClaimSummary]:
        return [ClaimSummary.model_validate(record.model_dump()) for record in self.repository.list_claims()]

    def get_adjusters(self) -> List[AdjusterSummary]:
        summaries = summarize_adjusters(self.repository.list_claims())
        return sorted(summaries, key=lambda summary: summary.total_claims, reverse=True)

    def get_offices(self) -> List[OfficeSummary]:
        return summarize_offices(self.repository.list_claims())

    def get_dashboard_stats(self) -> DashboardStats:
        return dashboard_stats(self.repository.list_claims())
