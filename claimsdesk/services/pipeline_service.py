from __future__ import annotations

import logging
from datetime import date
from typing import Optional

import httpx

from claimsdesk.analytics.pipeline import (
    default_probability,
    group_by_close_date,
    pipeline_stats,
    to_pipeline_deal,
)
from claimsdesk.core.errors import NotFoundError
from claimsdesk.models.planning import PipelineDealRecord
from claimsdesk.repositories.commissions_repository import CommissionsRepository
from claimsdesk.repositories.pipeline_repository import PipelineRepository
from claimsdesk.schemas.pipeline import (
    PipelineConversionResult,
    PipelineDeal,
    PipelineDealCreateRequest,
    PipelineDealUpdateRequest,
    PipelineOverview,
)

logger = logging.getLogger(__name__)


class PipelineService:
    def __init__(
        self,
        repository: PipelineRepository,
        commissions_repository: CommissionsRepository,
    ) -> None:
        self.repository = repository
        self.commissions_repository = commissions_repository

    def get_overview(self, salesperson_id: str, today: Optional[date] = None) -> PipelineOverview:
        deals = [to_pipeline_deal(record) for record in self.repository.list_deals(salesperson_id)]
        return PipelineOverview(
            deals=deals,
            stats=pipeline_stats(deals),
            groups=group_by_close_date(deals, today or date.today()),
        )

    def add_deal(self, request: PipelineDealCreateRequest) -> PipelineDeal:
        probability = request.probability
        if probability is None:
            probability = default_probability(request.stage)
        record = self.repository.insert_deal(
            {
                "salesperson_id": request.salesperson_id,
                "client_name": request.client_name.strip(),
                "expected_value": request.expected_value,
                "expected_close_date": request.expected_close_date.isoformat(),
                "stage": request.stage,
                "probability": probability,
                "notes": request.notes,
            }
        )
        return to_pipeline_deal(record)

    def update_deal(self, deal_id: str, request: PipelineDealUpdateRequest) -> PipelineDeal:
        payload = {
            key: value
            for key, value in request.model_dump(exclude_unset=True, mode="json").items()
            if value is not None or key == "notes"
        }
        if not payload:
            return to_pipeline_deal(self._require_deal(deal_id))
        # A stage change without an explicit probability moves to the stage default.
        if "stage" in payload and payload.get("probability") is None:
            payload["probability"] = default_probability(payload["stage"])
        record = self.repository.update_deal(deal_id, payload)
        if not record:
            raise NotFoundError("Pipeline deal not found")
        return to_pipeline_deal(record)

    def delete_deal(self, deal_id: str) -> None:
        if not self.repository.delete_deal(deal_id):
            raise NotFoundError("Pipeline deal not found")

    def convert_to_commission(
        self, deal_id: str, today: Optional[date] = None
    ) -> PipelineConversionResult:
        deal = self._require_deal(deal_id)
        signed = today or date.today()
        commission = self.commissions_repository.insert_commission(
            {
                "salesperson_id": deal.salesperson_id,
                "client_name": deal.client_name,
                "initial_estimate": deal.expected_value,
                "revised_estimate": deal.expected_value,
                "old_remainder": deal.expected_value,
                "new_remainder": deal.expected_value,
                "date_signed": signed.isoformat(),
                "year": signed.year,
                "status": "open",
            }
        )
        try:
            removed = self.repository.delete_deal(deal_id)
        except httpx.HTTPError as exc:
            logger.error(
                "Commission %s created from pipeline deal %s but the deal was not removed: %s",
                commission.id,
                deal_id,
                exc,
            )
            removed = False
        return PipelineConversionResult(
            commission_id=commission.id,
            pipeline_deal_id=deal_id,
            pipeline_deal_removed=removed,
        )

    def _require_deal(self, deal_id: str) -> PipelineDealRecord:
        record = self.repository.get_deal(deal_id)
        if not record:
            raise NotFoundError("Pipeline deal not found")
        return record
