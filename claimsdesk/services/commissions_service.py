from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional

from claimsdesk.analytics.adjuster_matching import normalize_office, summarize_adjuster_commissions
from claimsdesk.analytics.aggregation import (
    available_years,
    commission_on,
    percent_change,
    summarize_commission_years,
)
from claimsdesk.core.errors import NotFoundError
from claimsdesk.models.commissions import CommissionCheckRecord, CommissionRecord
from claimsdesk.repositories.commissions_repository import CommissionsRepository
from claimsdesk.repositories.people_repository import PeopleRepository
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

logger = logging.getLogger(__name__)

OPEN_STATUS = "open"


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _remainder(revised_estimate: float, checks_total: float) -> float:
    return max(0.0, revised_estimate - checks_total)


class CommissionsService:
    def __init__(self, repository: CommissionsRepository, people_repository: PeopleRepository) -> None:
        self.repository = repository
        self.people_repository = people_repository

    def list_commissions(self, filters: CommissionFilters) -> List[CommissionSummary]:
        salesperson_ids = [filters.salesperson_id] if filters.salesperson_id else None
        records = self.repository.list_commissions(salesperson_ids=salesperson_ids, year=filters.year)
        return [self._to_summary(record) for record in records]

    def get_commission(self, commission_id: str) -> CommissionSummary:
        return self._to_summary(self._require_commission(commission_id))

    def get_year_summaries(self, salesperson_id: Optional[str]) -> List[YearSummary]:
        salesperson_ids = [salesperson_id] if salesperson_id else None
        return summarize_commission_years(self.repository.list_commissions(salesperson_ids=salesperson_ids))

    def get_available_years(self, salesperson_id: Optional[str]) -> List[int]:
        salesperson_ids = [salesperson_id] if salesperson_id else None
        return available_years(self.repository.list_commissions(salesperson_ids=salesperson_ids))

    def get_adjuster_summaries(self, filters: CommissionFilters) -> List[AdjusterSummary]:
        salesperson_ids = [filters.salesperson_id] if filters.salesperson_id else None
        records = self.repository.list_commissions(salesperson_ids=salesperson_ids, year=filters.year)
        registry = self.people_repository.list_adjusters()
        summaries = summarize_adjuster_commissions(records, registry)
        return sorted(summaries, key=lambda summary: summary.total_revised, reverse=True)

    def add_commission(
        self, request: CommissionCreateRequest, today: Optional[date] = None
    ) -> CommissionSummary:
        payload = self._new_commission_payload(
            request, request.salesperson_id, request.split_percentage, today
        )
        return self._to_summary(self.repository.insert_commission(payload))

    def add_split_commission(
        self, request: SplitCommissionCreateRequest, today: Optional[date] = None
    ) -> List[CommissionSummary]:
        """One row per salesperson, written in a single batch insert."""
        payloads = [
            self._new_commission_payload(request, split.salesperson_id, split.split_percentage, today)
            for split in request.splits
        ]
        return [self._to_summary(record) for record in self.repository.insert_commissions(payloads)]

    @staticmethod
    def _new_commission_payload(
        request: CommissionCreateRequest | SplitCommissionCreateRequest,
        salesperson_id: str,
        split_percentage: float,
        today: Optional[date],
    ) -> Dict[str, Any]:
        signed = request.date_signed or today or date.today()
        return {
            "salesperson_id": salesperson_id,
            "client_name": request.client_name.strip(),
            "adjuster": request.adjuster.strip() if request.adjuster else None,
            "office": normalize_office(request.office),
            "date_signed": signed.isoformat(),
            "year": signed.year,
            "initial_estimate": request.initial_estimate,
            "revised_estimate": request.initial_estimate,
            "percent_change": 0,
            "insurance_checks_ytd": 0,
            "old_remainder": request.initial_estimate,
            "new_remainder": request.initial_estimate,
            "split_percentage": split_percentage,
            "fee_percentage": request.fee_percentage,
            "commission_percentage": request.commission_percentage,
            "commissions_paid": 0,
            "status": OPEN_STATUS,
        }

    def update_estimate(self, commission_id: str, request: EstimateUpdateRequest) -> CommissionSummary:
        record = self._require_commission(commission_id)
        payload = {
            "revised_estimate": request.revised_estimate,
            "percent_change": percent_change(record.initial_estimate, request.revised_estimate),
            "new_remainder": _remainder(request.revised_estimate, record.insurance_checks_ytd),
            "updated_at": _now_iso(),
        }
        updated = self.repository.update_commission(commission_id, payload)
        if not updated:
            raise NotFoundError("Commission not found")
        return self._to_summary(updated)

    def list_checks(self, commission_id: str) -> List[CommissionCheck]:
        return [
            CommissionCheck.model_validate(check.model_dump())
            for check in self.repository.list_checks(commission_id)
        ]

    def record_check(self, commission_id: str, request: CheckCreateRequest) -> CommissionCheck:
        record = self._require_commission(commission_id)
        earned = commission_on(request.check_amount, record)
        check = self.repository.insert_check(
            {
                "sales_commission_id": commission_id,
                "check_amount": request.check_amount,
                "commission_earned": earned,
                "received_date": request.received_date.isoformat(),
                "deposited_date": request.deposited_date.isoformat() if request.deposited_date else None,
                "check_number": (request.check_number or "").strip() or None,
                "notes": (request.notes or "").strip() or None,
            }
        )
        self._apply_totals(record, request.check_amount, earned, check.id)
        return CommissionCheck.model_validate(check.model_dump())

    def update_check(self, check_id: str, request: CheckUpdateRequest) -> CommissionCheck:
        existing = self._require_check(check_id)
        record = self._require_commission(existing.sales_commission_id)
        changes = request.model_dump(exclude_unset=True)
        payload: Dict[str, Any] = {}
        for key in ("received_date", "deposited_date"):
            if changes.get(key) is not None:
                payload[key] = changes[key].isoformat()
        for key in ("check_number", "notes"):
            if key in changes:
                payload[key] = (changes[key] or "").strip() or None
        amount = existing.check_amount
        earned = existing.commission_earned
        if changes.get("check_amount") is not None:
            amount = changes["check_amount"]
            earned = commission_on(amount, record)
            payload["check_amount"] = amount
            payload["commission_earned"] = earned
        if not payload:
            return CommissionCheck.model_validate(existing.model_dump())
        updated = self.repository.update_check(check_id, payload)
        if not updated:
            raise NotFoundError("Check not found")
        if "check_amount" in payload:
            self._apply_totals(
                record,
                amount - existing.check_amount,
                earned - existing.commission_earned,
                check_id,
            )
        return CommissionCheck.model_validate(updated.model_dump())

    def delete_check(self, check_id: str) -> None:
        existing = self._require_check(check_id)
        record = self._require_commission(existing.sales_commission_id)
        self.repository.delete_check(check_id)
        self._apply_totals(record, -existing.check_amount, -existing.commission_earned, check_id)

    def _apply_totals(
        self, record: CommissionRecord, amount_delta: float, earned_delta: float, check_id: str
    ) -> None:
        checks_total = max(0.0, record.insurance_checks_ytd + amount_delta)
        payload = {
            "insurance_checks_ytd": checks_total,
            "commissions_paid": max(0.0, record.commissions_paid + earned_delta),
            "new_remainder": _remainder(record.revised_estimate, checks_total),
            "updated_at": _now_iso(),
        }
        try:
            self.repository.update_commission(record.id, payload)
        except Exception:
            # Check row already written; totals must be reconciled by hand.
            logger.error(
                "Check %s written but totals for commission %s were not updated", check_id, record.id
            )
            raise

    def _require_commission(self, commission_id: str) -> CommissionRecord:
        record = self.repository.get_commission(commission_id)
        if not record:
            raise NotFoundError("Commission not found")
        return record

    def _require_check(self, check_id: str) -> CommissionCheckRecord:
        check = self.repository.get_check(check_id)
        if not check:
            raise NotFoundError("Check not found")
        return check

    @staticmethod
    def _to_summary(record: CommissionRecord) -> CommissionSummary:
        return CommissionSummary.model_validate(record.model_dump())
