from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence, Tuple

from claimsdesk.core.supabase import SupabaseClient
from claimsdesk.models.commissions import CommissionCheckRecord, CommissionRecord

MAX_QUERY_ROWS = 5000


def year_filter(year: int) -> Tuple[str, str]:
    """Rows for ``year``; rows without a year fall back to the year they were signed."""
    return (
        "or",
        f"(year.eq.{year},and(year.is.null,date_signed.gte.{year}-01-01,date_signed.lte.{year}-12-31))",
    )


class CommissionsRepository:
    def __init__(self) -> None:
        self.client = SupabaseClient()

    def list_commissions(
        self,
        salesperson_ids: Optional[Sequence[str]] = None,
        year: Optional[int] = None,
    ) -> List[CommissionRecord]:
        filters: List[Tuple[str, str]] = []
        if salesperson_ids is not None:
            if not salesperson_ids:
                return []
            filters.append(("salesperson_id", f"in.({','.join(salesperson_ids)})"))
        if year is not None:
            filters.append(year_filter(year))
        rows, _ = self.client.select(
            table="sales_commissions",
            select="*",
            filters=filters,
            limit=MAX_QUERY_ROWS,
            order="date_signed.desc",
        )
        return [CommissionRecord.model_validate(row) for row in rows]

    def get_commission(self, commission_id: str) -> Optional[CommissionRecord]:
        rows, _ = self.client.select(
            table="sales_commissions",
            select="*",
            filters=[("id", f"eq.{commission_id}")],
            limit=1,
        )
        if not rows:
            return None
        return CommissionRecord.model_validate(rows[0])

    def insert_commission(self, payload: Dict[str, Any]) -> CommissionRecord:
        rows = self.client.insert(table="sales_commissions", payload=payload)
        return CommissionRecord.model_validate(rows[0])

    def insert_commissions(self, payloads: List[Dict[str, Any]]) -> List[CommissionRecord]:
        if not payloads:
            return []
        rows = self.client.insert(table="sales_commissions", payload=payloads)
        return [CommissionRecord.model_validate(row) for row in rows]

    def update_commission(self, commission_id: str, payload: Dict[str, Any]) -> Optional[CommissionRecord]:
        rows = self.client.update(
            table="sales_commissions",
            payload=payload,
            filters=[("id", f"eq.{commission_id}")],
        )
        if not rows:
            return None
        return CommissionRecord.model_validate(rows[0])

    def list_checks(self, commission_id: str) -> List[CommissionCheckRecord]:
        rows, _ = self.client.select(
            table="commission_checks",
            select="*",
            filters=[("sales_commission_id", f"eq.{commission_id}")],
            limit=MAX_QUERY_ROWS,
            order="received_date.desc",
        )
        return [CommissionCheckRecord.model_validate(row) for row in rows]

    def get_check(self, check_id: str) -> Optional[CommissionCheckRecord]:
        rows, _ = self.client.select(
            table="commission_checks",
            select="*",
            filters=[("id", f"eq.{check_id}")],
            limit=1,
        )
        if not rows:
            return None
        return CommissionCheckRecord.model_validate(rows[0])

    def insert_check(self, payload: Dict[str, Any]) -> CommissionCheckRecord:
        rows = self.client.insert(table="commission_checks", payload=payload)
        return CommissionCheckRecord.model_validate(rows[0])

    def update_check(self, check_id: str, payload: Dict[str, Any]) -> Optional[CommissionCheckRecord]:
        rows = self.client.update(
            table="commission_checks",
            payload=payload,
            filters=[("id", f"eq.{check_id}")],
        )
        if not rows:
            return None
        return CommissionCheckRecord.model_validate(rows[0])

    def delete_check(self, check_id: str) -> None:
        self.client.delete(table="commission_checks", filters=[("id", f"eq.{check_id}")])
