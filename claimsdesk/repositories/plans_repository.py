from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from claimsdesk.core.supabase import SupabaseClient
from claimsdesk.models.planning import SalesPlanRecord

PENDING_APPROVAL = "pending_approval"


class PlansRepository:
    def __init__(self) -> None:
        self.client = SupabaseClient()

    def get_plan(self, salesperson_id: str, year: int) -> Optional[SalesPlanRecord]:
        rows, _ = self.client.select(
            table="sales_plans",
            select="*",
            filters=[("salesperson_id", f"eq.{salesperson_id}"), ("year", f"eq.{year}")],
            limit=1,
        )
        if not rows:
            return None
        return SalesPlanRecord.model_validate(rows[0])

    def get_plan_by_id(self, plan_id: str) -> Optional[SalesPlanRecord]:
        rows, _ = self.client.select(
            table="sales_plans",
            select="*",
            filters=[("id", f"eq.{plan_id}")],
            limit=1,
        )
        if not rows:
            return None
        return SalesPlanRecord.model_validate(rows[0])

    def list_plans(self, salesperson_ids: Sequence[str], year: int) -> List[SalesPlanRecord]:
        if not salesperson_ids:
            return []
        rows, _ = self.client.select(
            table="sales_plans",
            select="*",
            filters=[
                ("salesperson_id", f"in.({','.join(salesperson_ids)})"),
                ("year", f"eq.{year}"),
            ],
        )
        return [SalesPlanRecord.model_validate(row) for row in rows]

    def list_pending_approval(self) -> List[SalesPlanRecord]:
        rows, _ = self.client.select(
            table="sales_plans",
            select="*",
            filters=[("approval_status", f"eq.{PENDING_APPROVAL}")],
            order="submitted_at.desc",
        )
        return [SalesPlanRecord.model_validate(row) for row in rows]

    def insert_plan(self, payload: Dict[str, Any]) -> SalesPlanRecord:
        rows = self.client.insert(table="sales_plans", payload=payload)
        return SalesPlanRecord.model_validate(rows[0])

    def update_plan(self, plan_id: str, payload: Dict[str, Any]) -> Optional[SalesPlanRecord]:
        rows = self.client.update(
            table="sales_plans",
            payload=payload,
            filters=[("id", f"eq.{plan_id}")],
        )
        if not rows:
            return None
        return SalesPlanRecord.model_validate(rows[0])
