from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from claimsdesk.core.supabase import SupabaseClient
from claimsdesk.models.people import AdjusterRecord, SalespersonRecord

DIRECTOR_ROLE = "sales_director"


class PeopleRepository:
    def __init__(self) -> None:
        self.client = SupabaseClient()

    def list_salespeople(self, active_only: bool = True) -> List[SalespersonRecord]:
        filters = [("is_active", "eq.true")] if active_only else []
        rows, _ = self.client.select(
            table="salespeople",
            select="*",
            filters=filters,
            order="name.asc",
        )
        return [SalespersonRecord.model_validate(row) for row in rows]

    def get_salesperson(self, salesperson_id: str) -> Optional[SalespersonRecord]:
        return self._first([("id", f"eq.{salesperson_id}")])

    def get_salesperson_by_email(self, email: str) -> Optional[SalespersonRecord]:
        return self._first([("email", f"eq.{email.strip().lower()}")])

    def get_director(self) -> Optional[SalespersonRecord]:
        return self._first([("role", f"eq.{DIRECTOR_ROLE}"), ("is_active", "eq.true")])

    def list_team_members(self, manager_id: str) -> List[SalespersonRecord]:
        rows, _ = self.client.select(
            table="salespeople",
            select="*",
            filters=[("manager_id", f"eq.{manager_id}"), ("is_active", "eq.true")],
            order="name.asc",
        )
        return [SalespersonRecord.model_validate(row) for row in rows]

    def list_salespeople_by_ids(self, salesperson_ids: Sequence[str]) -> List[SalespersonRecord]:
        if not salesperson_ids:
            return []
        rows, _ = self.client.select(
            table="salespeople",
            select="*",
            filters=[("id", f"in.({','.join(salesperson_ids)})")],
        )
        return [SalespersonRecord.model_validate(row) for row in rows]

    def insert_salesperson(self, payload: Dict[str, Any]) -> SalespersonRecord:
        rows = self.client.insert(table="salespeople", payload=payload)
        return SalespersonRecord.model_validate(rows[0])

    def update_salesperson(
        self, salesperson_id: str, payload: Dict[str, Any]
    ) -> Optional[SalespersonRecord]:
        rows = self.client.update(
            table="salespeople",
            payload=payload,
            filters=[("id", f"eq.{salesperson_id}")],
        )
        if not rows:
            return None
        return SalespersonRecord.model_validate(rows[0])

    def list_adjusters(self, active_only: bool = True) -> List[AdjusterRecord]:
        filters = [("is_active", "eq.true")] if active_only else []
        rows, _ = self.client.select(
            table="adjusters",
            select="*",
            filters=filters,
            order="name.asc",
        )
        return [AdjusterRecord.model_validate(row) for row in rows]

    def update_adjuster(self, adjuster_id: str, payload: Dict[str, Any]) -> Optional[AdjusterRecord]:
        rows = self.client.update(
            table="adjusters",
            payload=payload,
            filters=[("id", f"eq.{adjuster_id}")],
        )
        if not rows:
            return None
        return AdjusterRecord.model_validate(rows[0])

    def _first(self, filters: List[tuple[str, str]]) -> Optional[SalespersonRecord]:
        rows, _ = self.client.select(table="salespeople", select="*", filters=filters, limit=1)
        if not rows:
            return None
        return SalespersonRecord.model_validate(rows[0])
