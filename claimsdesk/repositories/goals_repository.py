from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence, Tuple

from claimsdesk.core.supabase import SupabaseClient
from claimsdesk.models.planning import SalesGoalRecord


class GoalsRepository:
    def __init__(self) -> None:
        self.client = SupabaseClient()

    def list_goals(
        self, salesperson_ids: Sequence[str], year: Optional[int] = None
    ) -> List[SalesGoalRecord]:
        if not salesperson_ids:
            return []
        filters: List[Tuple[str, str]] = [("salesperson_id", f"in.({','.join(salesperson_ids)})")]
        if year is not None:
            filters.append(("year", f"eq.{year}"))
        rows, _ = self.client.select(
            table="sales_goals",
            select="*",
            filters=filters,
            order="year.desc",
        )
        return [SalesGoalRecord.model_validate(row) for row in rows]

    def upsert_goal(self, payload: Dict[str, Any]) -> SalesGoalRecord:
        rows = self.client.insert(
            table="sales_goals",
            payload=payload,
            upsert=True,
            on_conflict="salesperson_id,year,goal_type",
        )
        return SalesGoalRecord.model_validate(rows[0])

    def delete_goal(self, goal_id: str) -> bool:
        rows = self.client.delete(table="sales_goals", filters=[("id", f"eq.{goal_id}")])
        return bool(rows)
