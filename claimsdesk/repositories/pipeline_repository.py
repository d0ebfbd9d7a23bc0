from __future__ import annotations

from typing import Any, Dict, List, Optional

from claimsdesk.core.supabase import SupabaseClient
from claimsdesk.models.planning import PipelineDealRecord


class PipelineRepository:
    def __init__(self) -> None:
        self.client = SupabaseClient()

    def list_deals(self, salesperson_id: str) -> List[PipelineDealRecord]:
        rows, _ = self.client.select(
            table="deal_pipeline",
            select="*",
            filters=[("salesperson_id", f"eq.{salesperson_id}")],
            order="expected_close_date.asc",
        )
        return [PipelineDealRecord.model_validate(row) for row in rows]

    def get_deal(self, deal_id: str) -> Optional[PipelineDealRecord]:
        rows, _ = self.client.select(
            table="deal_pipeline",
            select="*",
            filters=[("id", f"eq.{deal_id}")],
            limit=1,
        )
        if not rows:
            return None
        return PipelineDealRecord.model_validate(rows[0])

    def insert_deal(self, payload: Dict[str, Any]) -> PipelineDealRecord:
        rows = self.client.insert(table="deal_pipeline", payload=payload)
        return PipelineDealRecord.model_validate(rows[0])

    def update_deal(self, deal_id: str, payload: Dict[str, Any]) -> Optional[PipelineDealRecord]:
        rows = self.client.update(
            table="deal_pipeline",
            payload=payload,
            filters=[("id", f"eq.{deal_id}")],
        )
        if not rows:
            return None
        return PipelineDealRecord.model_validate(rows[0])

    def delete_deal(self, deal_id: str) -> bool:
        rows = self.client.delete(table="deal_pipeline", filters=[("id", f"eq.{deal_id}")])
        return bool(rows)
