from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence, Tuple

from claimsdesk.core.supabase import SupabaseClient
from claimsdesk.models.planning import AdjusterRatingRecord

MAX_QUERY_ROWS = 5000


class RatingsRepository:
    def __init__(self) -> None:
        self.client = SupabaseClient()

    def list_ratings(
        self,
        salesperson_ids: Optional[Sequence[str]] = None,
        adjuster: Optional[str] = None,
    ) -> List[AdjusterRatingRecord]:
        filters: List[Tuple[str, str]] = []
        if salesperson_ids is not None:
            if not salesperson_ids:
                return []
            filters.append(("salesperson_id", f"in.({','.join(salesperson_ids)})"))
        if adjuster:
            filters.append(("adjuster", f"eq.{adjuster}"))
        rows, _ = self.client.select(
            table="adjuster_ratings",
            select="*",
            filters=filters,
            limit=MAX_QUERY_ROWS,
            order="created_at.desc",
        )
        return [AdjusterRatingRecord.model_validate(row) for row in rows]

    def insert_rating(self, payload: Dict[str, Any]) -> AdjusterRatingRecord:
        rows = self.client.insert(table="adjuster_ratings", payload=payload)
        return AdjusterRatingRecord.model_validate(rows[0])

    def update_rating(self, rating_id: str, payload: Dict[str, Any]) -> Optional[AdjusterRatingRecord]:
        rows = self.client.update(
            table="adjuster_ratings",
            payload=payload,
            filters=[("id", f"eq.{rating_id}")],
        )
        if not rows:
            return None
        return AdjusterRatingRecord.model_validate(rows[0])
