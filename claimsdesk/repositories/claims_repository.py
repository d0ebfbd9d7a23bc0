from __future__ import annotations

from typing import Any, Dict, List

from claimsdesk.core.config import get_settings
from claimsdesk.core.supabase import SupabaseClient
from claimsdesk.models.claims import ClaimRecord

MAX_QUERY_ROWS = 5000


class ClaimsRepository:
    def __init__(self) -> None:
        self.client = SupabaseClient()
        self.table = get_settings().claims_table

    def list_claims(self) -> List[ClaimRecord]:
        rows, _ = self.client.select(
            table=self.table,
            select="*",
            limit=MAX_QUERY_ROWS,
            order="date_signed.desc",
        )
        return [ClaimRecord.model_validate(row) for row in rows]

    def insert_claims(self, payloads: List[Dict[str, Any]]) -> int:
        rows = self.client.insert(table=self.table, payload=payloads)
        return len(rows)
