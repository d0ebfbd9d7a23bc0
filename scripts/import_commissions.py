from __future__ import annotations

import argparse
import os
import sys
from typing import Any, Dict, Iterable, List, Optional

SCRIPT_DIR = os.path.dirname(os.path.abspath(__file__))
PROJECT_ROOT = os.path.abspath(os.path.join(SCRIPT_DIR, ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from claimsdesk.analytics.aggregation import percent_change  # noqa: E402
from claimsdesk.importers.workbook import (  # noqa: E402
    ClaimImportRow,
    CommissionImportRow,
    parse_claims_workbook,
    parse_commission_workbook,
)
from claimsdesk.repositories.claims_repository import ClaimsRepository  # noqa: E402
from claimsdesk.repositories.commissions_repository import CommissionsRepository  # noqa: E402


def load_env_file(env_path: str) -> None:
    if not os.path.exists(env_path):
        return
    with open(env_path, "r", encoding="utf-8") as env_file:
        for line in env_file:
            line = line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue
            key, value = line.split("=", 1)
            os.environ.setdefault(key, value)


def chunk_rows(rows: Iterable[Dict[str, Any]], size: int) -> Iterable[List[Dict[str, Any]]]:
    batch: List[Dict[str, Any]] = []
    for row in rows:
        batch.append(row)
        if len(batch) >= size:
            yield batch
            batch = []
    if batch:
        yield batch


def build_commission_payload(row: CommissionImportRow, salesperson_id: Optional[str]) -> Dict[str, Any]:
    payload = row.model_dump(mode="json")
    payload["salesperson_id"] = salesperson_id
    payload["status"] = "open"
    return payload


def build_claim_payload(row: ClaimImportRow) -> Dict[str, Any]:
    payload = row.model_dump(mode="json")
    difference = row.revised_estimate_of_loss - row.estimate_of_loss
    payload["dollar_difference"] = difference
    payload["percent_change"] = percent_change(row.estimate_of_loss, row.revised_estimate_of_loss)
    if difference > 0:
        payload["change_indicator"] = "increase"
    elif difference < 0:
        payload["change_indicator"] = "decrease"
    else:
        payload["change_indicator"] = "no_change"
    return payload


def main() -> None:
    parser = argparse.ArgumentParser(description="Import commission or claims workbooks into Supabase.")
    parser.add_argument("workbook_path", help="Path to the .xlsx workbook")
    parser.add_argument(
        "--kind",
        choices=("commissions", "claims"),
        default="commissions",
        help="Workbook layout to parse",
    )
    parser.add_argument("--salesperson-id", default=None, help="Salesperson owning imported deals")
    parser.add_argument("--claims-year", default="2025", help="Sheet year to read for claims workbooks")
    parser.add_argument("--batch-size", type=int, default=200, help="Rows per request batch")
    parser.add_argument("--dry-run", action="store_true", help="Parse and report without uploading")
    parser.add_argument(
        "--env-file",
        default=os.path.join(PROJECT_ROOT, ".env"),
        help="Path to .env file",
    )
    args = parser.parse_args()

    load_env_file(os.path.abspath(args.env_file))

    if args.kind == "claims":
        claims = parse_claims_workbook(args.workbook_path, args.claims_year)
        payloads = [build_claim_payload(row) for row in claims]
    else:
        sheets = parse_commission_workbook(args.workbook_path)
        for sheet in sheets:
            print(f"Parsed {len(sheet.rows)} row(s) for {sheet.year}")
        payloads = [
            build_commission_payload(row, args.salesperson_id) for sheet in sheets for row in sheet.rows
        ]

    if not payloads:
        print("No importable rows found")
        return
    if args.dry_run:
        print(f"Dry run: {len(payloads)} row(s) parsed, nothing uploaded")
        return

    if args.kind == "claims":
        insert_batch = ClaimsRepository().insert_claims
    else:
        commissions_repository = CommissionsRepository()

        def insert_batch(batch: List[Dict[str, Any]]) -> int:
            return len(commissions_repository.insert_commissions(batch))

    uploaded_rows = 0
    for index, batch in enumerate(chunk_rows(payloads, args.batch_size), start=1):
        uploaded_rows += insert_batch(batch)
        print(f"Uploaded batch {index} ({len(batch)} rows)")
    print(f"Import complete. Rows uploaded: {uploaded_rows}")


if __name__ == "__main__":
    main()
