from __future__ import annotations

from datetime import date

from claimsdesk.importers.workbook import ClaimImportRow, CommissionImportRow
from scripts.import_commissions import build_claim_payload, build_commission_payload, chunk_rows


def test_claim_payload_derives_change_fields() -> None:
    row = ClaimImportRow(
        name="Harbor Storage",
        adjuster="Jeff Miller",
        office="Houston",
        date_signed=date(2025, 1, 10),
        estimate_of_loss=100_000,
        revised_estimate_of_loss=80_000,
    )
    payload = build_claim_payload(row)
    assert payload["dollar_difference"] == -20_000
    assert payload["percent_change"] == -20
    assert payload["change_indicator"] == "decrease"
    assert payload["date_signed"] == "2025-01-10"


def test_commission_payload_marks_rows_open() -> None:
    row = CommissionImportRow(
        client_name="Oak School",
        adjuster="Pat Jones",
        office="Dallas",
        percent_change=0,
        date_signed=None,
        year=2024,
        initial_estimate=500_000,
        revised_estimate=500_000,
        insurance_checks_ytd=0,
        old_remainder=500_000,
        new_remainder=500_000,
        split_percentage=100,
        fee_percentage=7,
        commission_percentage=8,
        commissions_paid=0,
    )
    payload = build_commission_payload(row, "sp-1")
    assert payload["salesperson_id"] == "sp-1"
    assert payload["status"] == "open"
    assert payload["date_signed"] is None


def test_chunk_rows() -> None:
    rows = [{"n": i} for i in range(5)]
    assert [len(batch) for batch in chunk_rows(rows, 2)] == [2, 2, 1]
