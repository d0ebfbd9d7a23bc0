from __future__ import annotations

from datetime import date, datetime
from io import BytesIO

import pytest
from openpyxl import Workbook

from claimsdesk.importers.workbook import (
    normalize_import_office,
    parse_claims_workbook,
    parse_commission_workbook,
    parse_date,
    parse_number,
    parse_percent,
    skip_commission_sheet,
)

COMMISSION_HEADERS = [
    "Client Name",
    "Adjuster",
    "City",
    "Plus/Minus",
    "Date Signed",
    "Estimate of Loss",
    "Revised Estimate",
    "Insurance Checks YTD",
    "Old Remainder",
    "New Remainder",
    "Split",
    "Fee",
    "Percent",
    "Paid",
]


def _workbook_bytes(workbook: Workbook) -> bytes:
    buffer = BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


def _commission_workbook() -> bytes:
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = "2024 Commissions"
    sheet.append(COMMISSION_HEADERS)
    sheet.append(
        [
            "Harbor Storage",
            "Jeff Miller",
            "H",
            25,
            datetime(2024, 3, 5),
            "$1,000,000",
            1250000,
            250000,
            1000000,
            1000000,
            100,
            0.07,
            "8%",
            1400,
        ]
    )
    sheet.append(["=SUM(F2:F3)", None, None, None, None, 1, 1])
    sheet.append(["Pine Church", "Pat Jones", "Dallas", None, None, 0, 0])
    sheet.append(["Oak School", "Pat Jones", "Austin", None, None, 500000, None])

    later = workbook.create_sheet("2025")
    later.append(COMMISSION_HEADERS)
    later.append(["Bayview Lofts", "Chris M.", "d", None, "01/15/2025", 750000, 800000])

    template = workbook.create_sheet("Template")
    template.append(COMMISSION_HEADERS)
    template.append(["Example Client", "Someone", "H", None, None, 1, 1])

    summary = workbook.create_sheet("Commission Summary")
    summary.append(COMMISSION_HEADERS)
    summary.append(["Rollup", "Everyone", "H", None, None, 1, 1])
    return _workbook_bytes(workbook)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("$1,250,000", 1_250_000),
        ("(5,000)", -5_000),
        ("12.5%", 12.5),
        (42, 42),
        ("n/a", 0),
        (None, 0),
    ],
)
def test_parse_number(raw, expected) -> None:
    assert parse_number(raw) == expected


def test_parse_percent_scales_fractions() -> None:
    assert parse_percent(0.075) == pytest.approx(7.5)
    assert parse_percent("20") == 20
    assert parse_percent(1) == 1


def test_parse_date_formats() -> None:
    assert parse_date(datetime(2024, 3, 5, 12, 30)) == date(2024, 3, 5)
    assert parse_date("2024-03-05") == date(2024, 3, 5)
    assert parse_date("3/5/2024") == date(2024, 3, 5)
    assert parse_date("soon") is None


def test_office_normalization() -> None:
    assert normalize_import_office("h") == "Houston"
    assert normalize_import_office(" Dallas ") == "Dallas"
    assert normalize_import_office("Austin") == "Austin"
    assert normalize_import_office("Austin", keep_raw=False) == "Unknown"
    assert normalize_import_office(None) == "Unknown"


def test_sheet_skipping_rules() -> None:
    assert skip_commission_sheet("Template")
    assert skip_commission_sheet("2025 Goals")
    assert skip_commission_sheet("Commission Summary")
    assert not skip_commission_sheet("2024 Commissions")
    assert not skip_commission_sheet("2023")


def test_parse_commission_workbook_groups_rows_by_year() -> None:
    sheets = parse_commission_workbook(_commission_workbook())

    assert [sheet.year for sheet in sheets] == [2024, 2025]
    first, second = sheets[0].rows
    assert first.client_name == "Harbor Storage"
    assert first.office == "Houston"
    assert first.date_signed == date(2024, 3, 5)
    assert first.initial_estimate == 1_000_000
    assert first.revised_estimate == 1_250_000
    assert first.fee_percentage == pytest.approx(7.0)
    assert first.commission_percentage == 8
    assert first.commissions_paid == 1400

    assert second.client_name == "Oak School"
    assert second.year == 2024
    assert second.office == "Austin"
    assert second.split_percentage == 100

    lofts = sheets[1].rows[0]
    assert lofts.office == "Dallas"
    assert lofts.date_signed == date(2025, 1, 15)


def test_parse_claims_workbook_detects_office_column() -> None:
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = "Claims 2025"
    sheet.append(["Insured Name", "Adjuster", "Loc", "Date Signed", "Estimate of Loss", "Revised Estimate of Loss"])
    sheet.append(["Harbor Storage", "Jeff Miller", "H", datetime(2025, 1, 10), 100000, 150000])
    sheet.append(["Pine Church", "Pat Jones", "D", datetime(2025, 2, 11), 200000, 180000])
    sheet.append(["Oak School", "Pat Jones", "H", None, "$300,000", None])
    sheet.append(["Bayview", "Chris Moore", "X", None, 50000, 50000])
    sheet.append(["X", "Nobody", "H", None, 1, 1])
    sheet.append(["Empty Row", "Nobody", "D", None, 0, 0])

    claims = parse_claims_workbook(_workbook_bytes(workbook), year="2025")

    assert [claim.name for claim in claims] == ["Harbor Storage", "Pine Church", "Oak School", "Bayview"]
    assert [claim.office for claim in claims] == ["Houston", "Dallas", "Houston", "Unknown"]
    assert claims[0].date_signed == date(2025, 1, 10)
    assert claims[2].estimate_of_loss == 300_000
    assert claims[2].revised_estimate_of_loss == 0


def test_unreadable_workbook_yields_nothing() -> None:
    assert parse_commission_workbook(b"not a workbook") == []
    assert parse_claims_workbook(b"not a workbook") == []
