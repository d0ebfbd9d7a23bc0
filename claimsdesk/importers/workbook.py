"""Best-effort parsing of the commission and claims spreadsheets.

Workbooks come from hand-maintained Excel files, so every parser here skips
what it cannot understand instead of raising.
"""

from __future__ import annotations

import logging
import re
import zipfile
from datetime import date, datetime
from io import BytesIO
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, Union

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException
from pydantic import BaseModel

logger = logging.getLogger(__name__)

WorkbookSource = Union[bytes, str, Path]
SheetRows = List[Tuple[Any, ...]]

IMPORT_OFFICE_CODES = {"h": "Houston", "houston": "Houston", "d": "Dallas", "dallas": "Dallas"}
UNKNOWN_OFFICE = "Unknown"
DEFAULT_SPLIT = 100.0
MIN_YEAR = 2000
MAX_YEAR = 2100
OFFICE_SCAN_ROWS = 9
OFFICE_SCAN_MIN_HITS = 3

_YEAR_PATTERN = re.compile(r"20\d{2}")
_NUMBER_NOISE = re.compile(r"[$,%\s]")


class CommissionImportRow(BaseModel):
    client_name: str
    adjuster: str
    office: str
    percent_change: float
    date_signed: Optional[date]
    year: int
    initial_estimate: float
    revised_estimate: float
    insurance_checks_ytd: float
    old_remainder: float
    new_remainder: float
    split_percentage: float
    fee_percentage: float
    commission_percentage: float
    commissions_paid: float


class CommissionSheet(BaseModel):
    year: int
    rows: List[CommissionImportRow]


class ClaimImportRow(BaseModel):
    name: str
    adjuster: str
    office: str
    date_signed: Optional[date]
    estimate_of_loss: float
    revised_estimate_of_loss: float


def parse_number(value: Any) -> float:
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        return float(value)
    text = _NUMBER_NOISE.sub("", str(value))
    negative = text.startswith("(") and text.endswith(")")
    text = text.strip("()")
    try:
        number = float(text)
    except ValueError:
        return 0.0
    return -number if negative else number


def parse_percent(value: Any) -> float:
    number = parse_number(value)
    # Spreadsheets mix 0.5 and 50 for the same percentage.
    if 0 < number < 1:
        return number * 100
    return number


def parse_date(value: Any) -> Optional[date]:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if value is None:
        return None
    text = str(value).strip()
    for pattern in ("%Y-%m-%d", "%m/%d/%Y", "%m/%d/%y", "%Y/%m/%d"):
        try:
            return datetime.strptime(text[:10], pattern).date()
        except ValueError:
            continue
    return None


def normalize_import_office(raw: Any, keep_raw: bool = True) -> str:
    text = str(raw).strip() if raw is not None else ""
    mapped = IMPORT_OFFICE_CODES.get(text.lower())
    if mapped:
        return mapped
    return text if keep_raw and text else UNKNOWN_OFFICE


def _cell(row: Sequence[Any], index: int) -> Any:
    if index < 0 or index >= len(row):
        return None
    return row[index]


def _text(row: Sequence[Any], index: int) -> str:
    value = _cell(row, index)
    return str(value).strip() if value is not None else ""


def find_column(headers: Sequence[str], predicate: Callable[[str], bool]) -> int:
    for index, header in enumerate(headers):
        if header and predicate(header):
            return index
    return -1


def commission_columns(headers: Sequence[str]) -> Dict[str, int]:
    return {
        "client_name": find_column(headers, lambda h: h == "name" or "client" in h),
        "adjuster": find_column(headers, lambda h: "adjuster" in h and "%" not in h),
        "office": find_column(headers, lambda h: "city" in h or "office" in h),
        "percent_change": find_column(
            headers, lambda h: ("plus" in h and "minus" in h) or ("%" in h and "diff" in h)
        ),
        "date_signed": find_column(headers, lambda h: "date" in h and "signed" in h),
        "initial_estimate": find_column(
            headers,
            lambda h: h in ("estimate of loss", "initial est. of loss")
            or ("estimate" in h and "revised" not in h),
        ),
        "revised_estimate": find_column(headers, lambda h: "revised" in h),
        "insurance_checks_ytd": find_column(
            headers, lambda h: ("ins." in h and "check" in h) or "insurance" in h
        ),
        "old_remainder": find_column(headers, lambda h: "old" in h and "remainder" in h),
        "new_remainder": find_column(headers, lambda h: "new" in h and "remainder" in h),
        "split_percentage": find_column(headers, lambda h: h == "split"),
        "fee_percentage": find_column(headers, lambda h: h == "fee" or ("fee" in h and "check" not in h)),
        "commission_percentage": find_column(
            headers, lambda h: h == "percent" or ("percent" in h and "commission" not in h)
        ),
        "commissions_paid": find_column(
            headers, lambda h: h in ("payed", "paid") or ("paid" in h and "remaining" not in h)
        ),
    }


def skip_commission_sheet(sheet_name: str) -> bool:
    lowered = sheet_name.lower()
    if "template" in lowered or "plan" in lowered or "goal" in lowered:
        return True
    return "commission" in lowered and not _YEAR_PATTERN.search(sheet_name)


def _valid_year(year: Optional[int]) -> bool:
    return year is not None and MIN_YEAR <= year <= MAX_YEAR


def _looks_like_note(client_name: str) -> bool:
    if len(client_name) < 2 or "=" in client_name or "claim" in client_name:
        return True
    return client_name.startswith("$") or client_name.isdigit()


def read_sheets(source: WorkbookSource) -> Dict[str, SheetRows]:
    """All sheets as raw value rows; empty when the workbook cannot be read."""
    handle = BytesIO(source) if isinstance(source, bytes) else source
    try:
        workbook = load_workbook(handle, read_only=True, data_only=True)
    except (InvalidFileException, zipfile.BadZipFile, OSError, KeyError, ValueError) as exc:
        logger.warning("Unable to open workbook: %s", exc)
        return {}
    try:
        return {
            sheet.title: [tuple(row) for row in sheet.iter_rows(values_only=True)]
            for sheet in workbook.worksheets
        }
    finally:
        workbook.close()


def _headers(rows: SheetRows) -> List[str]:
    return [str(h).strip().lower() if h is not None else "" for h in rows[0]]


def parse_commission_rows(sheet_name: str, rows: SheetRows) -> List[CommissionImportRow]:
    if len(rows) < 2:
        return []
    columns = commission_columns(_headers(rows))
    if columns["client_name"] == -1:
        logger.info("Skipping sheet %s: no client name column", sheet_name)
        return []

    year_match = _YEAR_PATTERN.search(sheet_name)
    sheet_year = int(year_match.group(0)) if year_match else None

    parsed: List[CommissionImportRow] = []
    for row in rows[1:]:
        if not row:
            continue
        client_name = _text(row, columns["client_name"])
        if _looks_like_note(client_name):
            continue

        signed = parse_date(_cell(row, columns["date_signed"]))
        year = signed.year if signed else sheet_year
        if not _valid_year(year):
            continue

        initial = parse_number(_cell(row, columns["initial_estimate"]))
        revised = parse_number(_cell(row, columns["revised_estimate"]))
        if initial == 0 and revised == 0:
            continue

        def number(key: str) -> float:
            return parse_number(_cell(row, columns[key]))

        def percent(key: str) -> float:
            return parse_percent(_cell(row, columns[key]))

        parsed.append(
            CommissionImportRow(
                client_name=client_name,
                adjuster=_text(row, columns["adjuster"]),
                office=normalize_import_office(_cell(row, columns["office"])),
                percent_change=number("percent_change"),
                date_signed=signed,
                year=year,
                initial_estimate=initial,
                revised_estimate=revised,
                insurance_checks_ytd=number("insurance_checks_ytd"),
                old_remainder=number("old_remainder"),
                new_remainder=number("new_remainder"),
                split_percentage=percent("split_percentage") or DEFAULT_SPLIT,
                fee_percentage=percent("fee_percentage"),
                commission_percentage=percent("commission_percentage"),
                commissions_paid=number("commissions_paid"),
            )
        )
    return parsed


def parse_commission_workbook(source: WorkbookSource) -> List[CommissionSheet]:
    by_year: Dict[int, List[CommissionImportRow]] = {}
    for sheet_name, rows in read_sheets(source).items():
        if skip_commission_sheet(sheet_name):
            continue
        for row in parse_commission_rows(sheet_name, rows):
            by_year.setdefault(row.year, []).append(row)
    return [CommissionSheet(year=year, rows=rows) for year, rows in sorted(by_year.items())]


def _office_column(rows: SheetRows) -> int:
    width = max((len(row) for row in rows), default=0)
    sample = rows[1 : 1 + OFFICE_SCAN_ROWS]
    for index in range(width):
        hits = sum(1 for row in sample if _text(row, index).upper() in ("H", "D"))
        if hits >= OFFICE_SCAN_MIN_HITS:
            return index
    return -1


def _pick_claims_sheet(sheets: Dict[str, SheetRows], year: str) -> Optional[SheetRows]:
    for name, rows in sheets.items():
        if year in name:
            return rows
    return next(iter(sheets.values()), None)


def parse_claims_workbook(source: WorkbookSource, year: str = "2025") -> List[ClaimImportRow]:
    rows = _pick_claims_sheet(read_sheets(source), year)
    if not rows or len(rows) < 2:
        return []

    headers = _headers(rows)
    name_idx = find_column(headers, lambda h: "name" in h or "insured" in h)
    adjuster_idx = find_column(headers, lambda h: "adjuster" in h)
    date_idx = find_column(headers, lambda h: "date" in h and "signed" in h)
    estimate_idx = find_column(
        headers, lambda h: "estimate" in h and "loss" in h and "revised" not in h
    )
    revised_idx = find_column(headers, lambda h: "revised" in h)
    if name_idx == -1:
        name_idx = 0
    if adjuster_idx == -1:
        adjuster_idx = 1
    if date_idx == -1:
        date_idx = find_column(headers, lambda h: "date" in h)
    if estimate_idx == -1:
        estimate_idx = find_column(headers, lambda h: "estimate" in h)
    office_idx = _office_column(rows)

    claims: List[ClaimImportRow] = []
    for row in rows[1:]:
        if not row:
            continue
        name = _text(row, name_idx)
        if len(name) < 2:
            continue
        estimate = parse_number(_cell(row, estimate_idx))
        revised = parse_number(_cell(row, revised_idx))
        if estimate == 0 and revised == 0:
            continue
        claims.append(
            ClaimImportRow(
                name=name,
                adjuster=_text(row, adjuster_idx),
                office=normalize_import_office(_cell(row, office_idx), keep_raw=False),
                date_signed=parse_date(_cell(row, date_idx)),
                estimate_of_loss=estimate,
                revised_estimate_of_loss=revised,
            )
        )
    return claims
