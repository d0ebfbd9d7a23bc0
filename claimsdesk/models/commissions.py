from __future__ import annotations

from datetime import date, datetime
from typing import Any, Optional

from pydantic import BaseModel, field_validator

from claimsdesk.shared.numbers import coerce_number


class CommissionRecord(BaseModel):
    id: str
    salesperson_id: Optional[str] = None
    client_name: str = ""
    adjuster: Optional[str] = None
    office: Optional[str] = None
    date_signed: Optional[date] = None
    year: Optional[int] = None
    initial_estimate: float = 0.0
    revised_estimate: float = 0.0
    percent_change: float = 0.0
    insurance_checks_ytd: float = 0.0
    old_remainder: float = 0.0
    new_remainder: float = 0.0
    split_percentage: float = 0.0
    fee_percentage: float = 0.0
    commission_percentage: float = 0.0
    commissions_paid: float = 0.0
    status: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator(
        "initial_estimate",
        "revised_estimate",
        "percent_change",
        "insurance_checks_ytd",
        "old_remainder",
        "new_remainder",
        "split_percentage",
        "fee_percentage",
        "commission_percentage",
        "commissions_paid",
        mode="before",
    )
    @classmethod
    def _default_numeric(cls, value: Any) -> float:
        return coerce_number(value)

    @field_validator("date_signed", mode="before")
    @classmethod
    def _trim_timestamp(cls, value: Any) -> Any:
        # Imported rows sometimes carry a full timestamp.
        if isinstance(value, str) and len(value) > 10:
            return value[:10]
        return value


class CommissionCheckRecord(BaseModel):
    id: str
    sales_commission_id: str
    check_amount: float = 0.0
    commission_earned: float = 0.0
    received_date: Optional[date] = None
    deposited_date: Optional[date] = None
    check_number: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None

    @field_validator("check_amount", "commission_earned", mode="before")
    @classmethod
    def _default_numeric(cls, value: Any) -> float:
        return coerce_number(value)
