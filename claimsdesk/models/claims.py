from __future__ import annotations

from datetime import date, datetime
from typing import Any, Optional

from pydantic import BaseModel, field_validator

from claimsdesk.shared.numbers import coerce_number


class ClaimRecord(BaseModel):
    id: str
    name: str = ""
    adjuster: str = ""
    office: Optional[str] = None
    date_signed: Optional[date] = None
    estimate_of_loss: float = 0.0
    revised_estimate_of_loss: float = 0.0
    percent_change: float = 0.0
    dollar_difference: float = 0.0
    change_indicator: Optional[str] = None
    created_at: Optional[datetime] = None

    @field_validator(
        "estimate_of_loss",
        "revised_estimate_of_loss",
        "percent_change",
        "dollar_difference",
        mode="before",
    )
    @classmethod
    def _default_numeric(cls, value: Any) -> float:
        return coerce_number(value)

    @field_validator("adjuster", "name", mode="before")
    @classmethod
    def _default_text(cls, value: Any) -> str:
        return "" if value is None else str(value)
