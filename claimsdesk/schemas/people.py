from __future__ import annotations

from typing import Optional

from pydantic import Field

from claimsdesk.shared.base import BaseSchema

ROLE_PATTERN = "^(sales_rep|sales_director)$"


class Salesperson(BaseSchema):
    id: str
    name: str
    email: Optional[str] = None
    role: Optional[str] = None
    manager_id: Optional[str] = None
    is_active: bool


class TeamMemberCreateRequest(BaseSchema):
    name: str = Field(min_length=1)
    email: str = Field(min_length=3)
    role: str = Field(default="sales_rep", pattern=ROLE_PATTERN)
    manager_id: Optional[str] = None


class TeamMemberUpdateRequest(BaseSchema):
    name: Optional[str] = Field(default=None, min_length=1)
    email: Optional[str] = Field(default=None, min_length=3)
    role: Optional[str] = Field(default=None, pattern=ROLE_PATTERN)
    manager_id: Optional[str] = None
    is_active: Optional[bool] = None


class Adjuster(BaseSchema):
    id: str
    name: str
    full_name: Optional[str] = None
    office: Optional[str] = None
    is_active: bool


class AdjusterUpdateRequest(BaseSchema):
    name: Optional[str] = Field(default=None, min_length=1)
    full_name: Optional[str] = None
    office: Optional[str] = None
    is_active: Optional[bool] = None


class RequestContext(BaseSchema):
    current_salesperson: Optional[Salesperson] = None
    viewing_as: Optional[Salesperson] = None
    effective_salesperson: Optional[Salesperson] = None
    is_director: bool
    is_viewing_as_other: bool
