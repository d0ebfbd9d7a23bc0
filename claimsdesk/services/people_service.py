from __future__ import annotations

from typing import List, Optional

from claimsdesk.analytics.adjuster_matching import normalize_office
from claimsdesk.core.context import ViewAsContext, build_view_as_context
from claimsdesk.core.errors import BadRequestError, NotFoundError
from claimsdesk.models.people import SalespersonRecord
from claimsdesk.repositories.people_repository import PeopleRepository
from claimsdesk.schemas.people import (
    Adjuster,
    AdjusterUpdateRequest,
    RequestContext,
    Salesperson,
    TeamMemberCreateRequest,
    TeamMemberUpdateRequest,
)


def _to_salesperson(record: Optional[SalespersonRecord]) -> Optional[Salesperson]:
    if record is None:
        return None
    return Salesperson.model_validate(record.model_dump())


class PeopleService:
    def __init__(self, repository: PeopleRepository) -> None:
        self.repository = repository

    def list_salespeople(self) -> List[Salesperson]:
        return [Salesperson.model_validate(r.model_dump()) for r in self.repository.list_salespeople()]

    def list_team_members(self, manager_id: str) -> List[Salesperson]:
        return [
            Salesperson.model_validate(r.model_dump())
            for r in self.repository.list_team_members(manager_id)
        ]

    def get_director(self) -> Salesperson:
        director = self.repository.get_director()
        if not director:
            raise NotFoundError("No sales director configured")
        return Salesperson.model_validate(director.model_dump())

    def add_team_member(self, request: TeamMemberCreateRequest) -> Salesperson:
        payload = request.model_dump()
        payload["name"] = request.name.strip()
        payload["email"] = request.email.strip().lower()
        payload["is_active"] = True
        return Salesperson.model_validate(self.repository.insert_salesperson(payload).model_dump())

    def update_team_member(self, salesperson_id: str, request: TeamMemberUpdateRequest) -> Salesperson:
        payload = request.model_dump(exclude_unset=True)
        if payload.get("email"):
            payload["email"] = payload["email"].strip().lower()
        if not payload:
            record = self.repository.get_salesperson(salesperson_id)
        else:
            record = self.repository.update_salesperson(salesperson_id, payload)
        if not record:
            raise NotFoundError("Salesperson not found")
        return Salesperson.model_validate(record.model_dump())

    def list_adjusters(self) -> List[Adjuster]:
        return [Adjuster.model_validate(r.model_dump()) for r in self.repository.list_adjusters()]

    def update_adjuster(self, adjuster_id: str, request: AdjusterUpdateRequest) -> Adjuster:
        payload = request.model_dump(exclude_unset=True)
        if "office" in payload:
            payload["office"] = normalize_office(payload["office"])
        if not payload:
            raise BadRequestError("No adjuster fields to update")
        record = self.repository.update_adjuster(adjuster_id, payload)
        if not record:
            raise NotFoundError("Adjuster not found")
        return Adjuster.model_validate(record.model_dump())

    def resolve_context(self, user_email: Optional[str], view_as_id: Optional[str]) -> ViewAsContext:
        current = self.repository.get_salesperson_by_email(user_email) if user_email else None
        viewing_as = None
        if view_as_id:
            viewing_as = self.repository.get_salesperson(view_as_id)
            if viewing_as is None:
                raise NotFoundError("Salesperson to view as not found")
        return build_view_as_context(current, viewing_as)

    @staticmethod
    def to_request_context(context: ViewAsContext) -> RequestContext:
        return RequestContext(
            current_salesperson=_to_salesperson(context.current_salesperson),
            viewing_as=_to_salesperson(context.viewing_as),
            effective_salesperson=_to_salesperson(context.effective_salesperson),
            is_director=context.is_director,
            is_viewing_as_other=context.is_viewing_as_other,
        )
