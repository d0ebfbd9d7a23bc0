from __future__ import annotations

from functools import lru_cache
from typing import Optional

from fastapi import Depends, Header

from claimsdesk.core.context import ViewAsContext
from claimsdesk.core.errors import BadRequestError
from claimsdesk.repositories.claims_repository import ClaimsRepository
from claimsdesk.repositories.commissions_repository import CommissionsRepository
from claimsdesk.repositories.goals_repository import GoalsRepository
from claimsdesk.repositories.notifications_repository import NotificationsRepository
from claimsdesk.repositories.people_repository import PeopleRepository
from claimsdesk.repositories.pipeline_repository import PipelineRepository
from claimsdesk.repositories.plans_repository import PlansRepository
from claimsdesk.repositories.ratings_repository import RatingsRepository
from claimsdesk.repositories.sandbox_store import SandboxStore
from claimsdesk.services.claims_service import ClaimsService
from claimsdesk.services.commissions_service import CommissionsService
from claimsdesk.services.goals_service import GoalsService
from claimsdesk.services.notifications_service import NotificationsService
from claimsdesk.services.people_service import PeopleService
from claimsdesk.services.pipeline_service import PipelineService
from claimsdesk.services.plans_service import PlansService
from claimsdesk.services.progress_service import ProgressService
from claimsdesk.services.ratings_service import RatingsService
from claimsdesk.services.sandbox_service import SandboxService
from claimsdesk.services.scenarios_service import ScenariosService
from claimsdesk.services.team_service import TeamService


@lru_cache
def get_claims_repository() -> ClaimsRepository:
    return ClaimsRepository()


@lru_cache
def get_commissions_repository() -> CommissionsRepository:
    return CommissionsRepository()


@lru_cache
def get_people_repository() -> PeopleRepository:
    return PeopleRepository()


@lru_cache
def get_goals_repository() -> GoalsRepository:
    return GoalsRepository()


@lru_cache
def get_plans_repository() -> PlansRepository:
    return PlansRepository()


@lru_cache
def get_pipeline_repository() -> PipelineRepository:
    return PipelineRepository()


@lru_cache
def get_notifications_repository() -> NotificationsRepository:
    return NotificationsRepository()


@lru_cache
def get_ratings_repository() -> RatingsRepository:
    return RatingsRepository()


@lru_cache
def get_sandbox_store() -> SandboxStore:
    return SandboxStore()


def get_claims_service() -> ClaimsService:
    return ClaimsService(repository=get_claims_repository())


def get_commissions_service() -> CommissionsService:
    return CommissionsService(
        repository=get_commissions_repository(),
        people_repository=get_people_repository(),
    )


def get_scenarios_service() -> ScenariosService:
    return ScenariosService(commissions_repository=get_commissions_repository())


def get_progress_service() -> ProgressService:
    return ProgressService(
        plans_repository=get_plans_repository(),
        commissions_repository=get_commissions_repository(),
    )


def get_pipeline_service() -> PipelineService:
    return PipelineService(
        repository=get_pipeline_repository(),
        commissions_repository=get_commissions_repository(),
    )


def get_sandbox_service() -> SandboxService:
    return SandboxService(store=get_sandbox_store())


def get_goals_service() -> GoalsService:
    return GoalsService(repository=get_goals_repository(), people_repository=get_people_repository())


def get_plans_service() -> PlansService:
    return PlansService(
        repository=get_plans_repository(),
        people_repository=get_people_repository(),
        notifications_repository=get_notifications_repository(),
    )


def get_team_service() -> TeamService:
    return TeamService(
        people_repository=get_people_repository(),
        plans_repository=get_plans_repository(),
        commissions_repository=get_commissions_repository(),
    )


def get_notifications_service() -> NotificationsService:
    return NotificationsService(repository=get_notifications_repository())


def get_ratings_service() -> RatingsService:
    return RatingsService(
        repository=get_ratings_repository(),
        commissions_repository=get_commissions_repository(),
        people_repository=get_people_repository(),
    )


def get_people_service() -> PeopleService:
    return PeopleService(repository=get_people_repository())


def get_view_as_context(
    x_user_email: Optional[str] = Header(default=None),
    x_view_as: Optional[str] = Header(default=None),
    service: PeopleService = Depends(get_people_service),
) -> ViewAsContext:
    return service.resolve_context(x_user_email, x_view_as)


def resolve_salesperson_id(explicit_id: Optional[str], context: ViewAsContext) -> str:
    if explicit_id:
        return explicit_id
    effective = context.effective_salesperson
    if effective is None:
        raise BadRequestError("salesperson_id is required when no user context is provided")
    return effective.id
