from __future__ import annotations

from typing import List

from claimsdesk.core.errors import NotFoundError
from claimsdesk.repositories.goals_repository import GoalsRepository
from claimsdesk.repositories.people_repository import PeopleRepository
from claimsdesk.schemas.goals import GoalFilters, GoalUpsertRequest, SalesGoal


class GoalsService:
    def __init__(self, repository: GoalsRepository, people_repository: PeopleRepository) -> None:
        self.repository = repository
        self.people_repository = people_repository

    def list_goals(self, filters: GoalFilters) -> List[SalesGoal]:
        records = self.repository.list_goals([filters.salesperson_id], filters.year)
        return [SalesGoal.model_validate(record.model_dump()) for record in records]

    def get_team_goals(self, manager_id: str, year: int) -> List[SalesGoal]:
        members = self.people_repository.list_team_members(manager_id)
        salesperson_ids = [member.id for member in members]
        if manager_id not in salesperson_ids:
            salesperson_ids.append(manager_id)
        records = self.repository.list_goals(salesperson_ids, year)
        return [SalesGoal.model_validate(record.model_dump()) for record in records]

    def upsert_goal(self, request: GoalUpsertRequest) -> SalesGoal:
        record = self.repository.upsert_goal(request.model_dump())
        return SalesGoal.model_validate(record.model_dump())

    def delete_goal(self, goal_id: str) -> None:
        if not self.repository.delete_goal(goal_id):
            raise NotFoundError("Sales goal not found")
