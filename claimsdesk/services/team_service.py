from __future__ import annotations

from typing import List

from claimsdesk.analytics.aggregation import team_metrics
from claimsdesk.repositories.commissions_repository import CommissionsRepository
from claimsdesk.repositories.people_repository import PeopleRepository
from claimsdesk.repositories.plans_repository import PlansRepository
from claimsdesk.schemas.commissions import TeamMetrics


class TeamService:
    def __init__(
        self,
        people_repository: PeopleRepository,
        plans_repository: PlansRepository,
        commissions_repository: CommissionsRepository,
    ) -> None:
        self.people_repository = people_repository
        self.plans_repository = plans_repository
        self.commissions_repository = commissions_repository

    def team_member_ids(self, manager_id: str) -> List[str]:
        member_ids = [member.id for member in self.people_repository.list_team_members(manager_id)]
        if manager_id not in member_ids:
            member_ids.append(manager_id)
        return member_ids

    def get_team_metrics(self, manager_id: str, year: int) -> TeamMetrics:
        member_ids = self.team_member_ids(manager_id)
        plans = self.plans_repository.list_plans(member_ids, year)
        records = self.commissions_repository.list_commissions(salesperson_ids=member_ids, year=year)
        return team_metrics(plans, records, member_count=len(member_ids))
