from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence, Tuple

import pytest

from claimsdesk.core.errors import NotFoundError
from claimsdesk.models.people import SalespersonRecord
from claimsdesk.models.planning import SalesGoalRecord
from claimsdesk.repositories.goals_repository import GoalsRepository
from claimsdesk.schemas.goals import GoalFilters, GoalUpsertRequest
from claimsdesk.services.goals_service import GoalsService


class StubGoalsRepository:
    def __init__(self) -> None:
        self.goals: Dict[Tuple[str, int, str], SalesGoalRecord] = {}
        self.requested_ids: Optional[List[str]] = None

    def list_goals(self, salesperson_ids: Sequence[str], year: Optional[int] = None) -> List[SalesGoalRecord]:
        self.requested_ids = list(salesperson_ids)
        return [
            goal
            for goal in self.goals.values()
            if goal.salesperson_id in salesperson_ids and (year is None or goal.year == year)
        ]

    def upsert_goal(self, payload: Dict[str, Any]) -> SalesGoalRecord:
        key = (payload["salesperson_id"], payload["year"], payload["goal_type"])
        existing = self.goals.get(key)
        goal_id = existing.id if existing else f"goal-{len(self.goals) + 1}"
        self.goals[key] = SalesGoalRecord(id=goal_id, **payload)
        return self.goals[key]

    def delete_goal(self, goal_id: str) -> bool:
        for key, goal in list(self.goals.items()):
            if goal.id == goal_id:
                del self.goals[key]
                return True
        return False


class StubPeopleRepository:
    def list_team_members(self, manager_id: str) -> List[SalespersonRecord]:
        _ = manager_id
        return [
            SalespersonRecord(id="sp-1", name="Riley Rep", manager_id="dir-1"),
            SalespersonRecord(id="sp-2", name="Sam Seller", manager_id="dir-1"),
        ]


def _service() -> GoalsService:
    return GoalsService(repository=StubGoalsRepository(), people_repository=StubPeopleRepository())


def _goal(salesperson_id: str = "sp-1", year: int = 2025, **overrides: object) -> GoalUpsertRequest:
    data: Dict[str, Any] = dict(salesperson_id=salesperson_id, year=year, target_revenue=10_000_000, target_deals=30)
    data.update(overrides)
    return GoalUpsertRequest(**data)


def test_upsert_replaces_goal_for_same_salesperson_year_and_type() -> None:
    service = _service()
    first = service.upsert_goal(_goal())
    second = service.upsert_goal(_goal(target_revenue=12_000_000))
    quarterly = service.upsert_goal(_goal(goal_type="quarterly", target_revenue=3_000_000))

    assert second.id == first.id
    assert quarterly.id != first.id
    goals = service.list_goals(GoalFilters(salesperson_id="sp-1", year=2025))
    assert sorted(goal.target_revenue for goal in goals) == [3_000_000, 12_000_000]


def test_list_goals_filters_by_year() -> None:
    service = _service()
    service.upsert_goal(_goal(year=2024))
    service.upsert_goal(_goal(year=2025))
    assert [g.year for g in service.list_goals(GoalFilters(salesperson_id="sp-1", year=2024))] == [2024]
    assert len(service.list_goals(GoalFilters(salesperson_id="sp-1"))) == 2


def test_team_goals_include_the_manager() -> None:
    service = _service()
    service.upsert_goal(_goal("sp-1"))
    service.upsert_goal(_goal("dir-1", target_revenue=40_000_000))
    service.upsert_goal(_goal("sp-9"))

    goals = service.get_team_goals("dir-1", 2025)

    assert service.repository.requested_ids == ["sp-1", "sp-2", "dir-1"]
    assert sorted(goal.salesperson_id for goal in goals) == ["dir-1", "sp-1"]


def test_delete_goal() -> None:
    service = _service()
    goal = service.upsert_goal(_goal())
    service.delete_goal(goal.id)
    assert service.list_goals(GoalFilters(salesperson_id="sp-1")) == []
    with pytest.raises(NotFoundError):
        service.delete_goal(goal.id)


class CapturingClient:
    def __init__(self) -> None:
        self.calls: List[Dict[str, Any]] = []

    def insert(self, table, payload, upsert=False, on_conflict=None):
        self.calls.append({"table": table, "upsert": upsert, "on_conflict": on_conflict})
        return [{"id": "goal-1", **payload}]


def test_repository_upserts_on_salesperson_year_and_type() -> None:
    repository = GoalsRepository()
    repository.client = CapturingClient()
    repository.upsert_goal(_goal().model_dump())
    assert repository.client.calls == [
        {"table": "sales_goals", "upsert": True, "on_conflict": "salesperson_id,year,goal_type"}
    ]
