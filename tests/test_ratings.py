from __future__ import annotations

from datetime import date
from typing import Any, Dict, List, Optional

import pytest

from claimsdesk.analytics.ratings import aggregate_ratings, due_milestone, survey_average
from claimsdesk.models.commissions import CommissionRecord
from claimsdesk.models.people import SalespersonRecord
from claimsdesk.models.planning import AdjusterRatingRecord
from claimsdesk.schemas.ratings import RatingCreateRequest
from claimsdesk.services.ratings_service import RatingsService

TODAY = date(2025, 6, 30)


def _commission(
    record_id: str, signed: Optional[date], salesperson_id: str = "sp-1", status: str = "open", adjuster: str = "Jeff Miller"
) -> CommissionRecord:
    return CommissionRecord(
        id=record_id,
        salesperson_id=salesperson_id,
        client_name=f"Client {record_id}",
        adjuster=adjuster,
        date_signed=signed,
        year=signed.year if signed else None,
        status=status,
    )


def _rating(commission_id: str, milestone: str, overall: int = 4, adjuster: str = "Jeff Miller") -> AdjusterRatingRecord:
    return AdjusterRatingRecord(
        id=f"r-{commission_id}-{milestone}",
        sales_commission_id=commission_id,
        salesperson_id="sp-1",
        adjuster=adjuster,
        rating=overall,
        rating_communication=5,
        rating_settlement=3,
        rating_overall=overall,
        claim_milestone=milestone,
    )


class StubRatingsRepository:
    def __init__(self, ratings: Optional[List[AdjusterRatingRecord]] = None) -> None:
        self.ratings = ratings or []
        self.inserted: Optional[Dict[str, Any]] = None

    def list_ratings(
        self, salesperson_ids: Optional[List[str]] = None, adjuster: Optional[str] = None
    ) -> List[AdjusterRatingRecord]:
        _ = salesperson_ids, adjuster
        return self.ratings

    def insert_rating(self, payload: Dict[str, Any]) -> AdjusterRatingRecord:
        self.inserted = payload
        return AdjusterRatingRecord(id="rating-new", **payload)

    def update_rating(self, rating_id: str, payload: Dict[str, Any]) -> Optional[AdjusterRatingRecord]:
        _ = rating_id, payload
        return None


class StubCommissionsRepository:
    def __init__(self, records: List[CommissionRecord]) -> None:
        self.records = records

    def list_commissions(
        self, salesperson_ids: Optional[List[str]] = None, year: Optional[int] = None
    ) -> List[CommissionRecord]:
        _ = year
        return [r for r in self.records if salesperson_ids is None or r.salesperson_id in salesperson_ids]


class StubPeopleRepository:
    def list_team_members(self, manager_id: str) -> List[SalespersonRecord]:
        _ = manager_id
        return [SalespersonRecord(id="sp-1", name="Riley Rep"), SalespersonRecord(id="sp-2", name="Sam Seller")]

    def get_salesperson(self, salesperson_id: str) -> Optional[SalespersonRecord]:
        return SalespersonRecord(id=salesperson_id, name="Dana Director", role="sales_director")


def test_survey_average_rounds_half_up() -> None:
    assert survey_average(4, 5, 5) == 5
    assert survey_average(3, 3, 4) == 3
    assert survey_average(1, 2, 2) == 2


@pytest.mark.parametrize(
    ("signed", "rated", "expected"),
    [
        (date(2025, 6, 20), set(), None),
        (date(2025, 6, 10), set(), "2_weeks"),
        (date(2025, 6, 10), {"2_weeks"}, None),
        (date(2025, 3, 15), {"2_weeks"}, "3_months"),
        (date(2025, 3, 15), {"3_months"}, None),
        (date(2024, 12, 1), {"2_weeks", "3_months"}, "6_months"),
        (date(2024, 12, 1), {"6_months"}, None),
    ],
)
def test_due_milestone_for_open_claims(signed, rated, expected) -> None:
    assert due_milestone(_commission("c1", signed), rated, TODAY) == expected


def test_completed_claims_only_need_completion_rating() -> None:
    paid = _commission("c1", date(2024, 1, 1), status="paid")
    assert due_milestone(paid, {"6_months"}, TODAY) == "completed"
    assert due_milestone(paid, {"completed"}, TODAY) is None
    assert due_milestone(_commission("c2", None), set(), TODAY) is None


def test_create_rating_stores_survey_average() -> None:
    repository = StubRatingsRepository()
    service = RatingsService(repository, StubCommissionsRepository([]), StubPeopleRepository())
    rating = service.create_rating(
        RatingCreateRequest(
            sales_commission_id="c1",
            salesperson_id="sp-1",
            adjuster=" Jeff Miller ",
            rating_communication=5,
            rating_settlement=4,
            rating_overall=5,
            claim_milestone="2_weeks",
        )
    )
    assert repository.inserted["adjuster"] == "Jeff Miller"
    assert rating.rating == 5


def test_claim_alerts_skip_claims_without_adjuster() -> None:
    records = [
        _commission("c1", date(2025, 6, 1)),
        _commission("c2", date(2025, 6, 1), adjuster=""),
        _commission("c3", date(2025, 6, 1)),
    ]
    service = RatingsService(
        StubRatingsRepository([_rating("c3", "2_weeks")]),
        StubCommissionsRepository(records),
        StubPeopleRepository(),
    )
    alerts = service.get_claim_alerts("sp-1", today=TODAY)
    assert [alert.id for alert in alerts] == ["c1"]
    assert alerts[0].milestone == "2_weeks"
    assert alerts[0].salesperson_name is None


def test_team_alerts_grouped_by_salesperson() -> None:
    records = [
        _commission("c1", date(2025, 6, 1), salesperson_id="sp-1"),
        _commission("c2", date(2025, 6, 1), salesperson_id="sp-2"),
        _commission("c3", date(2025, 2, 1), salesperson_id="sp-2"),
    ]
    service = RatingsService(StubRatingsRepository(), StubCommissionsRepository(records), StubPeopleRepository())
    groups = service.get_team_alerts("dir-1", today=TODAY)
    assert [group.salesperson_name for group in groups] == ["Sam Seller", "Riley Rep"]
    assert [alert.milestone for alert in groups[0].alerts] == ["2_weeks", "3_months"]


def test_aggregate_ratings_sorted_by_average() -> None:
    ratings = [
        _rating("c1", "2_weeks", overall=5, adjuster="Jeff Miller"),
        _rating("c2", "2_weeks", overall=3, adjuster="Jeff Miller"),
        _rating("c3", "2_weeks", overall=5, adjuster="Pat Jones"),
    ]
    aggregated = aggregate_ratings(ratings)
    assert [a.adjuster for a in aggregated] == ["Pat Jones", "Jeff Miller"]
    jeff = aggregated[1]
    assert jeff.average_rating == 4
    assert jeff.rating_count == 2
    assert jeff.ratings == [5, 3]
    assert jeff.avg_communication == 5
    assert jeff.avg_settlement == 3
