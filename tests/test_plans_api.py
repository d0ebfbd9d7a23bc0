from __future__ import annotations

from typing import Optional

import pytest
from fastapi.testclient import TestClient

from claimsdesk.api.dependencies import get_people_service, get_plans_service
from claimsdesk.core.context import ViewAsContext, build_view_as_context
from claimsdesk.core.errors import AppError, ConflictError
from claimsdesk.main import create_app
from claimsdesk.models.people import SalespersonRecord
from claimsdesk.schemas.goals import (
    PendingPlan,
    PendingPlanList,
    PlanReviewRequest,
    PlanSaveRequest,
    PlanSubmitRequest,
    SalesPlan,
)

PEOPLE = {
    "rep@example.com": SalespersonRecord(id="sp-1", name="Riley Rep", email="rep@example.com", role="sales_rep"),
    "director@example.com": SalespersonRecord(
        id="dir-1", name="Dana Director", email="director@example.com", role="sales_director"
    ),
}


def _plan(status: str = "draft", notes: Optional[str] = None) -> SalesPlan:
    return SalesPlan(
        id="plan-1",
        salesperson_id="sp-1",
        year=2025,
        target_revenue=10_000_000,
        target_deals=40,
        target_commission=150_000,
        avg_fee_percent=7.5,
        commission_percent=20,
        selected_scenario="balanced",
        is_active=True,
        approval_status=status,
        reviewer_notes=notes,
    )


class FakePeopleService:
    def resolve_context(self, user_email: Optional[str], view_as_id: Optional[str]) -> ViewAsContext:
        current = PEOPLE.get(user_email or "")
        viewing_as = next((p for p in PEOPLE.values() if p.id == view_as_id), None)
        return build_view_as_context(current, viewing_as)


class FakePlansService:
    requested_salesperson: Optional[str] = None

    def get_plan(self, salesperson_id: str, year: int) -> Optional[SalesPlan]:
        FakePlansService.requested_salesperson = salesperson_id
        return _plan() if salesperson_id == "sp-1" else None

    def save_plan(self, request: PlanSaveRequest) -> SalesPlan:
        if request.salesperson_id == "locked":
            raise ConflictError("Approved plans cannot be edited")
        return _plan()

    def list_pending_approvals(self) -> PendingPlanList:
        return PendingPlanList(items=[PendingPlan(plan=_plan("pending_approval"), salesperson_name="Riley Rep")])

    def submit_plan(self, plan_id: str, request: PlanSubmitRequest) -> SalesPlan:
        _ = plan_id, request
        return _plan("pending_approval")

    def approve_plan(self, plan_id: str, request: PlanReviewRequest) -> SalesPlan:
        _ = plan_id, request
        return _plan("approved")

    def reject_plan(self, plan_id: str, request: PlanReviewRequest) -> SalesPlan:
        _ = plan_id
        if not (request.notes or "").strip():
            raise AppError("validation_error", "Reviewer notes are required when requesting revisions", 422)
        return _plan("rejected", request.notes)


@pytest.fixture()
def client() -> TestClient:
    app = create_app()
    app.dependency_overrides[get_plans_service] = FakePlansService
    app.dependency_overrides[get_people_service] = FakePeopleService
    return TestClient(app)


def test_get_plan_resolves_salesperson_from_user_header(client):
    response = client.get("/api/v1/plans?year=2025", headers={"X-User-Email": "rep@example.com"})
    assert response.status_code == 200
    payload = response.json()
    assert payload["data"]["approvalStatus"] == "draft"
    assert payload["meta"]["timeWindow"] == "2025"
    assert FakePlansService.requested_salesperson == "sp-1"


def test_director_can_view_as_rep(client):
    response = client.get(
        "/api/v1/plans?year=2025",
        headers={"X-User-Email": "director@example.com", "X-View-As": "sp-1"},
    )
    assert response.status_code == 200
    assert FakePlansService.requested_salesperson == "sp-1"


def test_rep_cannot_view_as_someone_else(client):
    response = client.get(
        "/api/v1/plans",
        headers={"X-User-Email": "rep@example.com", "X-View-As": "dir-1"},
    )
    assert response.status_code == 403
    assert response.json()["error"]["code"] == "forbidden"


def test_get_plan_without_context_is_bad_request(client):
    response = client.get("/api/v1/plans")
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "bad_request"


def test_get_plan_returns_null_when_none_saved(client):
    response = client.get("/api/v1/plans?salesperson_id=sp-2&year=2025")
    assert response.status_code == 200
    assert response.json()["data"] is None


def test_save_approved_plan_conflicts(client):
    response = client.put(
        "/api/v1/plans",
        json={"salespersonId": "locked", "year": 2025, "targetRevenue": 1000000, "targetDeals": 10},
    )
    assert response.status_code == 409
    assert response.json()["error"]["code"] == "conflict"


def test_save_plan_validates_scenario(client):
    response = client.put(
        "/api/v1/plans",
        json={
            "salespersonId": "sp-1",
            "year": 2025,
            "targetRevenue": 1000000,
            "targetDeals": 10,
            "selectedScenario": "reckless",
        },
    )
    assert response.status_code == 422
    assert response.json()["error"]["code"] == "validation_error"


def test_submit_without_body(client):
    response = client.post("/api/v1/plans/plan-1/submit")
    assert response.status_code == 200
    assert response.json()["data"]["approvalStatus"] == "pending_approval"


def test_pending_plans(client):
    response = client.get("/api/v1/plans/pending")
    assert response.status_code == 200
    item = response.json()["data"]["items"][0]
    assert item["salespersonName"] == "Riley Rep"
    assert item["plan"]["approvalStatus"] == "pending_approval"


def test_reject_requires_notes(client):
    response = client.post("/api/v1/plans/plan-1/reject", json={"reviewerId": "dir-1"})
    assert response.status_code == 422
    assert response.json()["error"]["code"] == "validation_error"


def test_reject_with_notes(client):
    response = client.post(
        "/api/v1/plans/plan-1/reject",
        json={"reviewerId": "dir-1", "notes": "Raise Q4 targets"},
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["approvalStatus"] == "rejected"
    assert data["reviewerNotes"] == "Raise Q4 targets"
