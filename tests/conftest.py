from __future__ import annotations

import os
from datetime import date
from typing import List

os.environ.setdefault("SUPABASE_URL", "http://localhost:54321")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "test-service-role-key")

import pytest
from fastapi.testclient import TestClient

from claimsdesk.api.dependencies import get_claims_service
from claimsdesk.main import create_app
from claimsdesk.schemas.claims import AdjusterSummary, ClaimSummary, DashboardStats, OfficeSummary


class FakeClaimsService:
    def list_claims(self) -> List[ClaimSummary]:
        return [
            ClaimSummary(
                id="claim-1",
                name="Harbor Storage",
                adjuster="Jeff Miller",
                office="Houston",
                date_signed=date(2025, 3, 4),
                estimate_of_loss=100000,
                revised_estimate_of_loss=150000,
                percent_change=50,
                dollar_difference=50000,
                change_indicator="up",
            )
        ]

    def get_adjusters(self) -> List[AdjusterSummary]:
        return [
            AdjusterSummary(
                adjuster="Jeff Miller",
                office="Houston",
                total_claims=1,
                total_estimate=100000,
                total_revised=150000,
                avg_percent_change=50,
                total_dollar_difference=50000,
                positive_claims=1,
                negative_claims=0,
                positive_difference=50000,
                negative_difference=0,
            )
        ]

    def get_offices(self) -> List[OfficeSummary]:
        return [
            OfficeSummary(
                office="Houston",
                adjusters=["Jeff Miller"],
                total_adjusters=1,
                total_claims=1,
                avg_percent_change=50,
                total_estimate=100000,
                total_revised=150000,
            )
        ]

    def get_dashboard_stats(self) -> DashboardStats:
        return DashboardStats(
            total_claims=1,
            total_adjusters=1,
            avg_percent_change=50,
            office_count=1,
            total_estimate=100000,
            total_revised=150000,
        )


@pytest.fixture()
def client() -> TestClient:
    app = create_app()
    app.dependency_overrides[get_claims_service] = FakeClaimsService
    return TestClient(app)
