from __future__ import annotations


def test_list_claims_uses_camel_case_envelope(client):
    response = client.get("/api/v1/claims")
    assert response.status_code == 200
    payload = response.json()
    claim = payload["data"][0]
    assert claim["estimateOfLoss"] == 100000
    assert claim["revisedEstimateOfLoss"] == 150000
    assert claim["dateSigned"] == "2025-03-04"
    assert payload["pagination"] is None
    assert payload["meta"]["source"] == "claims"
    assert payload["meta"]["timeWindow"] == "all"


def test_claim_adjusters(client):
    response = client.get("/api/v1/claims/adjusters")
    assert response.status_code == 200
    adjuster = response.json()["data"][0]
    assert adjuster["adjuster"] == "Jeff Miller"
    assert adjuster["positiveClaims"] == 1
    assert adjuster["totalDollarDifference"] == 50000


def test_claim_offices(client):
    response = client.get("/api/v1/claims/offices")
    assert response.status_code == 200
    office = response.json()["data"][0]
    assert office["office"] == "Houston"
    assert office["totalAdjusters"] == 1


def test_claims_dashboard(client):
    response = client.get("/api/v1/claims/dashboard")
    assert response.status_code == 200
    stats = response.json()["data"]
    assert stats["totalClaims"] == 1
    assert stats["officeCount"] == 1
