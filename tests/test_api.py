from fastapi.testclient import TestClient

from wealthmap.api import app

client = TestClient(app)


def _owner():
    return {
        "type": "entity",
        "entityName": "Harbor Holdings LLC",
        "estimatedNetWorth": 12_000_000,
        "wealthConfidence": 0.7,
        "ownerships": [
            {"ownershipPercent": 100, "property": {"id": "p1", "currentValue": 900000, "propertyType": "commercial", "state": "NY"}},
        ],
    }


def test_health():
    resp = client.get("/api/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_valuation_endpoint():
    resp = client.post(
        "/api/valuation",
        json={"property": {"currentValue": 500000, "squareFootage": 2000, "yearBuilt": 2010, "propertyType": "residential"}},
    )
    assert resp.status_code == 200
    payload = resp.json()
    assert payload["estimatedValue"] > 0
    assert "marketScore" in payload and "riskScore" in payload
    assert "capRate" not in payload


def test_portfolio_endpoint_rejects_non_list():
    resp = client.post("/api/portfolio", json={"properties": "nope"})
    assert resp.status_code == 400
    body = resp.json()
    assert body["code"] == "INVALID_INPUT"
    assert body["error"]


def test_portfolio_endpoint_empty():
    resp = client.post("/api/portfolio", json={"properties": []})
    assert resp.status_code == 200
    assert resp.json()["concentrationRisk"] == 100


def test_market_endpoint_defaults():
    resp = client.post("/api/market", json={"properties": [], "location": "Austin, TX"})
    assert resp.status_code == 200
    payload = resp.json()
    assert payload["daysOnMarket"] == 90
    assert payload["marketTrend"] == "stable"
    assert payload["location"] == "Austin, TX"


def test_wealth_analysis_endpoint():
    resp = client.post("/api/wealth-analysis/owner-42", params={"propertyId": "p1"}, json=_owner())
    assert resp.status_code == 200
    assert resp.headers["cache-control"] == "private, max-age=300"
    assert resp.headers["x-processing-time"].endswith("ms")
    payload = resp.json()
    assert payload["owner"]["id"] == "owner-42"
    assert payload["owner"]["name"] == "Harbor Holdings LLC"
    assert payload["metadata"]["propertyId"] == "p1"
    assert payload["marketComparison"]["percentile"] >= 1


def test_wealth_analysis_rejects_long_owner_id():
    resp = client.post(f"/api/wealth-analysis/{'x' * 120}", json=_owner())
    assert resp.status_code == 400
    assert resp.json()["code"] == "INVALID_INPUT"


def test_report_fields_endpoint():
    resp = client.get("/api/reports/fields")
    assert resp.status_code == 200
    fields = resp.json()["fields"]
    assert {"key": "createdAt", "label": "Date Saved", "category": "personal", "type": "date"} in fields


def test_report_download():
    resp = client.post(
        "/api/reports",
        json={
            "title": "Saved",
            "selectedFields": ["property.address"],
            "selectedProperties": [{"property": {"address": "1 Main St"}}],
            "format": "csv",
        },
    )
    assert resp.status_code == 200
    assert resp.headers["content-disposition"] == 'attachment; filename="saved.csv"'
    assert "1 Main St" in resp.text


def test_error_body_has_only_error_and_code():
    resp = client.post("/api/market", json=["not", "an", "object"])
    assert resp.status_code == 400
    assert set(resp.json()) == {"error", "code"}
