import pytest
from fastapi.testclient import TestClient

from smartfinance import main
from smartfinance.ai import advice_client
from smartfinance.core.errors import AdviceGenerationFailed
from smartfinance.core.models import AnalysisResult, FinancialField
from smartfinance.core.sample_payloads import SAMPLE_ANALYSIS, SAMPLE_REQUEST


@pytest.fixture
def client():
    return TestClient(main.app)


def test_health_reports_backend_status(client, monkeypatch):
    monkeypatch.setattr(advice_client, "check_backend_online", lambda timeout=None: False)
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok", "adviceBackend": False}


def test_advice_returns_analysis_with_wire_names(client, monkeypatch):
    seen = {}

    async def fake_generate(profile, topics):
        seen["profile"] = profile
        seen["topics"] = topics
        return AnalysisResult.model_validate(SAMPLE_ANALYSIS)

    monkeypatch.setattr(advice_client, "generate_advice", fake_generate)
    resp = client.post("/advice", json=SAMPLE_REQUEST)

    assert resp.status_code == 200
    body = resp.json()
    assert body["overview"] == SAMPLE_ANALYSIS["overview"]
    assert body["suggestions"][0]["actionItem"] == SAMPLE_ANALYSIS["suggestions"][0]["actionItem"]
    assert seen["topics"] == {FinancialField.Stocks, FinancialField.EmergencyFund}
    assert seen["profile"].monthly_income == 50000


def test_advice_rejects_zero_income(client):
    payload = {**SAMPLE_REQUEST, "profile": {**SAMPLE_REQUEST["profile"], "monthlyIncome": 0}}
    resp = client.post("/advice", json=payload)
    assert resp.status_code == 422
    assert resp.json()["detail"] == "Please enter a valid monthly income."


def test_advice_rejects_empty_topics(client):
    resp = client.post("/advice", json={**SAMPLE_REQUEST, "topics": []})
    assert resp.status_code == 422
    assert resp.json()["detail"] == "Please select at least one field for advice."


def test_advice_maps_backend_failure_to_502(client, monkeypatch):
    async def failing_generate(profile, topics):
        raise AdviceGenerationFailed("timeout")

    monkeypatch.setattr(advice_client, "generate_advice", failing_generate)
    resp = client.post("/advice", json=SAMPLE_REQUEST)
    assert resp.status_code == 502
    assert resp.json()["detail"] == "Something went wrong generating advice."


def test_breakdown(client):
    resp = client.post("/breakdown", json=SAMPLE_REQUEST["profile"])
    assert resp.status_code == 200
    body = resp.json()
    assert body["savingsCapacity"] == 20000
    assert [s["name"] for s in body["cashFlow"]] == ["Expenses", "Savings Capacity"]
    assert [s["value"] for s in body["context"]] == [30000, 20000, 10000]


def test_breakdown_uses_camel_case_and_accepts_snake_case_input(client):
    snake = {"monthly_income": 50000, "monthly_expenses": 30000, "current_savings": 10000}
    resp = client.post("/breakdown", json=snake)
    assert resp.status_code == 200
    assert set(resp.json()) == {"savingsCapacity", "cashFlow", "context"}
    assert resp.json()["savingsCapacity"] == 20000
