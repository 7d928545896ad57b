from __future__ import annotations

from fastapi.testclient import TestClient

from agents.llm_runtime import LLMRuntime
from agents.orchestrator import OrchestratorAgent
from api.main import create_app
from compliance.audit_logger import AuditLogger


def _client() -> TestClient:
    orchestrator = OrchestratorAgent(llm=LLMRuntime(provider="heuristic"), audit_logger=AuditLogger(path=""))
    return TestClient(create_app(orchestrator=orchestrator))


def test_aircraft_and_operator_lookups():
    client = _client()
    specs = client.get("/api/v1/tools/aircraft/G650")
    assert specs.status_code == 200
    assert specs.json()["data"]["type"] == "Gulfstream G650"

    missing = client.get("/api/v1/tools/aircraft/Concorde")
    assert missing.status_code == 404
    assert missing.json()["detail"] == "Aircraft type not found"

    operator = client.get("/api/v1/tools/operators/op_4")
    assert operator.status_code == 200
    assert operator.json()["data"]["name"] == "Thames Jet Charter"
    assert client.get("/api/v1/tools/operators/op_404").status_code == 404


def test_sanctions_check_endpoint():
    client = _client()
    hit = client.post("/api/v1/tools/sanctions-check", json={"name": "Jane Smith"})
    assert hit.status_code == 200
    assert hit.json()["data"] == {"clear": False, "notes": "Match found in sanctions database"}

    clear = client.post("/api/v1/tools/sanctions-check", json={"name": "Alex Smith", "country": "France"})
    assert clear.json()["data"]["clear"] is True


def test_price_match_endpoint():
    client = _client()
    resp = client.post(
        "/api/v1/tools/price-match",
        json={
            "candidates": [
                {"operator_id": "op_1", "est_price_gbp": 37000},
                {"operator_id": "op_2", "est_price_gbp": 33000},
                {"operator_id": "op_3", "est_price_gbp": 42500},
            ],
            "target_budget_gbp": 35000,
            "tie_break": "aog_history",
        },
    )
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["best_operator_id"] == "op_2"
    assert data["note"] == "Within budget"

    empty = client.post("/api/v1/tools/price-match", json={"candidates": [], "target_budget_gbp": 35000})
    assert empty.status_code == 422
    assert empty.json()["detail"] == "No candidates to match"

    bad_tie_break = client.post(
        "/api/v1/tools/price-match",
        json={"candidates": [{"operator_id": "op_1", "est_price_gbp": 1}], "target_budget_gbp": 1, "tie_break": "vibes"},
    )
    assert bad_tie_break.status_code == 422
