# tests/test_api.py

import inspect

import pytest
from fastapi.testclient import TestClient

from risklens.config import Settings, get_settings
from risklens.dependencies import get_llm_gateway, get_notification_gateway, get_risk_store
from risklens.infrastructure.log_notifier import LoggingNotificationGateway
from risklens.main import app
from risklens.services.risk_store import InMemoryRiskStore


@pytest.fixture
def store():
    return InMemoryRiskStore()


@pytest.fixture
def gateway():
    return LoggingNotificationGateway()


@pytest.fixture
def client(store, gateway):
    app.dependency_overrides[get_risk_store] = lambda: store
    app.dependency_overrides[get_notification_gateway] = lambda: gateway
    app.dependency_overrides[get_llm_gateway] = lambda: None
    app.dependency_overrides[get_settings] = lambda: Settings(critical_risk_threshold=20, max_network_records=200)
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def _create(client, **overrides):
    body = {"title": "Server capacity", "business_unit": "IT", "likelihood": 3, "impact": 3}
    body.update(overrides)
    response = client.post("/api/risks", json=body)
    assert response.status_code == 201, response.text
    return response.json()


def test_health(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


class TestRegister:

    def test_create_returns_score_and_level(self, client, gateway):
        created = _create(client, likelihood=4, impact=4)
        assert created["risk"]["score"] == 16
        assert created["level"] == "High"
        assert created["notified"] is False
        assert gateway.sent == []

    def test_critical_risk_triggers_alert(self, client, gateway):
        created = _create(client, title="Data center fire", likelihood=5, impact=4)
        assert created["notified"] is True
        assert gateway.sent[0].metadata["risk_id"] == created["risk"]["id"]

    def test_rejects_out_of_range_scores(self, client):
        response = client.post("/api/risks", json={
            "title": "x", "business_unit": "IT", "likelihood": 6, "impact": 1,
        })
        assert response.status_code == 422

    def test_crud(self, client):
        risk_id = _create(client)["risk"]["id"]

        assert client.get(f"/api/risks/{risk_id}").json()["title"] == "Server capacity"
        assert [r["id"] for r in client.get("/api/risks").json()] == [risk_id]

        patched = client.patch(f"/api/risks/{risk_id}", json={"impact": 5}).json()
        assert patched["score"] == 15
        assert patched["likelihood"] == 3

        assert client.delete(f"/api/risks/{risk_id}").status_code == 204
        assert client.get(f"/api/risks/{risk_id}").status_code == 404

    @pytest.mark.parametrize("body", [{"description": None}, {"likelihood": None}, {"title": None}])
    def test_patch_null_for_required_field_is_422(self, client, body):
        risk_id = _create(client)["risk"]["id"]
        response = client.patch(f"/api/risks/{risk_id}", json=body)
        assert response.status_code == 422
        assert client.get(f"/api/risks/{risk_id}").json()["title"] == "Server capacity"

    def test_patch_null_clears_optional_field(self, client):
        risk_id = _create(client, assigned_to="somchai")["risk"]["id"]
        patched = client.patch(f"/api/risks/{risk_id}", json={"assigned_to": None}).json()
        assert patched["assigned_to"] is None

    @pytest.mark.parametrize("method", ["get", "patch", "delete"])
    def test_missing_risk_is_404(self, client, method):
        kwargs = {"json": {"title": "x"}} if method == "patch" else {}
        response = getattr(client, method)("/api/risks/missing", **kwargs)
        assert response.status_code == 404

    def test_escalate(self, client, gateway):
        risk_id = _create(client)["risk"]["id"]
        response = client.post(f"/api/risks/{risk_id}/escalate")
        assert response.json() == {"risk_id": risk_id, "notified": True}
        assert gateway.sent[-1].kind == "escalation"
        assert client.post("/api/risks/missing/escalate").status_code == 404


class TestAnalytics:

    def test_similar(self, client):
        _create(client, title="Server Bangkok ล่ม")
        _create(client, title="Marketing budget", business_unit="Sales")

        matches = client.post("/api/risks/similar", json={"title": "Server Bangkok ล่มอีกแล้ว"}).json()
        assert len(matches) == 1
        assert matches[0]["risk"]["title"] == "Server Bangkok ล่ม"
        assert 0.3 < matches[0]["similarity"] <= 1.0

    def test_network_and_layout(self, client):
        _create(client, title="Same", likelihood=4, impact=5)
        _create(client, title="Same", likelihood=4, impact=5)
        _create(client, title="Other", business_unit="HR", likelihood=1, impact=1)

        body = client.get("/api/network").json()
        assert body["stats"]["node_count"] == 3
        assert body["stats"]["edge_count"] == 1
        assert body["stats"]["critical_count"] == 2

        layout = client.get("/api/network/layout", params={"ticks": 10, "seed": 1}).json()
        assert len(layout["nodes"]) == 3
        for node in layout["nodes"]:
            assert 30 <= node["x"] <= 770
            assert 30 <= node["y"] <= 470

    def test_cascades(self, client):
        focal = _create(client, title="Server overload", likelihood=4, impact=5)["risk"]["id"]
        response = client.get(f"/api/risks/{focal}/cascades").json()
        assert response["velocity"] == "increasing"
        assert response["cascades"] == []

    def test_sentiment(self, client):
        result = client.post("/api/sentiment", json={"text": "วิกฤต!!!"}).json()
        assert result["category"] == "panic"

        risk_id = _create(client, description="มีแผน")["risk"]["id"]
        batch = client.get("/api/sentiment").json()
        assert batch[risk_id]["category"] == "confident"

        summary = client.get("/api/sentiment/summary").json()
        assert summary["total_risks"] == 1
        assert summary["overall_status"] == "healthy"

    def test_dashboard(self, client):
        _create(client, likelihood=5, impact=5, financial_impact=1000)
        body = client.get("/api/dashboard").json()
        assert body["stats"]["critical"] == 1
        assert body["heat_map"][4][4] == 1
        assert body["financial_exposure"] == 1000

    def test_decisions_and_weekly(self, client):
        _create(client, title="Data center fire", likelihood=5, impact=4)
        _create(client, title="Disk usage", likelihood=3, impact=5)

        items = client.get("/api/dashboard/decisions").json()
        assert [(i["risk"]["title"], i["urgency"]) for i in items] == [
            ("Data center fire", "critical"),
            ("Disk usage", "warning"),
        ]

        weekly = client.get("/api/dashboard/weekly").json()
        assert weekly["critical_count"] == 2
        assert weekly["top_critical"][0]["title"] == "Data center fire"

    def test_classify(self, client):
        body = client.post("/api/classify", json={"text": "the server crashed"}).json()
        assert body["kind"] == "issue"


class TestAssistants:

    def test_advisor_without_llm(self, client):
        body = client.post("/api/advisor", json={
            "title": "Server crashed", "description": "outage", "target_kind": "risk",
        }).json()
        assert body["source"] == "keyword"
        assert body["detected_kind"] == "issue"

    def test_interview_flow(self, client):
        body = client.post("/api/interview/flow", json={"text": "Supplier late again"}).json()
        assert body["selection"]["flow"] == "vendor_delay"
        assert body["questions"][0]["id"] == "vendor_name"

    def test_interview_statement(self, client):
        body = client.post("/api/interview/statement", json={
            "original_input": "Supplier late again",
            "answers": {
                "vendor_name": {"type": "text", "text": "ACME"},
                "mitigation": {"type": "single_choice", "value": "none"},
            },
        }).json()
        assert body["likelihood"] == 4
        assert "ACME" in body["title"]

    @pytest.mark.parametrize("answers", [
        {"mitigation": {"type": "multiple_choice", "values": ["none"]}},
        {"affected_areas": {"type": "text", "text": "revenue"}},
        {"severity": {"type": "single_choice", "value": "5"}},
        {"mitigation": {"type": "single_choice", "value": "someday"}},
    ])
    def test_interview_statement_rejects_answers_that_do_not_fit(self, client, answers):
        response = client.post("/api/interview/statement", json={
            "original_input": "Supplier late again",
            "answers": answers,
        })
        assert response.status_code == 422

    def test_interview_statement_with_explicit_flow(self, client):
        body = client.post("/api/interview/statement", json={
            "original_input": "Supplier late again",
            "flow": "generic",
            "answers": {"severity": {"type": "single_choice", "value": "5"}},
        }).json()
        assert body["impact"] == 5

    def test_interview_statement_rejects_untagged_answer(self, client):
        response = client.post("/api/interview/statement", json={
            "original_input": "Supplier late again",
            "answers": {"vendor_name": "ACME"},
        })
        assert response.status_code == 422


@pytest.mark.parametrize("endpoint", ["correlation_network", "network_layout", "dashboard", "decisions"])
def test_pairwise_endpoints_run_off_the_event_loop(endpoint):
    from risklens.api import routes

    assert not inspect.iscoroutinefunction(getattr(routes, endpoint))
