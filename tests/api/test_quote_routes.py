"""Tests for the HTTP API."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from quoter.api.app import app
from quoter.api.deps import get_webhook_client
from quoter.data.webhook import DeliveryOutcome

CONTACT = {"name": "A Broker", "phone": "+44 7123 456789", "email": "a@broker.co.uk"}


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def webhook():
    fake = MagicMock()
    fake.url = "https://hooks.example.test/lead"
    fake.deliver = AsyncMock(return_value=DeliveryOutcome(delivered=True, method="json", status_code=200))
    app.dependency_overrides[get_webhook_client] = lambda: fake
    yield fake
    app.dependency_overrides.clear()


class TestMeta:
    def test_health(self, client):
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok"}

    def test_variants(self, client):
        resp = client.get("/api/v1/variants")
        assert resp.status_code == 200
        by_name = {v["variant"]: v for v in resp.json()}
        assert set(by_name) == {"fusion", "residential", "commercial", "semi_commercial", "prime", "bridging"}
        assert by_name["residential"]["fee_columns"] == ["6", "4", "3", "2"]
        assert by_name["fusion"]["property_types"] == ["Residential", "Semi / Full Commercial"]


class TestQuote:
    def test_fusion_quote(self, client, fusion_inputs):
        resp = client.post("/api/v1/quotes/fusion", json=fusion_inputs)
        assert resp.status_code == 200
        body = resp.json()
        assert body["status"] == "quoted"
        assert body["quote"]["gross_loan"] == 3_000_000
        assert body["quote"]["net_loan"] == pytest.approx(2_763_150)

    def test_rejection_is_not_an_error(self, client, btl_inputs):
        btl_inputs["holiday_let"] = "Yes"
        resp = client.post("/api/v1/quotes/prime", json=btl_inputs)
        assert resp.status_code == 200
        body = resp.json()
        assert body["status"] == "rejected"
        assert body["rejection"]["kind"] == "excluded"

    def test_string_inputs(self, client):
        resp = client.post(
            "/api/v1/quotes/residential",
            json={"property_value": "£500,000", "monthly_rent": "2,500", "fee_column": "6%"},
        )
        assert resp.json()["quote"]["gross_loan"] == pytest.approx(375_000)

    def test_unknown_variant(self, client):
        resp = client.post("/api/v1/quotes/mezzanine", json={})
        assert resp.status_code == 404

    def test_matrix(self, client, btl_inputs):
        resp = client.post("/api/v1/quotes/residential/matrix", json=btl_inputs)
        assert resp.status_code == 200
        matrix = resp.json()["matrix"]
        assert len(matrix["columns"]) == 4
        assert matrix["best"]["gross_ltv_pct"] == 75


class TestLead:
    def test_lead_scheduled(self, client, webhook, fusion_inputs):
        resp = client.post("/api/v1/quotes/fusion/lead", json={"inputs": fusion_inputs, "contact": CONTACT})
        assert resp.status_code == 200
        body = resp.json()
        assert body["delivery"] == "scheduled"
        assert body["request_id"].startswith("MFS-FUSION-")

        webhook.deliver.assert_awaited_once()
        payload = webhook.deliver.await_args.args[0]
        assert payload["request_id"] == body["request_id"]
        assert payload["contact_name"] == "A Broker"

    @pytest.mark.parametrize(
        "field, value",
        [("email", "not-an-email"), ("phone", "12345"), ("phone", "1" * 16)],
    )
    def test_invalid_contact(self, client, webhook, fusion_inputs, field, value):
        contact = {**CONTACT, field: value}
        resp = client.post("/api/v1/quotes/fusion/lead", json={"inputs": fusion_inputs, "contact": contact})
        assert resp.status_code == 422
        webhook.deliver.assert_not_awaited()

    def test_rejected_quote_not_delivered(self, client, webhook, fusion_inputs):
        fusion_inputs["gross_loan"] = 3_500_000
        resp = client.post("/api/v1/quotes/fusion/lead", json={"inputs": fusion_inputs, "contact": CONTACT})
        assert resp.status_code == 409
        assert resp.json()["detail"]["kind"] == "ltv_exceeded"
        webhook.deliver.assert_not_awaited()

    def test_webhook_not_configured(self, client, fusion_inputs):
        fake = MagicMock()
        fake.url = ""
        app.dependency_overrides[get_webhook_client] = lambda: fake
        try:
            resp = client.post("/api/v1/quotes/fusion/lead", json={"inputs": fusion_inputs, "contact": CONTACT})
        finally:
            app.dependency_overrides.clear()
        assert resp.status_code == 200
        assert resp.json()["delivery"] == "not_configured"
