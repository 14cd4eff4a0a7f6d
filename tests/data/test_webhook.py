"""Tests for lead webhook delivery."""

import json
import re
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from quoter.data.webhook import (
    LeadWebhookClient,
    build_lead_payload,
    form_encode,
    new_request_id,
)
from quoter.engine.quote import build_quote

WEBHOOK_URL = "https://hooks.example.test/lead"


def _response(status: int) -> httpx.Response:
    return httpx.Response(status, request=httpx.Request("POST", WEBHOOK_URL))


@pytest.fixture
def payload():
    return {"request_id": "MFS-FUSION-1-abc123", "gross_loan": 3_000_000.0, "inputs": {"a": 1}, "ltv": None}


@pytest.fixture
def mock_http():
    """Patch httpx.AsyncClient; yields the client used inside ``async with``."""
    client = MagicMock()
    client.post = AsyncMock()
    with patch("quoter.data.webhook.httpx.AsyncClient") as client_cls:
        client_cls.return_value.__aenter__.return_value = client
        client_cls.return_value.__aexit__.return_value = False
        yield client


class TestPayload:
    def test_request_id_format(self):
        assert re.fullmatch(r"MFS-BRIDGING-\d{13}-[a-z0-9]{6}", new_request_id("bridging"))

    def test_build_payload(self, fusion_table, fusion_inputs):
        quote = build_quote(fusion_inputs, fusion_table)
        contact = {"name": "A Broker", "phone": "07123456789", "email": "a@broker.co.uk"}
        payload = build_lead_payload(fusion_table, fusion_inputs, quote, contact)

        assert payload["request_id"].startswith("MFS-FUSION-")
        assert payload["submitted_at"].endswith("+00:00")
        assert payload["contact_email"] == "a@broker.co.uk"
        assert payload["inputs"] == fusion_inputs
        assert payload["standard_bbr"] == 0.04
        assert payload["current_mvr"] is None
        assert payload["product_name"] == "Residential Fusion Standard"
        assert payload["net_loan"] == pytest.approx(2_763_150)
        json.dumps(payload)

    def test_form_encode(self, payload):
        form = form_encode(payload)
        assert form["gross_loan"] == "3000000.0"
        assert form["ltv"] == ""
        assert json.loads(form["inputs"]) == {"a": 1}


class TestDelivery:
    async def test_not_configured(self, payload):
        with patch("quoter.data.webhook.settings") as mock_settings:
            mock_settings.lead_webhook_url = ""
            outcome = await LeadWebhookClient().deliver(payload)
        assert not outcome.delivered
        assert outcome.error == "webhook not configured"

    def test_variant_override_url(self):
        with patch("quoter.data.webhook.settings") as mock_settings:
            mock_settings.webhook_url_for.return_value = "https://hooks.example.test/bridging"
            client = LeadWebhookClient(variant="bridging")
        assert client.url == "https://hooks.example.test/bridging"
        mock_settings.webhook_url_for.assert_called_once_with("bridging")

    async def test_json_success(self, mock_http, payload):
        mock_http.post.return_value = _response(200)
        outcome = await LeadWebhookClient(WEBHOOK_URL).deliver(payload)

        assert outcome.delivered
        assert outcome.method == "json"
        mock_http.post.assert_awaited_once_with(WEBHOOK_URL, json=payload)

    async def test_form_fallback(self, mock_http, payload):
        mock_http.post.side_effect = [_response(415), _response(200)]
        outcome = await LeadWebhookClient(WEBHOOK_URL).deliver(payload)

        assert outcome.delivered
        assert outcome.method == "form"
        assert mock_http.post.await_count == 2
        assert mock_http.post.await_args.kwargs["data"] == form_encode(payload)

    async def test_both_fail(self, mock_http, payload):
        mock_http.post.side_effect = [_response(500), _response(502)]
        outcome = await LeadWebhookClient(WEBHOOK_URL).deliver(payload)

        assert not outcome.delivered
        assert outcome.status_code == 502

    async def test_network_error_never_raises(self, mock_http, payload):
        request = httpx.Request("POST", WEBHOOK_URL)
        mock_http.post.side_effect = httpx.ConnectError("connection refused", request=request)
        outcome = await LeadWebhookClient(WEBHOOK_URL).deliver(payload)

        assert not outcome.delivered
        assert outcome.status_code is None
        assert "connection refused" in outcome.error
