"""Lead delivery webhook client.

Posts the quote record and contact details as JSON; if that fails, retries
once form-encoded (some lead-capture endpoints only accept form posts).
Failures are logged, never raised into the request path.
"""

import json
import logging
import random
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Mapping

import httpx

from quoter.config import settings
from quoter.models.rates import RateTable
from quoter.models.results import QuoteResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeliveryOutcome:
    delivered: bool
    method: str | None = None  # "json" / "form"
    status_code: int | None = None
    error: str | None = None


def new_request_id(variant: str) -> str:
    """MFS-<VARIANT>-<epoch ms>-<random suffix>."""
    suffix = "".join(random.choices("abcdefghijklmnopqrstuvwxyz0123456789", k=6))
    return f"MFS-{variant.upper()}-{int(time.time() * 1000)}-{suffix}"


def build_lead_payload(
    table: RateTable,
    raw_inputs: Mapping[str, Any],
    quote: QuoteResult,
    contact: Mapping[str, str],
    request_id: str | None = None,
) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "request_id": request_id or new_request_id(table.variant),
        "submitted_at": datetime.now(timezone.utc).isoformat(),
        "variant": table.variant,
        "contact_name": contact.get("name"),
        "contact_phone": contact.get("phone"),
        "contact_email": contact.get("email"),
        "inputs": dict(raw_inputs),
        "standard_bbr": table.standard_margin,
        "current_mvr": table.mvr,
    }
    payload.update(quote.to_record())
    return payload


def form_encode(payload: Mapping[str, Any]) -> dict[str, str]:
    """Flatten a payload for form posting: non-scalars as JSON, None as ""."""
    out = {}
    for key, value in payload.items():
        if value is None:
            out[key] = ""
        elif isinstance(value, (dict, list, tuple)):
            out[key] = json.dumps(value)
        else:
            out[key] = str(value)
    return out


class LeadWebhookClient:
    def __init__(self, url: str | None = None, variant: str | None = None):
        self.url = url or (settings.webhook_url_for(variant) if variant else settings.lead_webhook_url)

    async def deliver(self, payload: Mapping[str, Any]) -> DeliveryOutcome:
        if not self.url:
            logger.debug("Lead webhook URL not configured, skipping delivery")
            return DeliveryOutcome(delivered=False, error="webhook not configured")

        request_id = payload.get("request_id")
        async with httpx.AsyncClient() as client:
            try:
                resp = await client.post(self.url, json=dict(payload))
                resp.raise_for_status()
                logger.info("Lead %s delivered", request_id)
                return DeliveryOutcome(delivered=True, method="json", status_code=resp.status_code)
            except (httpx.HTTPStatusError, httpx.RequestError) as e:
                logger.warning("Lead %s JSON delivery failed, retrying as form: %s", request_id, e)

            try:
                resp = await client.post(self.url, data=form_encode(payload))
                resp.raise_for_status()
                logger.info("Lead %s delivered (form)", request_id)
                return DeliveryOutcome(delivered=True, method="form", status_code=resp.status_code)
            except (httpx.HTTPStatusError, httpx.RequestError) as e:
                logger.warning("Lead %s delivery failed: %s", request_id, e)
                status = e.response.status_code if isinstance(e, httpx.HTTPStatusError) else None
                return DeliveryOutcome(delivered=False, status_code=status, error=str(e))
