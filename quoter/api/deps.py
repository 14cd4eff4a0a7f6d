"""FastAPI dependency injection."""

from fastapi import HTTPException

from quoter.data.webhook import LeadWebhookClient
from quoter.models.rates import RateTable
from quoter.rates.registry import get_rate_table


def get_table(variant: str) -> RateTable:
    try:
        return get_rate_table(variant)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Unknown calculator: {variant}")


def get_webhook_client(variant: str) -> LeadWebhookClient:
    return LeadWebhookClient(variant=variant)
