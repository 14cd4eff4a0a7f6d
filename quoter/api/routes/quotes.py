"""Quote routes: one calculator per variant."""

import logging
from typing import Any

from fastapi import APIRouter, BackgroundTasks, Body, Depends, HTTPException

from quoter.api.deps import get_table, get_webhook_client
from quoter.api.schemas import LeadRequest, LeadResponse, MatrixResponse, QuoteResponse, VariantResponse
from quoter.data.webhook import LeadWebhookClient, build_lead_payload
from quoter.engine.quote import build_matrix, build_quote
from quoter.models.rates import RateTable, SelectionStrategy
from quoter.models.results import Rejection
from quoter.rates.registry import VARIANTS, get_rate_table

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["quotes"])


def _property_types(table: RateTable) -> list[str]:
    if table.strategy is SelectionStrategy.BAND:
        return list(table.products)
    if table.strategy is SelectionStrategy.LTV_TIER:
        return [key for key in table.product_options if key != "Second Charge"]
    return []


@router.get("/variants", response_model=list[VariantResponse])
async def list_variants():
    """Calculators available, with their product types and fee columns."""
    out = []
    for variant in VARIANTS:
        table = get_rate_table(variant)
        out.append(VariantResponse(
            variant=variant,
            strategy=table.strategy.value,
            tiers=table.tiers,
            product_types=table.product_types,
            fee_columns=table.fee_columns,
            property_types=_property_types(table),
        ))
    return out


@router.post("/quotes/{variant}", response_model=QuoteResponse)
async def quote(
    inputs: dict[str, Any] = Body(...),
    table: RateTable = Depends(get_table),
):
    result = build_quote(inputs, table)
    if isinstance(result, Rejection):
        return QuoteResponse(status="rejected", rejection=result.to_record())
    return QuoteResponse(status="quoted", quote=result.to_record())


@router.post("/quotes/{variant}/matrix", response_model=MatrixResponse)
async def quote_matrix(
    inputs: dict[str, Any] = Body(...),
    table: RateTable = Depends(get_table),
):
    result = build_matrix(inputs, table)
    if isinstance(result, Rejection):
        return MatrixResponse(status="rejected", rejection=result.to_record())
    return MatrixResponse(status="quoted", matrix=result.to_record())


@router.post("/quotes/{variant}/lead", response_model=LeadResponse)
async def submit_lead(
    req: LeadRequest,
    background_tasks: BackgroundTasks,
    table: RateTable = Depends(get_table),
    client: LeadWebhookClient = Depends(get_webhook_client),
):
    """Quote the inputs and hand the lead to the webhook in the background."""
    result = build_quote(req.inputs, table)
    if isinstance(result, Rejection):
        raise HTTPException(status_code=409, detail=result.to_record())

    payload = build_lead_payload(table, req.inputs, result, req.contact.model_dump())
    if client.url:
        background_tasks.add_task(client.deliver, payload)
        delivery = "scheduled"
    else:
        logger.warning("No lead webhook configured for %s; lead %s not sent", table.variant, payload["request_id"])
        delivery = "not_configured"

    return LeadResponse(request_id=payload["request_id"], delivery=delivery, quote=result.to_record())
