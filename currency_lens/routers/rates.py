from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
import logging

from currency_lens.core.errors import CurrencyLensError
from currency_lens.models.messages import MessageResponse
from currency_lens.services.messages import convert_to_reference
from currency_lens.services.rates.cache_service import RateCache
from .deps import get_rate_cache

"""Rates router.

Endpoints (envelope responses, HTTP 200 even when ``success`` is false):
    - GET  /rates    -> current rate table {rates, date, fetchedAt}
    - POST /convert  -> {converted, rate, asOfDate} for {amount, currency}
"""

router = APIRouter(tags=["rates"])
logger = logging.getLogger("currency_lens.routers.rates")


class ConvertRequest(BaseModel):
    amount: float = Field(..., gt=0, description="Amount in the foreign currency")
    currency: str = Field(..., min_length=3, max_length=3, description="ISO code, e.g. USD")


@router.get("/rates", summary="Current reference-currency rate table")
async def get_rates(cache: RateCache = Depends(get_rate_cache)) -> MessageResponse:
    try:
        table = await cache.get_rates()
    except CurrencyLensError as e:
        logger.error("rate lookup failed: %s", e)
        return MessageResponse.fail(str(e))
    return MessageResponse.ok(table.to_record())


@router.post("/convert", summary="Convert an amount into the reference currency")
async def convert_amount(
    payload: ConvertRequest, cache: RateCache = Depends(get_rate_cache)
) -> MessageResponse:
    try:
        result = await convert_to_reference(payload.amount, payload.currency, cache)
    except CurrencyLensError as e:
        logger.error("conversion of %s %s failed: %s", payload.amount, payload.currency, e)
        return MessageResponse.fail(str(e))
    return MessageResponse.ok(result.as_dict())
