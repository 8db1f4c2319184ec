from __future__ import annotations

from typing import Any, Dict, List

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
import logging

from currency_lens.core.errors import CurrencyLensError
from currency_lens.models.messages import MessageResponse
from currency_lens.services.detection.detector import detect_currencies
from currency_lens.services.messages import convert_to_reference
from currency_lens.services.rates.cache_service import RateCache
from .deps import get_rate_cache

"""Detection router.

Endpoints:
    - POST /detect          -> every amount found in {text}
    - POST /detect/convert  -> first amount found plus its conversion
"""

router = APIRouter(prefix="/detect", tags=["detect"])
logger = logging.getLogger("currency_lens.routers.detect")

# Callers send a hover window or an element's text, never a whole page
MAX_TEXT_LENGTH = 10_000


class DetectRequest(BaseModel):
    text: str = Field(..., max_length=MAX_TEXT_LENGTH)


@router.post("", summary="Detect currency amounts in text")
async def detect(payload: DetectRequest) -> Dict[str, List[Dict[str, Any]]]:
    return {"matches": [d.as_dict() for d in detect_currencies(payload.text)]}


@router.post("/convert", summary="Detect the first amount in text and convert it")
async def detect_and_convert(
    payload: DetectRequest, cache: RateCache = Depends(get_rate_cache)
) -> MessageResponse:
    found = detect_currencies(payload.text)
    if not found:
        return MessageResponse.ok(None)
    first = found[0]
    try:
        result = await convert_to_reference(first.amount, first.code.value, cache)
    except CurrencyLensError as e:
        logger.error("conversion of %r failed: %s", first.original_text, e)
        return MessageResponse.fail(str(e))
    return MessageResponse.ok({"match": first.as_dict(), "conversion": result.as_dict()})
