from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Body, Depends

from currency_lens.db.dal import Database
from currency_lens.models.messages import MessageResponse
from currency_lens.services.messages import dispatch
from currency_lens.services.rates.cache_service import RateCache
from .deps import get_database, get_rate_cache

router = APIRouter(tags=["messages"])


@router.post("/messages", summary="Dispatch a typed host message")
async def post_message(
    message: Dict[str, Any] = Body(...),
    cache: RateCache = Depends(get_rate_cache),
    db: Database = Depends(get_database),
) -> MessageResponse:
    return await dispatch(message, cache=cache, db=db)
