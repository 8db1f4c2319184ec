"""Typed message dispatch.

The host's content layer talks to the service with small JSON messages and
always gets a :class:`MessageResponse` envelope back; failures never escape as
exceptions.

Message types:
    CONVERT_TO_YEN {"amount": float, "currency": str} -> {converted, rate, asOfDate}
    CONVERT        alias of CONVERT_TO_YEN
    GET_ALL_RATES  {}                                  -> {rates, date, fetchedAt}
    GET_SETTINGS   {}                                  -> settings
    SET_SETTINGS   {"settings": {...partial}}          -> settings
"""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Dict, Mapping

from pydantic import BaseModel, Field, ValidationError

from currency_lens.core.errors import CurrencyLensError
from currency_lens.db.dal import Database
from currency_lens.models.messages import MessageResponse
from currency_lens.services.app_settings import (
    get_extension_settings,
    set_extension_settings,
)
from currency_lens.services.rates.cache_service import RateCache
from currency_lens.services.rates.conversion import ConversionResult, convert

logger = logging.getLogger("currency_lens.messages")


class ConvertPayload(BaseModel):
    amount: float = Field(..., gt=0)
    currency: str = Field(..., min_length=1, max_length=8)


async def convert_to_reference(
    amount: float, currency: str, cache: RateCache
) -> ConversionResult:
    table = await cache.get_rates()
    return convert(amount, currency.strip().upper(), table)


async def _handle_convert(msg: Mapping[str, Any], cache: RateCache, db: Database) -> Any:
    payload = ConvertPayload.model_validate(msg)
    result = await convert_to_reference(payload.amount, payload.currency, cache)
    return result.as_dict()


async def _handle_all_rates(msg: Mapping[str, Any], cache: RateCache, db: Database) -> Any:
    return (await cache.get_rates()).to_record()


async def _handle_get_settings(msg: Mapping[str, Any], cache: RateCache, db: Database) -> Any:
    return get_extension_settings(db).model_dump(by_alias=True)


async def _handle_set_settings(msg: Mapping[str, Any], cache: RateCache, db: Database) -> Any:
    patch = msg.get("settings") or {}
    if not isinstance(patch, Mapping):
        raise ValueError("settings must be an object")
    return set_extension_settings(db, patch).model_dump(by_alias=True)


Handler = Callable[[Mapping[str, Any], RateCache, Database], Awaitable[Any]]

_HANDLERS: Dict[str, Handler] = {
    "CONVERT_TO_YEN": _handle_convert,
    "CONVERT": _handle_convert,
    "GET_ALL_RATES": _handle_all_rates,
    "GET_SETTINGS": _handle_get_settings,
    "SET_SETTINGS": _handle_set_settings,
}

MESSAGE_TYPES = tuple(_HANDLERS)


async def dispatch(
    message: Mapping[str, Any], *, cache: RateCache, db: Database
) -> MessageResponse:
    msg_type = message.get("type")
    handler = _HANDLERS.get(msg_type) if isinstance(msg_type, str) else None
    if handler is None:
        return MessageResponse.fail(f"unknown message type: {msg_type}")
    try:
        return MessageResponse.ok(await handler(message, cache, db))
    except (CurrencyLensError, ValidationError, ValueError) as e:
        logger.error("message %s failed: %s", msg_type, e)
        return MessageResponse.fail(str(e))
