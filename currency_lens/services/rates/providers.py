from __future__ import annotations

"""Concrete rate sources and factory.

'frankfurter' is the live ECB-backed source; 'static' returns a fixed table so
the service can run offline (demos, local development).
"""
import logging
from typing import Any, Callable, Dict, Optional

import httpx

from currency_lens.core.config import Settings
from currency_lens.core.errors import HttpError, RateFetchError
from currency_lens.services.http_client import get_json
from .base import RateSource, RawQuote

logger = logging.getLogger("currency_lens.rates.providers")

# Foreign units per 1 JPY, early 2024 levels
_STATIC_QUOTE: Dict[str, float] = {
    "USD": 0.0067,
    "EUR": 0.0062,
    "GBP": 0.0053,
    "CNY": 0.048,
    "KRW": 9.0,
    "AUD": 0.0102,
    "CAD": 0.0091,
    "CHF": 0.0059,
    "HKD": 0.0524,
    "SGD": 0.009,
    "TWD": 0.21,
    "THB": 0.24,
    "INR": 0.56,
    "PHP": 0.38,
    "MYR": 0.0316,
}
_STATIC_DATE = "2024-01-02"


class StaticRateSource(RateSource):
    name = "static"

    async def fetch_latest(self) -> RawQuote:
        return RawQuote(base=self.base_currency, date=_STATIC_DATE, rates=dict(_STATIC_QUOTE))


class FrankfurterRateSource(RateSource):
    """``GET <base_url>/latest?base=JPY`` on the Frankfurter API."""

    name = "frankfurter"

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 5.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    async def fetch_latest(self) -> RawQuote:
        url = f"{self._base_url}/latest"
        logger.info("fetching rates from %s base=%s", url, self.base_currency)
        try:
            data = await get_json(
                url,
                params={"base": self.base_currency},
                timeout=self._timeout,
                transport=self._transport,
            )
        except HttpError as e:
            raise RateFetchError(str(e)) from e
        return self._parse(data)

    def _parse(self, data: Dict[str, Any]) -> RawQuote:
        rates = data.get("rates")
        if not isinstance(rates, dict):
            raise RateFetchError("rate payload has no 'rates' object")
        date = data.get("date")
        if not isinstance(date, str) or not date:
            raise RateFetchError("rate payload has no 'date'")
        base = str(data.get("base") or self.base_currency).upper()
        if base != self.base_currency:
            raise RateFetchError(f"rate payload base {base} != {self.base_currency}")
        clean: Dict[str, float] = {}
        for code, value in rates.items():
            # bool is an int subclass
            if isinstance(value, (int, float)) and not isinstance(value, bool):
                clean[str(code).upper()] = float(value)
        return RawQuote(base=base, date=date, rates=clean)


_SOURCE_REGISTRY: Dict[str, Callable[[Settings], RateSource]] = {
    "static": lambda settings: StaticRateSource(),
    "frankfurter": lambda settings: FrankfurterRateSource(
        settings.exchange_api_base_url, timeout=settings.http_timeout_seconds
    ),
}


def make_rate_source(kind: str, settings: Settings) -> RateSource:
    factory = _SOURCE_REGISTRY.get(kind)
    if not factory:
        raise ValueError(f"Unknown rate source kind '{kind}'")
    return factory(settings)
