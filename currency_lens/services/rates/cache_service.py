from __future__ import annotations

import asyncio
import logging
import time
from typing import Callable, Dict, Optional

from pydantic import ValidationError

from currency_lens.core.errors import StorageError
from currency_lens.models.constants import REFERENCE_CURRENCY, CurrencyCode, normalize_code
from currency_lens.models.rates import RateTable
from .base import PersistedRateStore, RateSource, RawQuote

"""Two-tier rate cache.

Purpose:
    Hand every conversion a RateTable that is at most ``ttl_seconds`` old while
    hitting the remote source as rarely as possible.

Design:
    - Tier 1: the table held by this object (no I/O).
    - Tier 2: the persisted record in the metadata store, so a restarted
      process can reuse a fresh table. Store failures are logged and treated
      as a miss / no-op; they never fail ``get_rates``.
    - Refresh: one fetch from the RateSource, inverted so that
      ``rates[code]`` is reference units per unit of ``code``.
    - Refreshes run under an asyncio.Lock; a caller that waited re-checks
      tier 1 first, so concurrent callers share one fetch.
    - Fetch failures propagate. ``cached_table`` exposes whatever table is
      held (even stale) for callers that prefer stale data to an error.
"""

logger = logging.getLogger("currency_lens.rates.cache")


def invert_quote(quote: RawQuote, fetched_at: float) -> RateTable:
    """Turn "1 reference = X foreign" into "1 foreign = 1/X reference"."""
    rates: Dict[CurrencyCode, float] = {}
    for raw_code, value in quote.rates.items():
        code = normalize_code(raw_code)
        if code is None or code == REFERENCE_CURRENCY:
            continue
        if value <= 0:
            logger.warning("skipping non-positive quote %s=%s", raw_code, value)
            continue
        rates[code] = 1 / value
    rates[REFERENCE_CURRENCY] = 1.0
    return RateTable(rates=rates, date=quote.date, fetched_at=fetched_at)


class RateCache:
    def __init__(
        self,
        source: RateSource,
        store: Optional[PersistedRateStore] = None,
        *,
        ttl_seconds: float = 3600,
        clock: Callable[[], float] = time.time,
    ):
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        self._source = source
        self._store = store
        self._ttl = ttl_seconds
        self._clock = clock
        self._table: Optional[RateTable] = None
        self._lock = asyncio.Lock()

    @property
    def ttl_seconds(self) -> float:
        return self._ttl

    @property
    def source(self) -> RateSource:
        return self._source

    @property
    def cached_table(self) -> Optional[RateTable]:
        return self._table

    def invalidate(self) -> None:
        self._table = None

    # Internal --------------------------------------------------
    def _is_fresh(self, table: Optional[RateTable]) -> bool:
        return table is not None and table.is_fresh(self._clock(), self._ttl)

    def _load_persisted(self) -> Optional[RateTable]:
        if self._store is None:
            return None
        try:
            record = self._store.load_cached_rates()
        except StorageError as e:
            logger.warning("persisted rate cache read failed: %s", e)
            return None
        if record is None:
            return None
        try:
            return RateTable.model_validate(record)
        except ValidationError as e:
            logger.warning("ignoring malformed persisted rate table: %s", e)
            return None

    def _save_persisted(self, table: RateTable) -> None:
        if self._store is None:
            return
        try:
            self._store.save_cached_rates(table.to_record())
        except StorageError as e:
            logger.warning("persisted rate cache write failed: %s", e)

    # Public API -----------------------------------------------
    async def get_rates(self) -> RateTable:
        table = self._table
        if self._is_fresh(table):
            logger.debug("rates served from memory")
            return table  # type: ignore[return-value]

        async with self._lock:
            # Another caller may have refreshed while we waited
            table = self._table
            if self._is_fresh(table):
                return table  # type: ignore[return-value]

            persisted = self._load_persisted()
            if self._is_fresh(persisted):
                logger.debug("rates served from persisted cache")
                self._table = persisted
                return persisted  # type: ignore[return-value]

            quote = await self._source.fetch_latest()
            table = invert_quote(quote, fetched_at=self._clock())
            self._table = table
            logger.info(
                "rates refreshed from %s date=%s currencies=%d",
                self._source.name,
                table.date,
                len(table.rates),
            )
            self._save_persisted(table)
            return table
