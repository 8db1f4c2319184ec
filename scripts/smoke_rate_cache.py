"""Smoke script for the two-tier rate cache.

Demonstrates:
 1. First access fetches from the configured source and persists the table.
 2. A second access within the TTL reuses the in-memory table (same fetched_at).
 3. A fresh cache object on the same database is served from the persisted tier.
 4. Backdating the clock past the TTL forces exactly one refetch.

NOTE: This is a lightweight diagnostic and not a formal test. Uses the
'static' source unless RATE_SOURCE=frankfurter is set.
"""

import asyncio
import os
import tempfile
import time
from pathlib import Path
from pprint import pprint

from currency_lens.core.config import Settings
from currency_lens.db.dal import Database
from currency_lens.services.rates.cache_service import RateCache
from currency_lens.services.rates.providers import make_rate_source


class _Clock:
    def __init__(self):
        self.now = time.time()

    def __call__(self) -> float:
        return self.now


async def run():
    with tempfile.TemporaryDirectory() as d:
        settings = Settings(
            db_path=Path(d) / "smoke.sqlite3",
            rate_source=os.environ.get("RATE_SOURCE", "static"),
        )
        settings.init_post_load()
        db = Database(settings.db_path)
        db.initialize()

        clock = _Clock()
        source = make_rate_source(settings.rate_source, settings)
        ttl = settings.rates_cache_ttl_seconds
        cache = RateCache(source, db, ttl_seconds=ttl, clock=clock)

        out = {}
        first = await cache.get_rates()
        out["initial"] = {"date": first.date, "fetched_at": first.fetched_at}
        second = await cache.get_rates()
        out["second_same_object"] = second is first

        cold = RateCache(source, db, ttl_seconds=ttl, clock=clock)
        promoted = await cold.get_rates()
        out["persisted_fetched_at"] = promoted.fetched_at

        clock.now += ttl + 5
        refreshed = await cache.get_rates()
        out["forced_refresh"] = {"fetched_at": refreshed.fetched_at}
        out["sample_rates"] = {
            c.value: round(r, 4) for c, r in list(refreshed.rates.items())[:5]
        }
        pprint(out)


if __name__ == "__main__":
    asyncio.run(run())
