from __future__ import annotations

from fastapi import Request

from currency_lens.db.dal import Database
from currency_lens.services.rates.cache_service import RateCache

"""FastAPI dependencies.

Both objects are created once per app in ``create_app`` and live on
``app.state``; tests swap them through ``app.dependency_overrides``.
"""


def get_rate_cache(request: Request) -> RateCache:
    return request.app.state.rate_cache


def get_database(request: Request) -> Database:
    return request.app.state.db
