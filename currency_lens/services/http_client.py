from __future__ import annotations

"""Lightweight async HTTP helper.

Single attempt, no retries: the rate cache decides what a failed fetch means.
"""
from typing import Any, Dict, Optional

import httpx

from currency_lens.core.errors import HttpError


async def get_json(
    url: str,
    *,
    params: Optional[Dict[str, str]] = None,
    timeout: float = 5.0,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Dict[str, Any]:
    try:
        async with httpx.AsyncClient(timeout=timeout, transport=transport) as client:
            resp = await client.get(url, params=params)
            if not resp.is_success:
                raise HttpError(
                    f"HTTP {resp.status_code} {resp.reason_phrase} for {resp.url}"
                )
            data = resp.json()
    except httpx.HTTPError as e:
        raise HttpError(f"Failed to fetch JSON from {url}: {e}") from e
    except ValueError as e:  # JSON decode
        raise HttpError(f"Invalid JSON from {url}: {e}") from e
    if not isinstance(data, dict):
        raise HttpError(f"Expected a JSON object from {url}")
    return data
