from __future__ import annotations

"""Rate source abstraction.

A source returns the raw reference-based quote: ``rates[code]`` is how many
units of ``code`` one reference unit buys. Inversion into reference units
happens in the cache, not in the source.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Optional, Protocol

from currency_lens.models.constants import REFERENCE_CURRENCY


@dataclass(frozen=True)
class RawQuote:
    base: str
    date: str
    rates: Dict[str, float]


class RateSource(ABC):
    name: str = "abstract"
    base_currency: str = REFERENCE_CURRENCY.value

    @abstractmethod
    async def fetch_latest(self) -> RawQuote:
        """Return the latest quote based on ``base_currency``.

        Raises RateFetchError on any transport or payload problem.
        """
        raise NotImplementedError


class PersistedRateStore(Protocol):
    """Second cache tier; may raise StorageError on any operation."""

    def load_cached_rates(self) -> Optional[Dict[str, Any]]: ...

    def save_cached_rates(self, record: Dict[str, Any]) -> None: ...
