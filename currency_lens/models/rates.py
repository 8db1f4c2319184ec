from __future__ import annotations
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Any, Dict, Optional
from .constants import CurrencyCode, REFERENCE_CURRENCY, normalize_code


class RateTable(BaseModel):
    """Reference-currency multipliers as of ``date``.

    ``rates[code]`` converts one unit of ``code`` into the reference currency.
    Tables are immutable; a refresh produces a new instance.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    rates: Dict[CurrencyCode, float]
    date: str
    fetched_at: float = Field(..., alias="fetchedAt")  # epoch seconds

    @field_validator("rates")
    @classmethod
    def valid_rates(cls, v: Dict[CurrencyCode, float]) -> Dict[CurrencyCode, float]:
        for code, rate in v.items():
            if rate <= 0:
                raise ValueError(f"rate for {code.value} must be positive")
        if v.get(REFERENCE_CURRENCY) != 1:
            raise ValueError("reference currency must map to 1")
        return v

    def rate_for(self, code: CurrencyCode | str) -> Optional[float]:
        normalized = normalize_code(code)
        return self.rates.get(normalized) if normalized is not None else None

    def is_fresh(self, now: float, ttl_seconds: float) -> bool:
        return now - self.fetched_at < ttl_seconds

    def to_record(self) -> Dict[str, Any]:
        """Wire / persisted form: ``{rates, date, fetchedAt}``."""
        return self.model_dump(mode="json", by_alias=True)
