from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict

from currency_lens.core.errors import UnsupportedCurrencyError
from currency_lens.models.rates import RateTable

"""Reference-currency conversion.

No rounding happens here; the presentation layer rounds for display.
"""


@dataclass(frozen=True)
class ConversionResult:
    amount: float
    currency: str
    converted: float
    rate: float
    as_of_date: str

    def as_dict(self) -> Dict[str, Any]:
        return {
            "converted": self.converted,
            "rate": self.rate,
            "asOfDate": self.as_of_date,
        }


def convert(amount: float, code: str, table: RateTable) -> ConversionResult:
    label = getattr(code, "value", code)
    rate = table.rate_for(code)
    if rate is None:
        raise UnsupportedCurrencyError(label)
    return ConversionResult(
        amount=amount,
        currency=label,
        converted=amount * rate,
        rate=rate,
        as_of_date=table.date,
    )
