"""Domain constants and enumerations for validation.

All detected amounts are converted into the reference currency (JPY); it is
fixed and never matched as a foreign amount.
"""

from enum import Enum
from typing import FrozenSet


class CurrencyCode(str, Enum):
    USD = "USD"
    EUR = "EUR"
    GBP = "GBP"
    CNY = "CNY"
    KRW = "KRW"
    AUD = "AUD"
    CAD = "CAD"
    CHF = "CHF"
    HKD = "HKD"
    SGD = "SGD"
    TWD = "TWD"
    THB = "THB"
    INR = "INR"
    PHP = "PHP"
    MYR = "MYR"
    JPY = "JPY"


REFERENCE_CURRENCY = CurrencyCode.JPY

CURRENCIES: FrozenSet[str] = frozenset(c.value for c in CurrencyCode)
FOREIGN_CURRENCIES: FrozenSet[str] = CURRENCIES - {REFERENCE_CURRENCY.value}

# Amounts above this are almost always ids, phone numbers or timestamps
MAX_AMOUNT = 1_000_000_000


def normalize_code(value: str) -> CurrencyCode | None:
    """Return the CurrencyCode for ``value`` (case-insensitive) or None."""
    try:
        return CurrencyCode(value.strip().upper())
    except ValueError:
        return None
