"""Amount parsing for detected currency text.

Grouping commas are dropped; a period is the only decimal separator.
"""

from __future__ import annotations

import re
from typing import Optional

from currency_lens.core.errors import AmountParseError
from currency_lens.models.constants import MAX_AMOUNT

_DECIMAL_RE = re.compile(r"\d+(?:\.\d+)?|\.\d+", re.ASCII)


def parse_amount(text: str) -> float:
    cleaned = text.strip().replace(",", "")
    if not _DECIMAL_RE.fullmatch(cleaned):
        raise AmountParseError(f"not a decimal amount: {text!r}")
    amount = float(cleaned)
    if amount <= 0 or amount > MAX_AMOUNT:
        raise AmountParseError(f"amount out of range: {text!r}")
    return amount


def try_parse_amount(text: str) -> Optional[float]:
    try:
        return parse_amount(text)
    except AmountParseError:
        return None
