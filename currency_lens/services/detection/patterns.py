"""Currency text patterns.

Each rule is a (regex, code extractor, amount extractor) triple. Rules are
listed in priority order; :func:`currency_lens.services.detection.overlap.resolve`
relies on that order to decide which of two overlapping matches survives.

Rule order:
    1. national dollars   US$100, HK$100, A$100, NT$100 ...
    2. bare symbols       $100, €100, £100, ₩100, ₹100, ₱100, ฿100
    3. amount then code   100 USD, 100eur
    4. code then amount   USD 100, EUR100
    5. ringgit            RM100
    6. Swiss franc        CHF100

Every rule scans the whole text, so candidates from different rules overlap
(``US$100`` is also seen as ``$100`` by rule 2).
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence

from currency_lens.models.constants import (
    FOREIGN_CURRENCIES,
    REFERENCE_CURRENCY,
    CurrencyCode,
)
from currency_lens.models.detection import DetectedAmount
from .amount import try_parse_amount

# At most 15 digits/commas, up to two fractional digits
AMOUNT = r"[\d,]{1,15}(?:\.\d{1,2})?"

# Optional gap between marker and amount. Rules are compiled with re.ASCII,
# so no-break and typographic spaces are listed explicitly.
_WS = r"[\s\u00a0\u1680\u2000-\u200a\u2028\u2029\u202f\u205f\u3000\ufeff]*"

_CODES = "|".join(sorted(FOREIGN_CURRENCIES))

NATIONAL_DOLLAR_PREFIXES: Dict[str, CurrencyCode] = {
    "US": CurrencyCode.USD,
    "HK": CurrencyCode.HKD,
    "AU": CurrencyCode.AUD,
    "A": CurrencyCode.AUD,
    "CA": CurrencyCode.CAD,
    "C": CurrencyCode.CAD,
    "SG": CurrencyCode.SGD,
    "S": CurrencyCode.SGD,
    "NT": CurrencyCode.TWD,
}

SYMBOL_TO_CODE: Dict[str, CurrencyCode] = {
    "$": CurrencyCode.USD,
    "€": CurrencyCode.EUR,
    "£": CurrencyCode.GBP,
    "₩": CurrencyCode.KRW,
    "₹": CurrencyCode.INR,
    "₱": CurrencyCode.PHP,
    "฿": CurrencyCode.THB,
}

MatchFn = Callable[["re.Match[str]"], Optional[CurrencyCode]]
AmountFn = Callable[["re.Match[str]"], Optional[float]]


@dataclass(frozen=True)
class PatternRule:
    name: str
    pattern: "re.Pattern[str]"
    get_code: MatchFn
    get_amount: AmountFn


def _code_group(group: int | str) -> MatchFn:
    def get_code(match: "re.Match[str]") -> Optional[CurrencyCode]:
        try:
            return CurrencyCode(match.group(group).upper())
        except ValueError:
            return None

    return get_code


def _amount_group(group: int | str) -> AmountFn:
    return lambda match: try_parse_amount(match.group(group))


def _fixed(code: CurrencyCode) -> MatchFn:
    return lambda match: code


# Longer prefixes first so alternation prefers US$ over S$
_PREFIXES = "|".join(sorted(NATIONAL_DOLLAR_PREFIXES, key=len, reverse=True))
_SYMBOLS = "".join(re.escape(s) for s in SYMBOL_TO_CODE)

DEFAULT_RULES: Sequence[PatternRule] = (
    PatternRule(
        name="national_dollar",
        pattern=re.compile(
            rf"(?P<prefix>{_PREFIXES})\${_WS}(?P<amount>{AMOUNT})\b",
            re.IGNORECASE | re.ASCII,
        ),
        get_code=lambda m: NATIONAL_DOLLAR_PREFIXES.get(m.group("prefix").upper()),
        get_amount=_amount_group("amount"),
    ),
    PatternRule(
        name="symbol",
        pattern=re.compile(rf"(?P<symbol>[{_SYMBOLS}]){_WS}(?P<amount>{AMOUNT})\b", re.ASCII),
        get_code=lambda m: SYMBOL_TO_CODE.get(m.group("symbol")),
        get_amount=_amount_group("amount"),
    ),
    PatternRule(
        name="amount_code",
        pattern=re.compile(
            rf"\b(?P<amount>{AMOUNT}){_WS}(?P<code>{_CODES})\b",
            re.IGNORECASE | re.ASCII,
        ),
        get_code=_code_group("code"),
        get_amount=_amount_group("amount"),
    ),
    PatternRule(
        name="code_amount",
        pattern=re.compile(
            rf"\b(?P<code>{_CODES}){_WS}(?P<amount>{AMOUNT})\b",
            re.IGNORECASE | re.ASCII,
        ),
        get_code=_code_group("code"),
        get_amount=_amount_group("amount"),
    ),
    PatternRule(
        name="ringgit",
        pattern=re.compile(rf"RM{_WS}(?P<amount>{AMOUNT})\b", re.IGNORECASE | re.ASCII),
        get_code=_fixed(CurrencyCode.MYR),
        get_amount=_amount_group("amount"),
    ),
    PatternRule(
        name="franc",
        pattern=re.compile(rf"CHF{_WS}(?P<amount>{AMOUNT})\b", re.IGNORECASE | re.ASCII),
        get_code=_fixed(CurrencyCode.CHF),
        get_amount=_amount_group("amount"),
    ),
)


class PatternCatalog:
    def __init__(self, rules: Sequence[PatternRule] = DEFAULT_RULES):
        self._rules = tuple(rules)

    @property
    def rules(self) -> Sequence[PatternRule]:
        return self._rules

    def match_all(self, text: str) -> List[DetectedAmount]:
        """Return every candidate from every rule, in rule order then text order.

        Candidates with an unparseable amount, an unknown code or the
        reference currency are dropped here; overlaps are left for the
        resolver.
        """
        candidates: List[DetectedAmount] = []
        for rule in self._rules:
            for match in rule.pattern.finditer(text):
                code = rule.get_code(match)
                amount = rule.get_amount(match)
                if code is None or amount is None:
                    continue
                if code == REFERENCE_CURRENCY:
                    continue
                candidates.append(
                    DetectedAmount(
                        code=code,
                        amount=amount,
                        original_text=match.group(0),
                        start_index=match.start(),
                        end_index=match.end(),
                    )
                )
        return candidates


DEFAULT_CATALOG = PatternCatalog()
