"""Pattern catalog + overlap resolution."""

import pytest

from currency_lens.models.constants import MAX_AMOUNT, REFERENCE_CURRENCY, CurrencyCode
from currency_lens.models.detection import DetectedAmount
from currency_lens.services.detection.detector import detect_currencies, detect_first
from currency_lens.services.detection.overlap import resolve
from currency_lens.services.detection.patterns import DEFAULT_CATALOG


def _codes(text):
    return [(d.code, d.amount) for d in detect_currencies(text)]


def test_symbol_with_grouping():
    found = detect_currencies("Price: $1,234.50 today")
    assert len(found) == 1
    d = found[0]
    assert d.code == CurrencyCode.USD
    assert d.amount == pytest.approx(1234.50)
    assert d.original_text == "$1,234.50"
    assert (d.start_index, d.end_index) == (7, 16)


def test_national_dollar_beats_bare_symbol():
    found = detect_currencies("US$100 and HK$100")
    assert [(d.code, d.original_text) for d in found] == [
        (CurrencyCode.USD, "US$100"),
        (CurrencyCode.HKD, "HK$100"),
    ]


def test_us_dollar_is_not_read_as_singapore_dollar():
    found = detect_currencies("US$100")
    assert len(found) == 1
    assert found[0].code == CurrencyCode.USD
    assert found[0].start_index == 0


def test_amount_code_and_code_amount():
    found = detect_currencies("100 USD or USD 100")
    assert [(d.code, d.original_text) for d in found] == [
        (CurrencyCode.USD, "100 USD"),
        (CurrencyCode.USD, "USD 100"),
    ]
    assert found[0].end_index <= found[1].start_index


@pytest.mark.parametrize(
    "text,code,amount",
    [
        ("A$25", CurrencyCode.AUD, 25),
        ("AU$25", CurrencyCode.AUD, 25),
        ("C$10.5", CurrencyCode.CAD, 10.5),
        ("CA$10", CurrencyCode.CAD, 10),
        ("S$3", CurrencyCode.SGD, 3),
        ("SG$3", CurrencyCode.SGD, 3),
        ("NT$500", CurrencyCode.TWD, 500),
        ("€9.99", CurrencyCode.EUR, 9.99),
        ("£ 20", CurrencyCode.GBP, 20),
        ("₩50,000", CurrencyCode.KRW, 50000),
        ("₹499", CurrencyCode.INR, 499),
        ("₱150", CurrencyCode.PHP, 150),
        ("฿99", CurrencyCode.THB, 99),
        ("RM12.90", CurrencyCode.MYR, 12.90),
        ("CHF45", CurrencyCode.CHF, 45),
        ("45 chf", CurrencyCode.CHF, 45),
        ("20 eur", CurrencyCode.EUR, 20),
        ("CNY 88", CurrencyCode.CNY, 88),
    ],
)
def test_each_marker_maps_to_its_code(text, code, amount):
    assert _codes(text) == [(code, pytest.approx(amount))]


def test_reference_currency_is_never_detected():
    assert detect_currencies("1000 JPY or JPY 1000 or ¥1000") == []


def test_no_match_returns_empty():
    assert detect_currencies("nothing to see here, 42 apples") == []
    assert detect_currencies("") == []
    assert detect_first("plain text") is None


def test_out_of_range_amounts_are_skipped():
    assert detect_currencies("$0") == []
    assert detect_currencies("$2,000,000,000") == []


def test_fraction_limited_to_two_digits():
    found = detect_currencies("$1.234")
    assert [d.original_text for d in found] == ["$1"]


def test_numeric_span_is_bounded():
    found = detect_currencies("$1234567890123456789")
    # the 15 character span fails the word boundary, nothing shorter matches
    assert found == []


def test_catalog_reports_overlapping_candidates_in_rule_order():
    candidates = DEFAULT_CATALOG.match_all("US$100")
    assert [c.original_text for c in candidates] == ["US$100", "$100"]


def test_chf_amount_code_keeps_generic_rule_span():
    found = detect_currencies("100 CHF")
    assert len(found) == 1
    assert found[0].code == CurrencyCode.CHF
    assert found[0].original_text == "100 CHF"


def test_resolver_priority_first_wins_even_if_shorter():
    long_low = DetectedAmount(CurrencyCode.USD, 1, "x" * 10, 0, 10)
    short_high = DetectedAmount(CurrencyCode.EUR, 1, "xx", 4, 6)
    assert resolve([short_high, long_low]) == [short_high]


def test_resolver_rejects_identical_and_containing_spans():
    a = DetectedAmount(CurrencyCode.USD, 1, "abc", 2, 5)
    same = DetectedAmount(CurrencyCode.CHF, 1, "abc", 2, 5)
    outer = DetectedAmount(CurrencyCode.EUR, 1, "abcdefg", 0, 7)
    left = DetectedAmount(CurrencyCode.GBP, 1, "ab", 1, 3)
    adjacent = DetectedAmount(CurrencyCode.KRW, 1, "de", 5, 7)
    assert resolve([a, same, outer, left, adjacent]) == [a, adjacent]


def test_resolver_sorts_by_start():
    late = DetectedAmount(CurrencyCode.USD, 1, "b", 10, 12)
    early = DetectedAmount(CurrencyCode.EUR, 1, "a", 0, 2)
    assert resolve([late, early]) == [early, late]


@pytest.mark.parametrize(
    "text",
    [
        "US$100 and HK$100",
        "Total: €1,200.00 (approx. $1,300 or 1300 USD), RM50, CHF 20",
        "S$5 A$5 C$5 NT$5 $5 5USD USD5 RM5 CHF5 5CHF",
        "$$$1,,,2,,3 USD USD USD 4.5.6 €",
    ],
)
def test_results_are_sorted_disjoint_and_in_range(text):
    found = detect_currencies(text)
    for d in found:
        assert 0 < d.amount <= MAX_AMOUNT
        assert d.code != REFERENCE_CURRENCY
        assert d.end_index > d.start_index
        assert text[d.start_index : d.end_index] == d.original_text
    for prev, nxt in zip(found, found[1:]):
        assert prev.start_index <= nxt.start_index
        assert prev.end_index <= nxt.start_index
    assert detect_currencies(text) == found


def test_as_dict_uses_wire_names():
    d = detect_first("$5")
    assert d.as_dict() == {
        "code": "USD",
        "amount": 5.0,
        "originalText": "$5",
        "startIndex": 0,
        "endIndex": 2,
    }


# No-break, narrow no-break and ideographic spaces show up in formatted prices
@pytest.mark.parametrize("gap", [chr(0xA0), chr(0x202F), chr(0x3000), " " + chr(0xA0)])
@pytest.mark.parametrize(
    "template,code",
    [
        ("€{}100", CurrencyCode.EUR),
        ("100{}USD", CurrencyCode.USD),
        ("USD{}100", CurrencyCode.USD),
        ("US${}100", CurrencyCode.USD),
        ("RM{}100", CurrencyCode.MYR),
        ("CHF{}100", CurrencyCode.CHF),
    ],
)
def test_unicode_space_between_marker_and_amount(template, code, gap):
    text = template.format(gap)
    found = detect_currencies(text)
    assert [(d.code, d.amount) for d in found] == [(code, 100.0)]
    assert found[0].original_text == text
