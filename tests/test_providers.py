import httpx
import pytest

from currency_lens.core.config import Settings
from currency_lens.core.errors import RateFetchError
from currency_lens.services.rates.providers import (
    FrankfurterRateSource,
    StaticRateSource,
    make_rate_source,
)

PAYLOAD = {
    "amount": 1.0,
    "base": "JPY",
    "date": "2024-01-01",
    "rates": {"USD": 0.008, "EUR": 0.00625, "BRL": 0.033},
}


def _source(handler) -> FrankfurterRateSource:
    return FrankfurterRateSource(
        "https://rates.test/v1/", transport=httpx.MockTransport(handler)
    )


@pytest.mark.asyncio
async def test_fetch_latest_requests_reference_base():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=PAYLOAD)

    quote = await _source(handler).fetch_latest()
    assert seen[0].url.path == "/v1/latest"
    assert seen[0].url.params["base"] == "JPY"
    assert quote.date == "2024-01-01"
    assert quote.rates["USD"] == 0.008
    assert quote.base == "JPY"


@pytest.mark.asyncio
async def test_non_2xx_is_fetch_failure():
    source = _source(lambda request: httpx.Response(503, text="down"))
    with pytest.raises(RateFetchError, match="503"):
        await source.fetch_latest()


@pytest.mark.asyncio
async def test_transport_error_is_fetch_failure():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(RateFetchError):
        await _source(handler).fetch_latest()


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload",
    [
        {"date": "2024-01-01"},
        {"rates": {"USD": 0.008}},
        {"base": "EUR", "date": "2024-01-01", "rates": {"USD": 1.1}},
    ],
)
async def test_malformed_payload_is_fetch_failure(payload):
    with pytest.raises(RateFetchError):
        await _source(lambda request: httpx.Response(200, json=payload)).fetch_latest()


@pytest.mark.asyncio
async def test_non_json_body_is_fetch_failure():
    source = _source(lambda request: httpx.Response(200, text="<html>"))
    with pytest.raises(RateFetchError):
        await source.fetch_latest()


@pytest.mark.asyncio
async def test_static_source_covers_every_foreign_code():
    quote = await StaticRateSource().fetch_latest()
    assert len(quote.rates) == 15
    assert "JPY" not in quote.rates


def test_factory(tmp_path):
    settings = Settings(db_path=tmp_path / "x.sqlite3", _env_file=None)
    assert isinstance(make_rate_source("static", settings), StaticRateSource)
    assert isinstance(make_rate_source("frankfurter", settings), FrankfurterRateSource)
    with pytest.raises(ValueError):
        make_rate_source("nope", settings)
