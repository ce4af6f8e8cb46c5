import pytest
import requests

from currency_exchange.config import Config
from currency_exchange.errors import RateSourceError
from currency_exchange.sources import (
    AVAILABLE_SOURCES,
    ExchangeRateApiSource,
    NumbersLkSource,
    get_rate_source,
)
from currency_exchange.sources.numbers_lk import normalize_code, parse_number

RATES_PAGE = """
<html><body>
<table>
  <tr><th>Currency</th><th>Buying</th><th>Selling</th></tr>
  <tr><td>US Dollar (USD)</td><td>299.50</td><td>305.10</td></tr>
  <tr><td>EUR</td><td>1,234.5</td><td>n/a</td></tr>
  <tr><td>GBP</td><td></td><td>390.00</td></tr>
  <tr><td>JPY</td><td>2.01</td></tr>
  <tr><td>aud</td><td>195.2</td><td>201.7</td><td>extra</td></tr>
</table>
</body></html>
"""


def test_parse_number_handles_separators_and_garbage():
    assert parse_number("1,234.50") == 1234.5
    assert parse_number(" 301.25 LKR") == 301.25
    assert parse_number("n/a") == 0.0
    assert parse_number("") == 0.0


def test_normalize_code_prefers_iso_code_in_label():
    assert normalize_code("US Dollar (USD)") == "USD"
    assert normalize_code(" eur ") == "EUR"


def test_numbers_lk_parses_qualifying_rows(fake_session):
    source = NumbersLkSource(session=fake_session())

    table = source.parse_table(RATES_PAGE)

    assert sorted(table) == ["AUD", "EUR", "USD"]
    assert table["USD"].buying == 299.5
    assert table["USD"].selling == 305.1
    assert table["USD"].source == "primary"
    # unparsable numbers default to zero instead of dropping the row
    assert table["EUR"].buying == 1234.5
    assert table["EUR"].selling == 0.0


def test_numbers_lk_fetch_uses_browser_headers_and_timeout(fake_session, fake_response):
    session = fake_session(response=fake_response(text=RATES_PAGE))
    source = NumbersLkSource(session=session)

    table = source.fetch_rates()

    assert len(table) == 3
    assert session.calls == [{"url": Config.PRIMARY_URL, "timeout": Config.PRIMARY_TIMEOUT}]
    assert session.headers["User-Agent"].startswith("Mozilla/5.0")
    assert "text/html" in session.headers["Accept"]


def test_numbers_lk_page_without_table_is_empty(fake_session, fake_response):
    session = fake_session(response=fake_response(text="<html><p>maintenance</p></html>"))

    assert len(NumbersLkSource(session=session).fetch_rates()) == 0


@pytest.mark.parametrize(
    "session_kwargs",
    [
        {"error": requests.Timeout("timed out")},
        {"error": requests.ConnectionError("refused")},
    ],
)
def test_numbers_lk_network_failures_raise_source_error(fake_session, session_kwargs):
    source = NumbersLkSource(session=fake_session(**session_kwargs))

    with pytest.raises(RateSourceError):
        source.fetch_rates()


def test_numbers_lk_http_error_raises_source_error(fake_session, fake_response):
    session = fake_session(response=fake_response(status_code=503))

    with pytest.raises(RateSourceError, match="numbers.lk"):
        NumbersLkSource(session=session).fetch_rates()


def test_fallback_inverts_quotes_and_applies_spread(fake_session):
    source = ExchangeRateApiSource(
        session=fake_session(),
        local_currency="LKR",
        currencies=["USD", "EUR"],
        spread=0.02,
    )

    table = source.build_table({"rates": {"USD": 0.0032, "EUR": 0.0025, "XYZ": 4.0, "LKR": 1}})

    assert sorted(table) == ["EUR", "LKR", "USD"]
    assert table["USD"].buying == pytest.approx(312.5 * 0.98)
    assert table["USD"].selling == pytest.approx(312.5 * 1.02)
    assert table["USD"].source == "fallback"
    assert table["LKR"].buying == 1
    assert table["LKR"].selling == 1
    assert table["LKR"].source == "base"


def test_fallback_skips_missing_and_non_positive_quotes(fake_session):
    source = ExchangeRateApiSource(session=fake_session(), local_currency="LKR", currencies=["USD", "JPY"])

    table = source.build_table({"rates": {"USD": 0}})

    assert list(table) == ["LKR"]


def test_fallback_fetch_requests_local_currency_base(fake_session, fake_response):
    session = fake_session(response=fake_response(json_data={"rates": {"USD": 0.004}}))
    source = ExchangeRateApiSource(session=session, local_currency="lkr", currencies=["USD"])

    table = source.fetch_rates()

    assert session.calls[0]["url"].endswith("/LKR")
    assert session.calls[0]["timeout"] == Config.FALLBACK_TIMEOUT
    assert table["USD"].selling == pytest.approx(250 * (1 + source.spread))


def test_fallback_failures_raise_source_error(fake_session, fake_response):
    broken_json = ExchangeRateApiSource(session=fake_session(response=fake_response(text="<html>")))
    no_rates = ExchangeRateApiSource(session=fake_session(response=fake_response(json_data={"result": "error"})))
    offline = ExchangeRateApiSource(session=fake_session(error=requests.ConnectionError("down")))

    for source in (broken_json, no_rates, offline):
        with pytest.raises(RateSourceError):
            source.fetch_rates()


def test_registry_builds_sources_by_id():
    assert set(AVAILABLE_SOURCES) == {"numbers_lk", "exchangerate_api"}
    assert isinstance(get_rate_source(" NUMBERS_LK "), NumbersLkSource)

    with pytest.raises(ValueError, match="Unknown rate source"):
        get_rate_source("cbsl")
