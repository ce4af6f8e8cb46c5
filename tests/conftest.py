import random
from datetime import datetime, timezone

import pytest
import requests

from currency_exchange.models import SOURCE_BASE, SOURCE_PRIMARY, RateEntry, RateTable
from currency_exchange.services import CurrencyService

FIXED_NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


class FakeResponse:
    def __init__(self, text="", json_data=None, status_code=200):
        self.text = text
        self._json_data = json_data
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error")

    def json(self):
        if self._json_data is None:
            raise ValueError("No JSON object could be decoded")
        return self._json_data


class FakeSession:
    """Stands in for ``requests.Session``; records every GET."""

    def __init__(self, response=None, error=None):
        self.headers = {}
        self.calls = []
        self._response = response
        self._error = error
        self.closed = False

    def get(self, url, timeout=None):
        self.calls.append({"url": url, "timeout": timeout})
        if self._error is not None:
            raise self._error
        return self._response

    def close(self):
        self.closed = True


class StaticFetcher:
    """Rate fetcher double returning a fixed table and counting calls."""

    def __init__(self, table=None, error=None):
        self.table = table
        self.error = error
        self.calls = 0

    def fetch_rates(self):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.table


def build_table(quotes):
    """Build a table from ``{code: (buying, selling)}``."""

    stamp = FIXED_NOW.isoformat()
    return RateTable(
        RateEntry(
            currency_code=code,
            buying=buying,
            selling=selling,
            source=SOURCE_BASE if code == "LKR" else SOURCE_PRIMARY,
            timestamp=stamp,
        )
        for code, (buying, selling) in quotes.items()
    )


@pytest.fixture
def fake_session():
    return FakeSession


@pytest.fixture
def fake_response():
    return FakeResponse


@pytest.fixture
def rate_table():
    return build_table({
        "USD": (299.0, 301.0),
        "EUR": (320.0, 330.0),
        "GBP": (380.0, 390.0),
        "LKR": (1, 1),
    })


@pytest.fixture
def fetcher(rate_table):
    return StaticFetcher(rate_table)


@pytest.fixture
def make_service():
    def factory(fetcher, seed=7, rng=None):
        return CurrencyService(
            fetcher=fetcher,
            local_currency="LKR",
            trend_variation=0.02,
            max_trend_days=365,
            rng=rng or random.Random(seed),
            clock=lambda: FIXED_NOW,
        )

    return factory


@pytest.fixture
def service(make_service, fetcher):
    return make_service(fetcher)


@pytest.fixture
def static_fetcher():
    return StaticFetcher
