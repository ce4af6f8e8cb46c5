"""
exchangerate-api.com fallback source
"""
import logging
from typing import Iterable, Optional

import requests

from ..config import Config
from ..errors import RateSourceError
from ..models import SOURCE_BASE, SOURCE_FALLBACK, RateEntry, RateTable, utc_now_iso
from .base import RateSource

logger = logging.getLogger(__name__)


class ExchangeRateApiSource(RateSource):
    """Mid-market rates from exchangerate-api.com with a synthetic spread.

    The API quotes how many units of each foreign currency one unit of the
    local currency buys, so every quote is inverted to get local currency per
    foreign unit. Only a single mid rate is available, so buying and selling
    are derived by applying ``spread`` below and above it.
    """

    source_id = "exchangerate_api"
    source_name = "exchangerate-api.com"

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
        local_currency: Optional[str] = None,
        currencies: Optional[Iterable[str]] = None,
        spread: Optional[float] = None,
    ):
        super().__init__(session, timeout if timeout is not None else Config.FALLBACK_TIMEOUT)
        self.local_currency = (local_currency or Config.LOCAL_CURRENCY).upper()
        self.currencies = tuple(c.upper() for c in (currencies or Config.FALLBACK_CURRENCIES))
        self.spread = Config.FALLBACK_SPREAD if spread is None else spread
        self.url = f"{Config.FALLBACK_URL.rstrip('/')}/{self.local_currency}"

    def build_table(self, data: dict) -> RateTable:
        """Convert an API payload into a rate table including the base entry."""

        quotes = data.get("rates") if isinstance(data, dict) else None
        if not isinstance(quotes, dict):
            raise RateSourceError(f"{self.source_name} response has no 'rates' object")

        timestamp = utc_now_iso()
        entries = []
        for code in self.currencies:
            quote = quotes.get(code)
            if not isinstance(quote, (int, float)) or isinstance(quote, bool) or quote <= 0:
                continue

            mid = 1 / quote
            entries.append(RateEntry(
                currency_code=code,
                buying=mid * (1 - self.spread),
                selling=mid * (1 + self.spread),
                source=SOURCE_FALLBACK,
                timestamp=timestamp,
            ))

        entries.append(RateEntry(
            currency_code=self.local_currency,
            buying=1,
            selling=1,
            source=SOURCE_BASE,
            timestamp=timestamp,
        ))
        return RateTable(entries)

    def fetch_rates(self) -> RateTable:
        logger.info("Fetching fallback rates: %s", self.url)
        try:
            response = self.session.get(self.url, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except (requests.RequestException, ValueError) as exc:
            raise RateSourceError(f"Error fetching from {self.source_name}: {exc}") from exc

        return self.build_table(data)
