"""
numbers.lk exchange rate scraper
"""
import logging
import re
from typing import Optional

import requests
from bs4 import BeautifulSoup

from ..config import Config
from ..errors import RateSourceError
from ..models import SOURCE_PRIMARY, RateEntry, RateTable, utc_now_iso
from .base import RateSource

logger = logging.getLogger(__name__)

_NUMBER_RE = re.compile(r"[-+]?(?:\d+\.?\d*|\.\d+)")
_CODE_RE = re.compile(r"\b([A-Z]{3})\b")


def parse_number(value: str) -> float:
    """Parse the leading number of a table cell, returning 0.0 when absent."""

    if not value:
        return 0.0
    match = _NUMBER_RE.match(value.replace(",", "").strip())
    if not match:
        return 0.0
    return float(match.group())


def normalize_code(label: str) -> str:
    """Turn a currency label such as ``"US Dollar (USD)"`` into ``"USD"``."""

    label = label.strip()
    match = _CODE_RE.search(label)
    if match:
        return match.group(1)
    return label.upper()


class NumbersLkSource(RateSource):
    """Scraper for the numbers.lk bank exchange rate table"""

    source_id = "numbers_lk"
    source_name = "numbers.lk"

    def __init__(self, session: Optional[requests.Session] = None, timeout: Optional[float] = None):
        super().__init__(session, timeout if timeout is not None else Config.PRIMARY_TIMEOUT)
        self.url = Config.PRIMARY_URL
        self.session.headers.update({
            'Accept': 'text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8',
        })

    def parse_table(self, html: str) -> RateTable:
        """
        Extract rate entries from every table row of the page

        A row is used when it has at least three cells and the currency,
        buying and selling texts are all non-empty. Unparsable numbers
        become 0.0 instead of dropping the row.

        Args:
            html: Page markup

        Returns:
            RateTable: Parsed entries tagged as primary
        """
        soup = BeautifulSoup(html, 'html.parser')
        timestamp = utc_now_iso()
        entries = []

        for row in soup.select('table tr'):
            cells = row.find_all('td')
            if len(cells) < 3:
                continue

            currency = cells[0].get_text().strip()
            buying = cells[1].get_text().strip()
            selling = cells[2].get_text().strip()
            if not (currency and buying and selling):
                continue

            entries.append(RateEntry(
                currency_code=normalize_code(currency),
                buying=parse_number(buying),
                selling=parse_number(selling),
                source=SOURCE_PRIMARY,
                timestamp=timestamp,
            ))

        return RateTable(entries)

    def fetch_rates(self) -> RateTable:
        try:
            logger.info("Fetching webpage: %s", self.url)
            response = self.session.get(self.url, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as exc:
            raise RateSourceError(f"Error fetching from {self.source_name}: {exc}") from exc

        table = self.parse_table(response.text)
        logger.info("Parsed %d rates from %s", len(table), self.source_name)
        return table
