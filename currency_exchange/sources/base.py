"""
Base interface for exchange rate sources
"""
from abc import ABC, abstractmethod
from typing import Optional

import requests

from ..config import Config
from ..models import RateTable


class RateSource(ABC):
    """Abstract base class for upstream exchange rate sources"""

    source_id = "unknown"
    source_name = "Unknown"

    def __init__(self, session: Optional[requests.Session] = None, timeout: Optional[float] = None):
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({
            'User-Agent': Config.USER_AGENT,
        })

    @abstractmethod
    def fetch_rates(self) -> RateTable:
        """
        Fetch the current rate table from the upstream

        Returns:
            RateTable: Entries keyed by currency code, possibly empty

        Raises:
            RateSourceError: If the upstream could not be reached or read
        """
        pass


    def close(self) -> None:
        """Release the HTTP session's pooled connections."""
        self.session.close()
