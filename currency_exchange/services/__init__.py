"""Service layer for fetching rates and answering tool calls."""

from .currency_service import CurrencyService
from .rate_service import RateFetcher

__all__ = [
    "CurrencyService",
    "RateFetcher",
]
