"""
Upstream exchange rate sources
"""
from typing import Dict, Type

from .base import RateSource
from .exchangerate_api import ExchangeRateApiSource
from .numbers_lk import NumbersLkSource

__all__ = [
    'RateSource',
    'NumbersLkSource',
    'ExchangeRateApiSource',
    'AVAILABLE_SOURCES',
    'get_rate_source',
]

# Registry of all available sources, keyed by the ids used in RATE_SOURCES
AVAILABLE_SOURCES: Dict[str, Type[RateSource]] = {
    NumbersLkSource.source_id: NumbersLkSource,
    ExchangeRateApiSource.source_id: ExchangeRateApiSource,
}


def get_rate_source(source_id: str) -> RateSource:
    """
    Get a rate source instance by source ID

    Args:
        source_id: Source identifier (numbers_lk, exchangerate_api)

    Returns:
        RateSource: Instance of the appropriate source

    Raises:
        ValueError: If source_id is not recognized
    """
    source_class = AVAILABLE_SOURCES.get(source_id.strip().lower())
    if source_class is None:
        raise ValueError(f"Unknown rate source: {source_id}. Available sources: {list(AVAILABLE_SOURCES.keys())}")

    return source_class()
