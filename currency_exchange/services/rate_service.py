"""Application service responsible for fetching a fresh rate table."""

from __future__ import annotations

from typing import Callable, Iterable, List, Optional
import logging

from ..config import Config
from ..errors import RateFetchError, RateSourceError
from ..models import RateTable
from ..sources import AVAILABLE_SOURCES, RateSource, get_rate_source

logger = logging.getLogger(__name__)


class RateFetcher:
    """Try each configured rate source in order until one yields rates.

    Sources are built fresh for every :meth:`fetch_rates` call, so no HTTP
    session or cookie jar outlives a single fetch. A source that raises or
    returns an empty table is logged and skipped.
    """

    def __init__(
        self,
        source_ids: Optional[Iterable[str]] = None,
        source_factory: Callable[[str], RateSource] = get_rate_source,
    ) -> None:
        ids = [
            source_id.strip().lower()
            for source_id in (source_ids if source_ids is not None else Config.RATE_SOURCES)
        ]
        if not ids:
            raise ValueError("At least one rate source is required")
        if source_factory is get_rate_source:
            unknown = [source_id for source_id in ids if source_id not in AVAILABLE_SOURCES]
            if unknown:
                raise ValueError(
                    f"Unknown rate sources: {unknown}. "
                    f"Available sources: {list(AVAILABLE_SOURCES.keys())}"
                )
        self._source_ids: List[str] = ids
        self._source_factory = source_factory

    @property
    def source_ids(self) -> List[str]:
        return list(self._source_ids)

    def build_sources(self) -> List[RateSource]:
        """Create new source instances, in fallback order."""

        return [self._source_factory(source_id) for source_id in self._source_ids]

    def fetch_rates(self) -> RateTable:
        """Return the first non-empty table produced by the sources."""

        sources = self.build_sources()
        try:
            return self._first_table(sources)
        finally:
            for source in sources:
                source.close()

    def _first_table(self, sources: List[RateSource]) -> RateTable:
        last_error = "no rates found"
        for source in sources:
            try:
                table = source.fetch_rates()
            except RateSourceError as exc:
                logger.warning("Rate source '%s' failed: %s", source.source_id, exc)
                last_error = str(exc)
                continue
            except Exception as exc:
                logger.error("Unexpected error from rate source '%s'", source.source_id, exc_info=True)
                last_error = f"{source.source_name}: {exc}"
                continue

            if len(table) == 0:
                logger.warning("Rate source '%s' returned no rates", source.source_id)
                last_error = f"{source.source_name} returned no rates"
                continue

            logger.info("Fetched %d rates from '%s'", len(table), source.source_id)
            return table

        raise RateFetchError(f"Failed to fetch exchange rates: {last_error}")
