"""Value objects produced by the rate sources and consumed by the services."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, Iterable, Iterator

SOURCE_PRIMARY = "primary"
SOURCE_FALLBACK = "fallback"
SOURCE_BASE = "base"


def utc_now_iso() -> str:
    """Return the current UTC time as an ISO-8601 string."""

    return datetime.now(timezone.utc).isoformat()


@dataclass(frozen=True)
class RateEntry:
    """Buying and selling quote for one currency, in local currency units."""

    currency_code: str
    buying: float
    selling: float
    source: str
    timestamp: str

    def rate(self, rate_type: str) -> float:
        return self.buying if rate_type == "buying" else self.selling

    def to_dict(self) -> Dict:
        return {
            "buying": self.buying,
            "selling": self.selling,
            "source": self.source,
            "timestamp": self.timestamp,
        }


class RateTable(Mapping):
    """Read-only mapping of currency code to :class:`RateEntry`.

    Tables are built once per fetch and never modified afterwards. When two
    entries share a code the later one wins, mirroring how rows are read off
    the upstream page.
    """

    def __init__(self, entries: Iterable[RateEntry] = ()) -> None:
        self._entries: Dict[str, RateEntry] = {}
        for entry in entries:
            self._entries[entry.currency_code] = entry

    def __getitem__(self, code: str) -> RateEntry:
        return self._entries[code]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"RateTable({list(self._entries)!r})"

    @property
    def sources(self) -> set:
        return {entry.source for entry in self._entries.values()}

    def to_dict(self) -> Dict[str, Dict]:
        return {code: entry.to_dict() for code, entry in self._entries.items()}


@dataclass(frozen=True)
class TrendPoint:
    """One day of a simulated rate trend."""

    date: str
    rate: float
    change: float

    def to_dict(self) -> Dict:
        return {"date": self.date, "rate": self.rate, "change": self.change}
