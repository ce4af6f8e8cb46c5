"""Rate listing, conversion and trend simulation on top of a fresh rate table."""

from __future__ import annotations

import logging
import math
import random
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Optional

from ..config import Config
from ..errors import InvalidParamsError
from ..models import RateTable, TrendPoint
from .rate_service import RateFetcher

logger = logging.getLogger(__name__)

ALL_CURRENCIES = "ALL"
RATE_TYPES = ("buying", "selling")

TREND_NOTE = (
    "Simulated data: points are random perturbations of the current selling "
    "rate, not historical rates."
)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _normalize_code(value: Any, field: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise InvalidParamsError(f"Parameter '{field}' must be a non-empty currency code")
    return value.strip().upper()


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class CurrencyService:
    """Stateless handlers behind the three exchange rate tools."""

    def __init__(
        self,
        fetcher: Optional[RateFetcher] = None,
        local_currency: Optional[str] = None,
        trend_variation: Optional[float] = None,
        max_trend_days: Optional[int] = None,
        rng: Optional[random.Random] = None,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self._fetcher = fetcher or RateFetcher()
        self.local_currency = (local_currency or Config.LOCAL_CURRENCY).upper()
        self.trend_variation = (
            Config.TREND_VARIATION if trend_variation is None else trend_variation
        )
        self.max_trend_days = max_trend_days or Config.MAX_TREND_DAYS
        self._rng = rng or random.Random()
        self._clock = clock

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def get_exchange_rates(self, currency: Any = None) -> Dict:
        """Return every rate, or a single entry when ``currency`` is given."""

        if currency is None or (isinstance(currency, str) and not currency.strip()):
            code = ALL_CURRENCIES
        else:
            code = _normalize_code(currency, "currency")
        rates = self._fetcher.fetch_rates()
        now = self._clock().isoformat()

        if code != ALL_CURRENCIES:
            if code not in rates:
                raise InvalidParamsError(f"Currency {code} not found")
            return {
                "currency": code,
                "rate": rates[code].to_dict(),
                "last_updated": now,
            }

        return {
            "rates": rates.to_dict(),
            "last_updated": now,
            "total_currencies": len(rates),
        }

    def convert_currency(
        self,
        amount: Any = None,
        from_currency: Any = None,
        to_currency: Any = None,
        rate_type: Any = "selling",
    ) -> Dict:
        """Convert ``amount`` using the local currency as the pivot."""

        if amount is None or from_currency is None or to_currency is None:
            raise InvalidParamsError(
                "Missing required parameters: amount, from_currency, to_currency"
            )
        if not _is_number(amount) or not math.isfinite(amount) or amount < 0:
            raise InvalidParamsError("Parameter 'amount' must be a non-negative number")

        source = _normalize_code(from_currency, "from_currency")
        target = _normalize_code(to_currency, "to_currency")
        rate_type = self._normalize_rate_type(rate_type)

        rates = self._fetcher.fetch_rates()

        if source == self.local_currency:
            target_rate = self._rate(rates, target, rate_type, divisor=True)
            conversion_rate = 1 / target_rate
            converted = amount / target_rate
        elif target == self.local_currency:
            conversion_rate = self._rate(rates, source, rate_type)
            converted = amount * conversion_rate
        else:
            source_rate = self._rate(rates, source, rate_type)
            target_rate = self._rate(rates, target, rate_type, divisor=True)
            converted = amount * source_rate / target_rate
            conversion_rate = source_rate / target_rate

        logger.info(
            "Converted %s %s to %s at %s (%s)",
            amount, source, target, conversion_rate, rate_type,
        )
        return {
            "original_amount": amount,
            "from_currency": source,
            "to_currency": target,
            "converted_amount": round(converted, 2),
            "conversion_rate": round(conversion_rate, 4),
            "rate_type": rate_type,
            "timestamp": self._clock().isoformat(),
        }

    def get_currency_trend(self, currency: Any = None, days: Any = 7) -> Dict:
        """Simulate ``days`` daily rates ending today around the selling rate."""

        code = _normalize_code(currency, "currency")
        period = self._normalize_days(days)

        rates = self._fetcher.fetch_rates()
        if code not in rates:
            raise InvalidParamsError(f"Currency {code} not supported")

        base_rate = rates[code].selling
        today = self._clock().date()
        trend = self.simulate_trend(base_rate, period, today)

        return {
            "currency": code,
            "period_days": period,
            "trend": [point.to_dict() for point in trend],
            "current_rate": base_rate,
            "generated_at": self._clock().isoformat(),
            "simulated": True,
            "note": TREND_NOTE,
        }

    def simulate_trend(self, base_rate: float, days: int, today) -> List[TrendPoint]:
        """Build ``days`` chronological points; the last one is ``today``.

        The final point reports a change of 0 even though its rate carries
        its own random perturbation.
        """

        points = []
        for offset in range(days - 1, -1, -1):
            variation = (self._rng.random() - 0.5) * 2 * self.trend_variation
            rate = base_rate * (1 + variation)
            if offset == 0 or base_rate == 0:
                change = 0.0
            else:
                change = round((rate - base_rate) / base_rate * 100, 2)
            points.append(TrendPoint(
                date=(today - timedelta(days=offset)).isoformat(),
                rate=round(rate, 2),
                change=change,
            ))
        return points

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    @staticmethod
    def _normalize_rate_type(rate_type: Any) -> str:
        if rate_type is None:
            return "selling"
        if not isinstance(rate_type, str) or rate_type.strip().lower() not in RATE_TYPES:
            raise InvalidParamsError(
                f"Parameter 'rate_type' must be one of {list(RATE_TYPES)}, got {rate_type!r}"
            )
        return rate_type.strip().lower()

    def _normalize_days(self, days: Any) -> int:
        if days is None:
            return 7
        if not _is_number(days) or not math.isfinite(days) or days != int(days):
            raise InvalidParamsError("Parameter 'days' must be a whole number")
        days = int(days)
        if not 1 <= days <= self.max_trend_days:
            raise InvalidParamsError(
                f"Parameter 'days' must be between 1 and {self.max_trend_days}"
            )
        return days

    @staticmethod
    def _rate(rates: RateTable, code: str, rate_type: str, divisor: bool = False) -> float:
        if code not in rates:
            raise InvalidParamsError(f"Currency {code} not supported")
        value = rates[code].rate(rate_type)
        if divisor and value == 0:
            raise InvalidParamsError(f"No {rate_type} rate available for {code}")
        return value
