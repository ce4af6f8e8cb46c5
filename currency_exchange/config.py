"""Configuration helpers for upstream URLs and runtime settings."""

from __future__ import annotations

import logging
import os
from typing import List, Tuple

from dotenv import load_dotenv

LOGGER = logging.getLogger(__name__)


def _load_env_file() -> None:
    """Load variables from a local ``.env`` file when available."""

    env_path = os.path.join(os.path.dirname(os.path.dirname(__file__)), ".env")
    if not os.path.exists(env_path):
        LOGGER.debug("No .env file found at %s", env_path)
        return

    load_dotenv(env_path)
    LOGGER.info("Loaded environment variables from %s", env_path)


def _read_list(name: str, default: str) -> Tuple[str, ...]:
    """Read a comma-separated environment variable as a tuple of codes."""

    raw = os.getenv(name, default)
    return tuple(item.strip().upper() for item in raw.split(",") if item.strip())


_load_env_file()


class Config:
    """Central access point for runtime configuration."""

    # Server identity ----------------------------------------------------------
    SERVER_NAME: str = "currency-exchange-server"
    SERVER_VERSION: str = "0.1.0"

    # Currency settings --------------------------------------------------------
    LOCAL_CURRENCY: str = os.getenv("LOCAL_CURRENCY", "LKR").strip().upper()

    # Upstream sources ---------------------------------------------------------
    PRIMARY_URL: str = os.getenv("PRIMARY_URL", "https://tools.numbers.lk/exrates")
    FALLBACK_URL: str = os.getenv(
        "FALLBACK_URL", "https://api.exchangerate-api.com/v4/latest"
    )
    PRIMARY_TIMEOUT: float = float(os.getenv("PRIMARY_TIMEOUT", "10"))
    FALLBACK_TIMEOUT: float = float(os.getenv("FALLBACK_TIMEOUT", "10"))
    USER_AGENT: str = os.getenv(
        "USER_AGENT",
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36",
    )
    RATE_SOURCES: Tuple[str, ...] = tuple(
        item.lower() for item in _read_list("RATE_SOURCES", "numbers_lk,exchangerate_api")
    )
    FALLBACK_CURRENCIES: Tuple[str, ...] = _read_list(
        "FALLBACK_CURRENCIES", "USD,EUR,GBP,JPY,AUD,SGD,INR"
    )

    # Simulation constants -----------------------------------------------------
    FALLBACK_SPREAD: float = float(os.getenv("FALLBACK_SPREAD", "0.02"))
    TREND_VARIATION: float = float(os.getenv("TREND_VARIATION", "0.02"))
    MAX_TREND_DAYS: int = int(os.getenv("MAX_TREND_DAYS", "365"))

    # Logging ------------------------------------------------------------------
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    @classmethod
    def problems(cls) -> List[str]:
        """Return a list of human readable configuration problems."""

        from .sources import AVAILABLE_SOURCES

        issues = []
        if not 0 <= cls.FALLBACK_SPREAD < 1:
            issues.append(f"FALLBACK_SPREAD must be in [0, 1), got {cls.FALLBACK_SPREAD}")
        if not 0 <= cls.TREND_VARIATION < 1:
            issues.append(f"TREND_VARIATION must be in [0, 1), got {cls.TREND_VARIATION}")
        if cls.MAX_TREND_DAYS < 1:
            issues.append(f"MAX_TREND_DAYS must be positive, got {cls.MAX_TREND_DAYS}")
        if cls.PRIMARY_TIMEOUT <= 0 or cls.FALLBACK_TIMEOUT <= 0:
            issues.append("Upstream timeouts must be positive")
        if not cls.RATE_SOURCES:
            issues.append("RATE_SOURCES must name at least one source")
        for source_id in cls.RATE_SOURCES:
            if source_id not in AVAILABLE_SOURCES:
                issues.append(
                    f"Unknown rate source '{source_id}'. "
                    f"Available sources: {list(AVAILABLE_SOURCES.keys())}"
                )
        return issues

    @classmethod
    def validate(cls) -> bool:
        """Validate that the active configuration is usable."""

        issues = cls.problems()
        for issue in issues:
            LOGGER.warning("Configuration problem: %s", issue)
        return not issues
