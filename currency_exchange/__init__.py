"""Sri Lankan exchange rates and currency conversion tools served over MCP."""

from .dispatcher import ErrorKind, ToolDispatcher, ToolFailure, ToolSuccess
from .errors import CurrencyExchangeError, InvalidParamsError, RateFetchError, RateSourceError
from .models import RateEntry, RateTable, TrendPoint

__version__ = "0.1.0"

__all__ = [
    "CurrencyExchangeError",
    "ErrorKind",
    "InvalidParamsError",
    "RateEntry",
    "RateFetchError",
    "RateSourceError",
    "RateTable",
    "ToolDispatcher",
    "ToolFailure",
    "ToolSuccess",
    "TrendPoint",
]
