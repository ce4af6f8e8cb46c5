"""Exception types shared by the rate sources, services and dispatcher."""


class CurrencyExchangeError(Exception):
    """Base class for errors surfaced to tool callers."""


class InvalidParamsError(CurrencyExchangeError, ValueError):
    """Raised when a tool argument is missing, malformed or unsupported."""


class RateFetchError(CurrencyExchangeError, RuntimeError):
    """Raised when no configured rate source could produce a rate table."""


class RateSourceError(RuntimeError):
    """Raised by a single rate source when its upstream cannot be used."""
