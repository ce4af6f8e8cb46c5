"""
Tool catalog and dispatcher

Routes a ``{name, arguments}`` tool call to the matching
:class:`~currency_exchange.services.CurrencyService` handler and turns the
outcome into either a :class:`ToolSuccess` or a :class:`ToolFailure`. Every
exception raised by a handler is normalised here, once, into one of the
three error kinds callers can act on.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Union

from .errors import InvalidParamsError, RateFetchError
from .services import CurrencyService

logger = logging.getLogger(__name__)


class ErrorKind(enum.Enum):
    """Failure kinds with their JSON-RPC error codes."""

    METHOD_NOT_FOUND = -32601
    INVALID_PARAMS = -32602
    INTERNAL_ERROR = -32603

    @property
    def code(self) -> int:
        return self.value


@dataclass(frozen=True)
class ToolSuccess:
    payload: Dict[str, Any]

    ok = True


@dataclass(frozen=True)
class ToolFailure:
    kind: ErrorKind
    message: str

    ok = False


ToolOutcome = Union[ToolSuccess, ToolFailure]


TOOL_CATALOG: List[Dict[str, Any]] = [
    {
        "name": "get_exchange_rates",
        "description": "Get current exchange rates from Sri Lankan banks",
        "inputSchema": {
            "type": "object",
            "properties": {
                "currency": {
                    "type": "string",
                    "description": "Currency code (e.g., USD, EUR, GBP) - optional, returns all if not specified",
                    "default": "ALL",
                },
            },
        },
    },
    {
        "name": "convert_currency",
        "description": "Convert amount between currencies using latest rates",
        "inputSchema": {
            "type": "object",
            "properties": {
                "amount": {"type": "number", "description": "Amount to convert"},
                "from_currency": {
                    "type": "string",
                    "description": "Source currency code (e.g., USD, EUR, LKR)",
                },
                "to_currency": {
                    "type": "string",
                    "description": "Target currency code (e.g., USD, EUR, LKR)",
                },
                "rate_type": {
                    "type": "string",
                    "description": "Rate type: buying or selling",
                    "enum": ["buying", "selling"],
                    "default": "selling",
                },
            },
            "required": ["amount", "from_currency", "to_currency"],
        },
    },
    {
        "name": "get_currency_trend",
        "description": (
            "Get trend data for a currency. The data is simulated from the "
            "current selling rate and is not real historical data"
        ),
        "inputSchema": {
            "type": "object",
            "properties": {
                "currency": {
                    "type": "string",
                    "description": "Currency code (e.g., USD, EUR, GBP)",
                },
                "days": {
                    "type": "number",
                    "description": "Number of days to look back",
                    "default": 7,
                },
            },
            "required": ["currency"],
        },
    },
]


class ToolDispatcher:
    """Stateless router from tool names to currency service handlers."""

    def __init__(self, service: Optional[CurrencyService] = None) -> None:
        self._service = service or CurrencyService()
        self._handlers: Dict[str, Callable[[Dict[str, Any]], Dict]] = {
            "get_exchange_rates": self._get_exchange_rates,
            "convert_currency": self._convert_currency,
            "get_currency_trend": self._get_currency_trend,
        }

    def list_tools(self) -> List[Dict[str, Any]]:
        """Return the tool catalog in registration order."""

        return [dict(tool) for tool in TOOL_CATALOG]

    @property
    def tool_names(self) -> List[str]:
        return list(self._handlers)

    def call(self, name: str, arguments: Optional[Dict[str, Any]] = None) -> ToolOutcome:
        """Run tool ``name`` and return its outcome; never raises."""

        handler = self._handlers.get(name)
        if handler is None:
            logger.warning("Unknown tool requested: %s", name)
            return ToolFailure(ErrorKind.METHOD_NOT_FOUND, f"Unknown tool: {name}")

        if arguments is None:
            arguments = {}
        if not isinstance(arguments, dict):
            return ToolFailure(ErrorKind.INVALID_PARAMS, "Tool arguments must be an object")

        logger.info("Calling tool %s", name)
        try:
            return ToolSuccess(handler(arguments))
        except InvalidParamsError as exc:
            logger.warning("Invalid parameters for %s: %s", name, exc)
            return ToolFailure(ErrorKind.INVALID_PARAMS, str(exc))
        except RateFetchError as exc:
            logger.error("Rate fetch failed for %s: %s", name, exc)
            return ToolFailure(ErrorKind.INTERNAL_ERROR, str(exc))
        except Exception as exc:
            logger.error("Unexpected error in %s", name, exc_info=True)
            return ToolFailure(ErrorKind.INTERNAL_ERROR, f"Failed to run {name}: {exc}")

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------
    def _get_exchange_rates(self, arguments: Dict[str, Any]) -> Dict:
        return self._service.get_exchange_rates(arguments.get("currency"))

    def _convert_currency(self, arguments: Dict[str, Any]) -> Dict:
        return self._service.convert_currency(
            amount=arguments.get("amount"),
            from_currency=arguments.get("from_currency"),
            to_currency=arguments.get("to_currency"),
            rate_type=arguments.get("rate_type", "selling"),
        )

    def _get_currency_trend(self, arguments: Dict[str, Any]) -> Dict:
        return self._service.get_currency_trend(
            currency=arguments.get("currency"),
            days=arguments.get("days", 7),
        )
