"""Base class for regression channel tools.

Channel tools share input handling (price series validation), offloading of
the CPU-bound engine to a worker thread, and error reporting through
``ToolResult`` instead of exceptions.
"""

import asyncio
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any, TypeVar

import structlog

from channelscope.domain.ports.tools import Tool, ToolResult
from channelscope.domain.services.channels.series import PriceSeries, prepare_series
from channelscope.infrastructure.config import Settings, get_settings

logger = structlog.get_logger(__name__)

R = TypeVar("R")

SERIES_PARAMETER: dict[str, Any] = {
    "type": "array",
    "description": (
        "Price history as objects with 'date', 'price' and optional 'volume', "
        "in ascending or descending date order"
    ),
    "items": {"type": "object"},
}


class BaseChannelTool(Tool, ABC):
    """Base class for channel tools.

    Subclasses implement ``_execute_impl``; ``execute`` validates parameters and
    turns any failure into an unsuccessful ``ToolResult``.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        """Initialize tool with application settings.

        Args:
            settings: Settings providing engine defaults; uses global settings if None
        """
        self._settings = settings or get_settings()

    async def execute(self, **kwargs: Any) -> ToolResult:
        """Execute the tool.

        Args:
            **kwargs: Tool parameters (see ``get_schema``)

        Returns:
            ToolResult with the tool payload, or the error message on failure
        """
        try:
            validated = self.validate_parameters(**kwargs)
            return await self._execute_impl(validated)
        except Exception as e:
            logger.error(
                "Channel tool failed",
                tool=self.get_name(),
                error=str(e),
                error_type=type(e).__name__,
            )
            return ToolResult(
                success=False,
                data=None,
                error=str(e),
                metadata={"tool": self.get_name()},
            )

    @abstractmethod
    async def _execute_impl(self, params: dict[str, Any]) -> ToolResult:
        """Run the tool with validated parameters."""

    @staticmethod
    def _load_series(raw: Any) -> PriceSeries:
        return prepare_series(raw)

    @staticmethod
    async def _run_engine(func: Callable[..., R], *args: Any, **kwargs: Any) -> R:
        """Run a CPU-bound engine call without blocking the event loop."""
        return await asyncio.to_thread(func, *args, **kwargs)
