"""Regression channel tools.

- ``detect_regression_channels`` partitions a price history into up to ten
  non-overlapping, scored channels.
- ``build_trend_channel`` fits one channel over a trailing window with caller
  chosen lookback, multiplier and intercept shift (optionally auto-aligned).
- ``align_trend_channel`` reports the shift and multiplier that make a trend
  channel's bounds touch the price extremes.
"""

from typing import Any

import structlog

from channelscope.domain.models.channel import Channel
from channelscope.domain.ports.tools import ToolResult, ToolSchema
from channelscope.domain.services.channels.selector import GreedyMultiChannelSelector
from channelscope.domain.services.channels.single import (
    DEFAULT_TOUCH_SMA_PERIOD,
    align_trend_channel,
    build_trend_channel,
    touch_sma_period,
)
from channelscope.domain.services.channels.volume import (
    channel_confluence,
    volume_profile,
    zone_volume_distribution,
)
from channelscope.infrastructure.tools.analysis.channels.base import (
    SERIES_PARAMETER,
    BaseChannelTool,
)

logger = structlog.get_logger(__name__)


def _channel_payload(
    channel: Channel, include_points: bool, include_volume_distribution: bool
) -> dict[str, Any]:
    payload = channel.model_dump(mode="json") if include_points else channel.summary()
    payload["length"] = channel.length
    payload["width"] = channel.width
    if include_volume_distribution:
        payload["zone_volume_distribution"] = {
            str(zone): pct for zone, pct in zone_volume_distribution(channel).items()
        }
    return payload


class DetectChannelsTool(BaseChannelTool):
    """Tool for detecting multiple regression channels in a price history."""

    def get_name(self) -> str:
        return "detect_regression_channels"

    def get_description(self) -> str:
        return (
            "Partition a price history into up to 10 non-overlapping linear regression "
            "channels. Each channel has a center line, upper and lower bounds at a scored "
            "std dev multiplier, and intermediate band levels. Longer, tighter channels "
            "that contain most prices are preferred."
        )

    def get_schema(self) -> ToolSchema:
        """Get tool schema."""
        return ToolSchema(
            name=self.get_name(),
            description=self.get_description(),
            parameters={
                "type": "object",
                "properties": {
                    "series": SERIES_PARAMETER,
                    "min_ratio": {
                        "type": "number",
                        "description": "Minimum channel length as a fraction of the series",
                    },
                    "max_ratio": {
                        "type": "number",
                        "description": "Maximum channel length as a fraction of the series",
                    },
                    "starting_multiplier": {
                        "type": "number",
                        "description": "Multiplier preferred when scores tie (1.0 to 4.0)",
                    },
                    "max_channels": {
                        "type": "integer",
                        "description": "Maximum number of channels (at most 10)",
                    },
                    "band_count": {
                        "type": "integer",
                        "description": "Number of zones between lower and upper bound",
                    },
                    "include_points": {
                        "type": "boolean",
                        "description": "Include per-point center, bounds and bands",
                        "default": True,
                    },
                    "include_volume_distribution": {
                        "type": "boolean",
                        "description": "Include traded volume share per band zone",
                        "default": False,
                    },
                },
                "required": ["series"],
            },
            returns={
                "type": "object",
                "description": "Detected channels sorted by start index",
            },
        )

    async def _execute_impl(self, params: dict[str, Any]) -> ToolResult:
        series = self._load_series(params["series"])
        config = self._settings.detection_config(
            min_ratio=params.get("min_ratio"),
            max_ratio=params.get("max_ratio"),
            starting_multiplier=params.get("starting_multiplier"),
            max_channels=params.get("max_channels"),
            band_count=params.get("band_count"),
        )
        selector = GreedyMultiChannelSelector(config)
        channels = await self._run_engine(selector.detect, series)

        logger.info(
            "Detected regression channels",
            data_points=len(series),
            channels=len(channels),
        )

        return ToolResult(
            success=True,
            data={
                "data_points": len(series),
                "channel_count": len(channels),
                "config": config.model_dump(mode="json"),
                "channels": [
                    _channel_payload(
                        channel,
                        include_points=params["include_points"],
                        include_volume_distribution=params["include_volume_distribution"],
                    )
                    for channel in channels
                ],
            },
            metadata={"tool": self.get_name(), "channel_count": len(channels)},
        )


class TrendChannelTool(BaseChannelTool):
    """Tool for building a single trend channel over a trailing window."""

    def get_name(self) -> str:
        return "build_trend_channel"

    def get_description(self) -> str:
        return (
            "Fit one linear regression channel over the last N price points with a chosen "
            "std dev multiplier and intercept shift. With align=true the shift and "
            "multiplier are chosen so that the bounds touch the highest and lowest prices."
        )

    def get_schema(self) -> ToolSchema:
        """Get tool schema."""
        return ToolSchema(
            name=self.get_name(),
            description=self.get_description(),
            parameters={
                "type": "object",
                "properties": {
                    "series": SERIES_PARAMETER,
                    "lookback": {
                        "type": "integer",
                        "description": "Number of trailing points to fit",
                    },
                    "multiplier": {
                        "type": "number",
                        "description": "Std dev multiplier of the bounds",
                    },
                    "intercept_shift": {
                        "type": "number",
                        "description": "Vertical offset added to the center line",
                    },
                    "end_at": {
                        "type": "integer",
                        "description": "Trailing points hidden from the channel",
                    },
                    "band_count": {
                        "type": "integer",
                        "description": "Number of zones between lower and upper bound",
                    },
                    "align": {
                        "type": "boolean",
                        "description": "Derive shift and multiplier from the price extremes",
                        "default": False,
                    },
                    "include_confluence": {
                        "type": "boolean",
                        "description": "Classify bounds against the series volume profile",
                        "default": False,
                    },
                },
                "required": ["series"],
            },
            returns={
                "type": "object",
                "description": "Trend channel with per-point bounds and bands",
            },
        )

    async def _execute_impl(self, params: dict[str, Any]) -> ToolResult:
        series = self._load_series(params["series"])
        config = self._settings.trend_config(
            lookback=params.get("lookback"),
            multiplier=params.get("multiplier"),
            intercept_shift=params.get("intercept_shift"),
            end_at=params.get("end_at"),
            band_count=params.get("band_count"),
        )

        alignment = None
        if params["align"]:
            alignment = await self._run_engine(align_trend_channel, series, config.lookback)
            if alignment is not None:
                config = alignment.to_config(
                    lookback=config.lookback,
                    end_at=config.end_at,
                    band_count=config.band_count,
                )

        channel = await self._run_engine(build_trend_channel, series, config)
        if channel is None:
            return ToolResult(
                success=False,
                data=None,
                error=(
                    f"Insufficient data for a trend channel "
                    f"(data points: {len(series)}, end_at: {config.end_at})"
                ),
                metadata={"tool": self.get_name()},
            )

        data: dict[str, Any] = {
            "channel": _channel_payload(
                channel, include_points=True, include_volume_distribution=True
            ),
            "alignment": alignment.model_dump(mode="json") if alignment else None,
        }
        if params["include_confluence"]:
            profile = await self._run_engine(volume_profile, series)
            data["confluence"] = (
                [c.model_dump(mode="json") for c in channel_confluence(channel, profile)]
                if profile is not None
                else []
            )

        return ToolResult(
            success=True,
            data=data,
            metadata={"tool": self.get_name(), "lookback": channel.lookback},
        )


class AlignTrendChannelTool(BaseChannelTool):
    """Tool for computing the touch-aligned shift and multiplier of a trend channel."""

    def get_name(self) -> str:
        return "align_trend_channel"

    def get_description(self) -> str:
        return (
            "Compute the intercept shift and std dev multiplier that make a trend "
            "channel's bounds touch the highest and lowest prices of the window, and "
            "whether those touches are turning points near the window edges."
        )

    def get_schema(self) -> ToolSchema:
        """Get tool schema."""
        return ToolSchema(
            name=self.get_name(),
            description=self.get_description(),
            parameters={
                "type": "object",
                "properties": {
                    "series": SERIES_PARAMETER,
                    "lookback": {
                        "type": "integer",
                        "description": "Number of trailing points to fit",
                    },
                    "chart_period": {
                        "type": "string",
                        "description": "Chart period (7D, 1M, 3M, 6M, 1Y, 3Y, 5Y) for smoothing",
                    },
                    "sma_period": {
                        "type": "integer",
                        "description": "Explicit smoothing period, overrides chart_period",
                    },
                },
                "required": ["series"],
            },
            returns={
                "type": "object",
                "description": "Intercept shift, optimal multiplier and touch flags",
            },
        )

    async def _execute_impl(self, params: dict[str, Any]) -> ToolResult:
        series = self._load_series(params["series"])
        lookback = params.get("lookback", self._settings.trend_lookback)
        if "sma_period" in params:
            sma_period = params["sma_period"]
        elif "chart_period" in params:
            sma_period = touch_sma_period(params["chart_period"])
        else:
            sma_period = DEFAULT_TOUCH_SMA_PERIOD

        alignment = await self._run_engine(align_trend_channel, series, lookback, sma_period)
        if alignment is None:
            return ToolResult(
                success=False,
                data=None,
                error=f"Insufficient data for alignment (data points: {len(series)})",
                metadata={"tool": self.get_name()},
            )

        return ToolResult(
            success=True,
            data=alignment.model_dump(mode="json"),
            metadata={"tool": self.get_name(), "sma_period": sma_period},
        )
