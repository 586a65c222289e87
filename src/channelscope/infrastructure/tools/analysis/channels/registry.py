"""Factory for regression channel tools."""

from channelscope.domain.ports.tools import Tool
from channelscope.infrastructure.config import Settings
from channelscope.infrastructure.tools.analysis.channels.detection import (
    AlignTrendChannelTool,
    DetectChannelsTool,
    TrendChannelTool,
)


def create_channel_tools(settings: Settings | None = None) -> list[Tool]:
    """Create all regression channel tools.

    Args:
        settings: Settings providing engine defaults; uses global settings if None

    Returns:
        Detection, trend channel and alignment tools
    """
    return [
        DetectChannelsTool(settings),
        TrendChannelTool(settings),
        AlignTrendChannelTool(settings),
    ]
