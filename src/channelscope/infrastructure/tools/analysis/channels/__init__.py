"""Regression channel tools."""

from channelscope.infrastructure.tools.analysis.channels.detection import (
    AlignTrendChannelTool,
    DetectChannelsTool,
    TrendChannelTool,
)
from channelscope.infrastructure.tools.analysis.channels.registry import create_channel_tools

__all__ = [
    "DetectChannelsTool",
    "TrendChannelTool",
    "AlignTrendChannelTool",
    "create_channel_tools",
]
