"""Tool wrappers exposing the channel engine to callers and agents."""

from channelscope.infrastructure.tools.analysis import (
    AlignTrendChannelTool,
    DetectChannelsTool,
    TrendChannelTool,
    create_channel_tools,
)

__all__ = [
    "DetectChannelsTool",
    "TrendChannelTool",
    "AlignTrendChannelTool",
    "create_channel_tools",
]
