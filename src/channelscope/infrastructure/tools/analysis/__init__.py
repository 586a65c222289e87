"""Analysis tools."""

from channelscope.infrastructure.tools.analysis.channels import (
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
