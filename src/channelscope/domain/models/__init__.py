"""Domain models for Channelscope."""

from channelscope.domain.models.channel import (
    Channel,
    ChannelCandidate,
    ChannelDetectionConfig,
    ChannelPoint,
    TrendChannelAlignment,
    TrendChannelConfig,
)
from channelscope.domain.models.price import PricePoint, PriceRange
from channelscope.domain.models.tool_results import ToolResult
from channelscope.domain.models.volume import (
    BoundConfluence,
    BoundState,
    VolumeBin,
    VolumeProfile,
)

__all__ = [
    "PricePoint",
    "PriceRange",
    # Channel models
    "Channel",
    "ChannelCandidate",
    "ChannelPoint",
    "ChannelDetectionConfig",
    "TrendChannelConfig",
    "TrendChannelAlignment",
    # Volume models
    "BoundConfluence",
    "BoundState",
    "VolumeBin",
    "VolumeProfile",
    # Core Framework Models
    "ToolResult",
]
