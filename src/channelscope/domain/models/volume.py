"""Volume-at-price domain models."""

from enum import Enum

from pydantic import Field

from channelscope.domain.models.base import ValueObject


class BoundState(str, Enum):
    """Strength of a channel bound relative to the volume profile."""

    STRONG = "strong"
    WEAK = "weak"
    NEUTRAL = "neutral"


class VolumeBin(ValueObject):
    """Traded volume accumulated within one price bin."""

    price_level: float = Field(..., description="Bin midpoint")
    price_min: float
    price_max: float
    volume: float = Field(..., ge=0)


class VolumeProfile(ValueObject):
    """Volume-at-price distribution with point of control and volume nodes."""

    bins: tuple[VolumeBin, ...]
    poc: VolumeBin = Field(..., description="Point of control (highest-volume bin)")
    hvns: tuple[VolumeBin, ...] = Field(default=(), description="High-volume nodes")
    lvns: tuple[VolumeBin, ...] = Field(default=(), description="Low-volume nodes")
    avg_volume: float
    std_volume: float
    min_price: float
    max_price: float


class BoundConfluence(ValueObject):
    """Confluence of a channel's bounds with the volume profile at one point."""

    index: int = Field(..., ge=0)
    upper_state: BoundState = BoundState.NEUTRAL
    lower_state: BoundState = BoundState.NEUTRAL
