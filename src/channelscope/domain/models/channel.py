"""Regression channel domain models."""

from __future__ import annotations

import datetime as dt
from typing import Any

from pydantic import Field, model_validator

from channelscope.domain.models.base import ValueObject

MULTIPLIER_MIN = 1.0
MULTIPLIER_MAX = 4.0
MAX_CHANNELS = 10
SCORE_FLOOR = 0.15
CENTER_PROXIMITY_FLOOR = 0.70
DEFAULT_BAND_COUNT = 10


class ChannelCandidate(ValueObject):
    """A scored channel fit over one slice, produced during candidate search."""

    start_idx: int = Field(..., ge=0, description="First series index covered by the channel")
    end_idx: int = Field(..., ge=0, description="Last series index covered (inclusive)")
    lookback: int = Field(..., ge=2, description="Number of points in the fitted slice")
    slope: float = Field(..., description="Regression slope per point")
    intercept: float = Field(..., description="Regression value at the first slice point")
    std_dev: float = Field(..., ge=0, description="Population std dev of residuals")
    multiplier: float = Field(
        ..., ge=MULTIPLIER_MIN, le=MULTIPLIER_MAX, description="Std dev multiplier of the bounds"
    )
    coverage: float = Field(..., ge=0, le=1, description="Fraction of points inside the bounds")
    center_proximity: float = Field(
        ..., ge=0, le=1, description="Fraction of points within 20% of the center line"
    )
    touches_upper: bool = Field(..., description="Whether price touches the upper bound")
    touches_lower: bool = Field(..., description="Whether price touches the lower bound")
    score: float = Field(..., ge=0, description="Composite quality score")


class ChannelPoint(ValueObject):
    """Materialized channel levels for one series point."""

    index: int = Field(..., ge=0)
    date: dt.datetime | dt.date
    price: float
    volume: float = Field(default=0.0, ge=0)
    center: float
    upper: float
    lower: float
    bands: tuple[float, ...] = Field(
        default=(), description="Intermediate levels from just above lower to just below upper"
    )

    @property
    def boundaries(self) -> tuple[float, ...]:
        """Zone boundaries from lower bound to upper bound."""
        return (self.lower, *self.bands, self.upper)


class Channel(ValueObject):
    """A committed regression channel with its per-point bounds and bands.

    Scoring fields are populated for channels found by multi-channel detection
    and left as ``None`` for single-channel mode, which performs no scoring.
    """

    start_idx: int = Field(..., ge=0)
    end_idx: int = Field(..., ge=0)
    lookback: int = Field(..., ge=2)
    slope: float
    intercept: float
    std_dev: float = Field(..., ge=0)
    multiplier: float = Field(..., ge=0)
    intercept_shift: float = 0.0
    band_count: int = Field(default=DEFAULT_BAND_COUNT, ge=2)
    coverage: float | None = Field(default=None, ge=0, le=1)
    center_proximity: float | None = Field(default=None, ge=0, le=1)
    touches_upper: bool | None = None
    touches_lower: bool | None = None
    score: float | None = None
    points: tuple[ChannelPoint, ...] = ()

    @model_validator(mode="after")
    def _check_span(self) -> Channel:
        if self.end_idx < self.start_idx:
            raise ValueError("Channel end_idx precedes start_idx")
        return self

    @classmethod
    def from_candidate(
        cls,
        candidate: ChannelCandidate,
        points: tuple[ChannelPoint, ...],
        band_count: int,
    ) -> Channel:
        return cls(
            **candidate.model_dump(),
            band_count=band_count,
            points=points,
        )

    @property
    def length(self) -> int:
        return self.end_idx - self.start_idx + 1

    @property
    def width(self) -> float:
        """Distance between upper and lower bound (constant along the channel)."""
        return 2.0 * self.multiplier * self.std_dev

    def summary(self) -> dict[str, Any]:
        """Channel parameters without the per-point series."""
        return self.model_dump(mode="json", exclude={"points"})


class ChannelDetectionConfig(ValueObject):
    """Configuration of multi-channel detection."""

    min_ratio: float = Field(default=0.05, gt=0, le=1, description="Min channel length / series")
    max_ratio: float = Field(default=0.50, gt=0, le=1, description="Max channel length / series")
    starting_multiplier: float = Field(
        default=2.0,
        ge=MULTIPLIER_MIN,
        le=MULTIPLIER_MAX,
        description="Multiplier preferred when trial scores tie",
    )
    band_count: int = Field(default=DEFAULT_BAND_COUNT, ge=2, le=50)
    max_channels: int = Field(default=MAX_CHANNELS, ge=1, le=MAX_CHANNELS)
    score_floor: float = Field(default=SCORE_FLOOR, ge=SCORE_FLOOR)
    min_center_proximity: float = Field(
        default=CENTER_PROXIMITY_FLOOR, ge=CENTER_PROXIMITY_FLOOR, le=1
    )
    lookback_samples: int = Field(default=20, ge=1)
    position_samples: int = Field(default=10, ge=1)
    claimed_overlap_limit: float = Field(default=0.5, ge=0, le=1)
    edge_buffer_ratio: float = Field(default=0.2, ge=0, lt=0.5)
    reopen_ratio: float = Field(default=0.8, gt=0)
    edge_deviation_ratio: float | None = Field(
        default=1.5, gt=1, description="Max edge/overall mean |residual| ratio; None disables"
    )
    edge_window_ratio: float = Field(default=0.1, gt=0, lt=0.5)

    @model_validator(mode="after")
    def _check_ratios(self) -> ChannelDetectionConfig:
        if self.min_ratio > self.max_ratio:
            raise ValueError(
                f"min_ratio ({self.min_ratio}) must not exceed max_ratio ({self.max_ratio})"
            )
        return self


class TrendChannelConfig(ValueObject):
    """Configuration of single-channel mode."""

    lookback: int | None = Field(
        default=None, ge=1, description="Points in the fit window; None uses the whole series"
    )
    multiplier: float = Field(default=2.0, gt=0)
    intercept_shift: float = 0.0
    end_at: int = Field(default=0, ge=0, description="Trailing points hidden from the channel")
    band_count: int = Field(default=DEFAULT_BAND_COUNT, ge=2, le=50)


class TrendChannelAlignment(ValueObject):
    """Intercept shift and multiplier that make a channel's bounds touch the price extremes."""

    intercept_shift: float
    optimal_multiplier: float = Field(..., ge=0)
    touches_upper: bool
    touches_lower: bool
    coverage_count: int = Field(..., ge=0)
    total_points: int = Field(..., ge=2)
    std_dev: float = Field(..., ge=0)
    slope: float
    base_intercept: float
    extreme_magnitude: float = Field(..., ge=0)

    def to_config(
        self,
        lookback: int | None = None,
        end_at: int = 0,
        band_count: int = DEFAULT_BAND_COUNT,
    ) -> TrendChannelConfig:
        """Single-channel configuration that reproduces the aligned channel."""
        return TrendChannelConfig(
            lookback=lookback if lookback is not None else self.total_points,
            multiplier=self.optimal_multiplier if self.optimal_multiplier > 0 else 1.0,
            intercept_shift=self.intercept_shift,
            end_at=end_at,
            band_count=band_count,
        )
