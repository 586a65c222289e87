"""Channel bound and band materialization."""

from __future__ import annotations

import numpy as np

from channelscope.domain.models.channel import ChannelPoint
from channelscope.domain.services.channels.series import PriceSeries


def generate_bands(lower: np.ndarray, upper: np.ndarray, band_count: int) -> np.ndarray:
    """Evenly spaced levels between ``lower`` and ``upper`` for each point.

    Args:
        lower: Lower bound per point
        upper: Upper bound per point
        band_count: Number of zones; ``band_count - 1`` levels separate them

    Returns:
        Array of shape ``(len(lower), band_count - 1)``
    """
    if band_count < 1:
        raise ValueError(f"band_count must be positive, got {band_count}")
    fractions = np.arange(1, band_count, dtype=float) / band_count
    return lower[:, np.newaxis] + (upper - lower)[:, np.newaxis] * fractions[np.newaxis, :]


def build_channel_points(
    series: PriceSeries,
    start: int,
    stop: int,
    origin: int,
    slope: float,
    intercept: float,
    half_width: float,
    band_count: int,
) -> tuple[ChannelPoint, ...]:
    """Materialize center, bounds and bands for series positions ``start .. stop - 1``.

    Args:
        series: Full price series
        start: First position to materialize
        stop: Position after the last one to materialize
        origin: Series position where the fitted line's x is 0
        slope: Fitted slope
        intercept: Center line value at ``origin``
        half_width: Distance from the center to each bound (multiplier × std dev)
        band_count: Number of zones between the bounds
    """
    x = np.arange(start - origin, stop - origin, dtype=float)
    center = slope * x + intercept
    upper = center + half_width
    lower = center - half_width
    bands = generate_bands(lower, upper, band_count)

    return tuple(
        ChannelPoint(
            index=point.index,
            date=point.date,
            price=point.price,
            volume=point.volume,
            center=float(center[i]),
            upper=float(upper[i]),
            lower=float(lower[i]),
            bands=tuple(float(level) for level in bands[i]),
        )
        for i, point in enumerate(series.points[start:stop])
    )
