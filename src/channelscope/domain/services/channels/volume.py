"""Volume analysis on top of channel bands.

Consumers of the band levels: how traded volume distributes across a
channel's zones, a volume-at-price profile of the series, and whether a
channel's bounds line up with high- or low-volume price levels.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

import numpy as np
import pandas as pd  # type: ignore[import-untyped]

from channelscope.domain.models.channel import Channel
from channelscope.domain.models.price import PricePoint
from channelscope.domain.models.volume import (
    BoundConfluence,
    BoundState,
    VolumeBin,
    VolumeProfile,
)
from channelscope.domain.services.channels.series import PriceSeries, prepare_series

DEFAULT_PROFILE_BINS = 70
DEFAULT_PROXIMITY = 0.02


def zone_volume_distribution(channel: Channel) -> dict[int, float]:
    """Percentage of the channel's traded volume falling in each band zone.

    Zone 0 lies between the lower bound and the first band, zone
    ``band_count - 1`` between the last band and the upper bound. Points
    outside the bounds or without volume are ignored.

    Returns:
        Mapping of zone index to percentage of volume (only zones with volume)
    """
    zone_volumes: dict[int, float] = {}
    for point in channel.points:
        if point.volume <= 0:
            continue
        boundaries = point.boundaries
        if not boundaries[0] <= point.price <= boundaries[-1]:
            continue
        zone = int(np.searchsorted(boundaries, point.price, side="left")) - 1
        zone = min(max(zone, 0), len(boundaries) - 2)
        zone_volumes[zone] = zone_volumes.get(zone, 0.0) + point.volume

    total = sum(zone_volumes.values())
    if total <= 0:
        return {}
    return {zone: volume / total * 100 for zone, volume in sorted(zone_volumes.items())}


def volume_profile(
    series: PriceSeries | Iterable[PricePoint | Mapping[str, Any]],
    num_bins: int = DEFAULT_PROFILE_BINS,
) -> VolumeProfile | None:
    """Volume-at-price profile of a series.

    High-volume nodes are bins above ``mean + std`` of bin volume, low-volume
    nodes non-empty bins below ``mean - std``.

    Returns:
        The profile, or None if all prices are equal
    """
    if num_bins < 1:
        raise ValueError(f"num_bins must be positive, got {num_bins}")
    series = prepare_series(series)
    prices = series.prices
    min_price = float(prices.min())
    max_price = float(prices.max())
    price_range = max_price - min_price
    if price_range == 0:
        return None

    bin_size = price_range / num_bins
    bin_index = np.minimum(((prices - min_price) / bin_size).astype(int), num_bins - 1)
    volumes = (
        pd.Series(series.volumes)
        .groupby(bin_index)
        .sum()
        .reindex(range(num_bins), fill_value=0.0)
        .to_numpy(dtype=float)
    )

    bins = tuple(
        VolumeBin(
            price_level=min_price + (i + 0.5) * bin_size,
            price_min=min_price + i * bin_size,
            price_max=min_price + (i + 1) * bin_size,
            volume=float(volumes[i]),
        )
        for i in range(num_bins)
    )
    avg_volume = float(volumes.mean())
    std_volume = float(volumes.std())

    return VolumeProfile(
        bins=bins,
        poc=bins[int(np.argmax(volumes))],
        hvns=tuple(b for b in bins if b.volume > avg_volume + std_volume),
        lvns=tuple(b for b in bins if 0 < b.volume < avg_volume - std_volume),
        avg_volume=avg_volume,
        std_volume=std_volume,
        min_price=min_price,
        max_price=max_price,
    )


def _bound_state(level: float, profile: VolumeProfile, proximity: float) -> BoundState:
    threshold = abs(level) * proximity

    def near(node: VolumeBin) -> bool:
        return abs(level - node.price_level) < threshold

    if near(profile.poc) or any(near(node) for node in profile.hvns):
        return BoundState.STRONG
    if any(near(node) for node in profile.lvns):
        return BoundState.WEAK
    return BoundState.NEUTRAL


def channel_confluence(
    channel: Channel,
    profile: VolumeProfile,
    proximity: float = DEFAULT_PROXIMITY,
) -> list[BoundConfluence]:
    """Classify each point's channel bounds against the volume profile.

    A bound within ``proximity`` (relative) of the point of control or a
    high-volume node is strong; near a low-volume node it is weak.
    """
    return [
        BoundConfluence(
            index=point.index,
            upper_state=_bound_state(point.upper, profile, proximity),
            lower_state=_bound_state(point.lower, profile, proximity),
        )
        for point in channel.points
    ]
