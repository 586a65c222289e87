"""Single-channel mode: a trend channel with caller-chosen parameters.

No search, scoring or rejection happens here. The caller picks the lookback
and multiplier (optionally with an intercept shift and a trailing ``end_at``
offset), or asks ``align_trend_channel`` for the shift and multiplier that make
both bounds touch the price extremes of the window.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

import numpy as np
import pandas as pd  # type: ignore[import-untyped]
import structlog

from channelscope.domain.models.channel import (
    Channel,
    TrendChannelAlignment,
    TrendChannelConfig,
)
from channelscope.domain.models.price import PricePoint
from channelscope.domain.services.channels.bands import build_channel_points
from channelscope.domain.services.channels.regression import fit_regression
from channelscope.domain.services.channels.series import PriceSeries, prepare_series

logger = structlog.get_logger(__name__)

# SMA period used to smooth residuals before locating turning points, per chart period.
TOUCH_SMA_PERIODS: dict[str, int] = {
    "7D": 1,
    "1M": 3,
    "3M": 5,
    "6M": 10,
    "1Y": 14,
    "3Y": 20,
    "5Y": 30,
}
DEFAULT_TOUCH_SMA_PERIOD = 3
BOUNDARY_WINDOW_RATIO = 0.08


def touch_sma_period(chart_period: str) -> int:
    """SMA period for touch detection on a chart of the given period (e.g. '3M')."""
    return TOUCH_SMA_PERIODS.get(chart_period.upper(), DEFAULT_TOUCH_SMA_PERIOD)


def _window_start(series: PriceSeries, lookback: int | None) -> int:
    total = len(series)
    if lookback and lookback < total:
        return total - lookback
    return 0


def build_trend_channel(
    series: PriceSeries | Iterable[PricePoint | Mapping[str, Any]],
    config: TrendChannelConfig | None = None,
) -> Channel | None:
    """Fit one channel over the trailing ``lookback`` points.

    The fit always uses the full window; ``end_at`` only hides the window's last
    ``end_at`` points from the materialized channel. Bounds sit at a constant
    ``multiplier × std_dev`` from the (optionally shifted) center line.

    Args:
        series: Price series or raw price records
        config: Lookback, multiplier, intercept shift, end offset and band count

    Returns:
        The channel, or None if the window has fewer than 2 points or
        ``end_at`` hides all of it
    """
    series = prepare_series(series)
    config = config or TrendChannelConfig()

    start = _window_start(series, config.lookback)
    window = series.window(start, len(series))
    if len(window) < 2:
        logger.debug("Trend channel window too short", data_points=len(window))
        return None

    stop = len(series) - config.end_at
    if stop <= start:
        logger.debug(
            "Trend channel hidden by end_at",
            end_at=config.end_at,
            window_points=len(window),
        )
        return None

    fit = fit_regression(window)
    points = build_channel_points(
        series,
        start=start,
        stop=stop,
        origin=start,
        slope=fit.slope,
        intercept=fit.intercept + config.intercept_shift,
        half_width=config.multiplier * fit.std_dev,
        band_count=config.band_count,
    )

    return Channel(
        start_idx=start,
        end_idx=stop - 1,
        lookback=len(window),
        slope=fit.slope,
        intercept=fit.intercept,
        std_dev=fit.std_dev,
        multiplier=config.multiplier,
        intercept_shift=config.intercept_shift,
        band_count=config.band_count,
        points=points,
    )


def _smoothed(prices: np.ndarray, sma_period: int) -> np.ndarray:
    """Trailing SMA, keeping raw prices until the first full window."""
    if sma_period <= 1:
        return prices
    raw = pd.Series(prices)
    sma = raw.rolling(window=sma_period, min_periods=sma_period).mean()
    return sma.where(sma.notna(), raw).to_numpy(dtype=float)


def _turning_points(residuals: np.ndarray) -> np.ndarray:
    """Positions where the residual curve crosses or leaves zero."""
    prev = residuals[:-1]
    curr = residuals[1:]
    crossing = (
        ((prev < 0) & (curr >= 0)) | ((prev > 0) & (curr <= 0)) | ((prev == 0) & (curr != 0))
    )
    return np.nonzero(crossing)[0] + 1


def align_trend_channel(
    series: PriceSeries | Iterable[PricePoint | Mapping[str, Any]],
    lookback: int | None = None,
    sma_period: int = DEFAULT_TOUCH_SMA_PERIOD,
) -> TrendChannelAlignment | None:
    """Compute the intercept shift and multiplier that center the channel on the price extremes.

    The shift moves the center line halfway between the largest and smallest
    residual, so the extremes sit symmetrically at ``± extreme_magnitude``. The
    optimal multiplier is that magnitude in units of the fit's std dev. A bound
    counts as touched when an extreme coincides with a turning point of the
    SMA-smoothed residual curve near either end of the window.

    Args:
        series: Price series or raw price records
        lookback: Trailing points to fit; None uses the whole series
        sma_period: Smoothing period for turning-point detection (see ``touch_sma_period``)

    Returns:
        Alignment parameters, or None if the window has fewer than 2 points
    """
    series = prepare_series(series)
    start = _window_start(series, lookback)
    window = series.window(start, len(series))
    n = len(window)
    if n < 2:
        return None

    fit = fit_regression(window)
    center = fit.center(n)
    residuals = window - center
    intercept_shift = (float(residuals.max()) + float(residuals.min())) / 2
    adjusted = residuals - intercept_shift

    std_dev = fit.std_dev
    extreme_magnitude = float(np.abs(adjusted).max())
    optimal_multiplier = extreme_magnitude / std_dev if std_dev > 0 else 0.0
    tolerance = std_dev * 1e-6 if std_dev > 0 else 1e-6

    if extreme_magnitude == 0:
        touches_upper = touches_lower = True
    else:
        smooth_residuals = _smoothed(window, sma_period) - center
        smooth_shift = (float(smooth_residuals.max()) + float(smooth_residuals.min())) / 2
        turning = _turning_points(smooth_residuals - smooth_shift)

        boundary_window = max(1, int(n * BOUNDARY_WINDOW_RATIO))
        at_boundary = (turning < boundary_window) | (turning >= n - boundary_window)
        turning_residuals = adjusted[turning]
        touches_upper = bool(
            np.any(at_boundary & (np.abs(turning_residuals - extreme_magnitude) <= tolerance))
        )
        touches_lower = bool(
            np.any(at_boundary & (np.abs(turning_residuals + extreme_magnitude) <= tolerance))
        )

    half_width = optimal_multiplier * std_dev
    shifted_center = center + intercept_shift
    inside = (window <= shifted_center + half_width + tolerance) & (
        window >= shifted_center - half_width - tolerance
    )

    return TrendChannelAlignment(
        intercept_shift=intercept_shift,
        optimal_multiplier=optimal_multiplier,
        touches_upper=touches_upper,
        touches_lower=touches_lower,
        coverage_count=int(np.count_nonzero(inside)),
        total_points=n,
        std_dev=std_dev,
        slope=fit.slope,
        base_intercept=fit.intercept,
        extreme_magnitude=extreme_magnitude,
    )
