"""Ordinary least-squares fit of price against position within a slice."""

from __future__ import annotations

from typing import NamedTuple

import numpy as np

from channelscope.domain.exceptions import InvalidSeriesError


class RegressionFit(NamedTuple):
    """Fitted line ``price ≈ slope * i + intercept`` with residual spread."""

    slope: float
    intercept: float
    std_dev: float

    @property
    def is_degenerate(self) -> bool:
        """True for zero residual variance (perfectly linear or constant prices)."""
        return self.std_dev == 0.0

    def center(self, length: int) -> np.ndarray:
        """Center line evaluated at positions ``0 .. length - 1``."""
        return self.slope * np.arange(length, dtype=float) + self.intercept

    def residuals(self, prices: np.ndarray) -> np.ndarray:
        return prices - self.center(len(prices))


def fit_regression(prices: np.ndarray) -> RegressionFit:
    """Fit a least-squares line to a contiguous slice of prices.

    x is the 0-based position within the slice. ``std_dev`` is the population
    standard deviation of the residuals. A zero ``std_dev`` is a valid result
    that callers must check (see ``RegressionFit.is_degenerate``). Floating-point
    noise is reported as-is, so a line whose prices are not exactly
    representable fits with a tiny but nonzero ``std_dev``.

    Args:
        prices: Slice of prices, at least two points

    Returns:
        Slope, intercept and residual standard deviation

    Raises:
        InvalidSeriesError: If fewer than two prices are given
    """
    n = len(prices)
    if n < 2:
        raise InvalidSeriesError(f"Regression needs at least 2 points, got {n}")

    x = np.arange(n, dtype=float)
    sum_x = float(x.sum())
    sum_y = float(prices.sum())
    sum_xy = float(x @ prices)
    sum_x2 = float(x @ x)

    denom = n * sum_x2 - sum_x * sum_x
    slope = (n * sum_xy - sum_x * sum_y) / denom
    intercept = (sum_y - slope * sum_x) / n

    residuals = prices - (slope * x + intercept)
    std_dev = float(np.std(residuals))

    return RegressionFit(slope=slope, intercept=intercept, std_dev=std_dev)
