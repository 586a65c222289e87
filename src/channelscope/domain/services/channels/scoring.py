"""Channel quality scoring and multiplier optimization.

A trial channel around a fitted line is scored as

    score = coverage × touch_bonus × relative_fit × length_bonus
            × center_proximity × width_penalty

where coverage rewards containing price, the touch bonus rewards bounds that
price actually tests, relative fit penalizes noisy slices, the length bonus
favours long windows and the width penalty favours tight multipliers. Slices
whose points mostly sit far from the center line are rejected outright.
"""

from __future__ import annotations

from collections.abc import Sequence
from math import log
from typing import NamedTuple

import numpy as np

from channelscope.domain.models.channel import CENTER_PROXIMITY_FLOOR
from channelscope.domain.services.channels.regression import RegressionFit

MULTIPLIER_TRIALS: tuple[float, ...] = (1.0, 1.5, 2.0, 2.5, 3.0, 3.5, 4.0)
TOUCH_TOLERANCE_RATIO = 0.1
CENTER_BAND_RATIO = 0.20


class ScoreBreakdown(NamedTuple):
    """Score of one trial multiplier and the measurements behind it."""

    multiplier: float
    coverage: float
    center_proximity: float
    touches_upper: bool
    touches_lower: bool
    score: float


def _touch_bonus(touches_upper: bool, touches_lower: bool) -> float:
    if touches_upper and touches_lower:
        return 1.5
    if touches_upper or touches_lower:
        return 1.2
    return 1.0


class ChannelScorer:
    """Scores trial multipliers for slices of one series."""

    def __init__(
        self,
        total_length: int,
        min_center_proximity: float = CENTER_PROXIMITY_FLOOR,
    ) -> None:
        if total_length < 2:
            raise ValueError(f"Scoring needs a series of at least 2 points, got {total_length}")
        self._log_total = log(total_length)
        self._min_center_proximity = min_center_proximity

    def center_proximity(self, prices: np.ndarray, fit: RegressionFit) -> float:
        """Fraction of points within 20% of ``|center|`` from the center line."""
        center = fit.center(len(prices))
        near = np.abs(prices - center) <= np.abs(center) * CENTER_BAND_RATIO
        return float(np.count_nonzero(near)) / len(prices)

    def score(
        self, prices: np.ndarray, fit: RegressionFit, multiplier: float
    ) -> ScoreBreakdown | None:
        """Score a channel of ``multiplier`` standard deviations around ``fit``.

        Returns:
            Score breakdown, or None if the slice fails the center-proximity floor
        """
        n = len(prices)
        center = fit.center(n)
        half_width = multiplier * fit.std_dev
        upper = center + half_width
        lower = center - half_width
        tolerance = fit.std_dev * TOUCH_TOLERANCE_RATIO

        center_proximity = self.center_proximity(prices, fit)
        if center_proximity < self._min_center_proximity:
            return None

        inside = (prices >= lower - tolerance) & (prices <= upper + tolerance)
        coverage = float(np.count_nonzero(inside)) / n
        touches_upper = bool(np.any(np.abs(prices - upper) <= tolerance))
        touches_lower = bool(np.any(np.abs(prices - lower) <= tolerance))

        relative_fit = 1.0 / (1.0 + fit.std_dev / max(abs(fit.intercept), 1.0))
        length_bonus = log(n) / self._log_total
        width_penalty = 1.0 / (1.0 + multiplier / 4.0)
        score = (
            coverage
            * _touch_bonus(touches_upper, touches_lower)
            * relative_fit
            * length_bonus
            * center_proximity
            * width_penalty
        )

        return ScoreBreakdown(
            multiplier=multiplier,
            coverage=coverage,
            center_proximity=center_proximity,
            touches_upper=touches_upper,
            touches_lower=touches_lower,
            score=score,
        )


class MultiplierOptimizer:
    """Picks the best-scoring multiplier for a fitted slice."""

    def __init__(
        self,
        scorer: ChannelScorer,
        trials: Sequence[float] = MULTIPLIER_TRIALS,
        starting_multiplier: float | None = None,
    ) -> None:
        self._scorer = scorer
        # The preferred multiplier is scanned first so it wins exact ties.
        self._trials = tuple(sorted(trials, key=lambda m: (m != starting_multiplier, m)))

    @property
    def trials(self) -> tuple[float, ...]:
        return self._trials

    def optimize(self, prices: np.ndarray, fit: RegressionFit) -> ScoreBreakdown | None:
        """Best non-rejected trial, or None for degenerate or outlier-dominated slices."""
        if fit.is_degenerate:
            return None

        best: ScoreBreakdown | None = None
        for multiplier in self._trials:
            breakdown = self._scorer.score(prices, fit, multiplier)
            if breakdown is None:
                # Center proximity does not depend on the multiplier.
                return None
            if best is None or breakdown.score > best.score:
                best = breakdown
        return best


def edges_fit(
    prices: np.ndarray,
    fit: RegressionFit,
    deviation_ratio: float | None,
    window_ratio: float = 0.1,
) -> bool:
    """Check that the slice's first and last points hug the line as well as the rest.

    Compares the mean absolute residual of the leading and trailing windows
    (``window_ratio`` of the slice, at least 3 points) with the slice-wide mean.
    A slice straddling a trend change shows inflated residuals at its edges.

    Args:
        prices: Slice of prices
        fit: Regression fitted to the slice
        deviation_ratio: Maximum edge/overall ratio; None disables the check
        window_ratio: Fraction of the slice forming each edge window

    Returns:
        True if both edges are within the allowed deviation
    """
    if deviation_ratio is None:
        return True

    abs_residuals = np.abs(fit.residuals(prices))
    window = max(3, int(len(prices) * window_ratio))
    limit = float(abs_residuals.mean()) * deviation_ratio
    head = float(abs_residuals[:window].mean())
    tail = float(abs_residuals[-window:].mean())
    return head <= limit and tail <= limit
