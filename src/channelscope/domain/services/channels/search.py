"""Sampled search for the best channel inside one index range."""

from __future__ import annotations

import numpy as np

from channelscope.domain.models.channel import ChannelCandidate, ChannelDetectionConfig
from channelscope.domain.models.price import PriceRange
from channelscope.domain.services.channels.regression import fit_regression
from channelscope.domain.services.channels.scoring import (
    ChannelScorer,
    MultiplierOptimizer,
    edges_fit,
)
from channelscope.domain.services.channels.series import PriceSeries

MIN_CHANNEL_POINTS = 10


class ClaimedIndexSet:
    """Series positions already explained by a committed channel.

    Working state of a single detection run; a fresh set is created for every
    invocation and passed explicitly into the search.
    """

    def __init__(self, total_length: int) -> None:
        self._claimed = np.zeros(total_length, dtype=bool)

    def claim(self, start: int, end: int) -> None:
        """Mark positions ``start .. end`` (inclusive, clipped to the series) as claimed."""
        start = max(start, 0)
        end = min(end, len(self._claimed) - 1)
        if start <= end:
            self._claimed[start : end + 1] = True

    def count(self, start: int, stop: int) -> int:
        """Number of claimed positions in ``start .. stop - 1``."""
        return int(np.count_nonzero(self._claimed[start:stop]))

    def __contains__(self, index: object) -> bool:
        return (
            isinstance(index, int)
            and 0 <= index < len(self._claimed)
            and bool(self._claimed[index])
        )

    def __len__(self) -> int:
        return int(np.count_nonzero(self._claimed))


class CandidateSearch:
    """Finds the best-scoring channel candidate within a range of one series.

    Lookback lengths and start offsets are sampled on a coarse grid (about
    ``lookback_samples × position_samples`` slices per range) rather than
    enumerated, which keeps the cost bounded on long histories.
    """

    def __init__(self, series: PriceSeries, config: ChannelDetectionConfig) -> None:
        total = len(series)
        self._series = series
        self._config = config
        self.min_points = max(MIN_CHANNEL_POINTS, int(total * config.min_ratio))
        self.max_points = int(total * config.max_ratio)
        self._optimizer = MultiplierOptimizer(
            ChannelScorer(max(total, 2), config.min_center_proximity),
            starting_multiplier=config.starting_multiplier,
        )

    def best_in_range(
        self, price_range: PriceRange, claimed: ClaimedIndexSet
    ) -> ChannelCandidate | None:
        """Best candidate whose slice lies inside ``price_range``.

        Args:
            price_range: Inclusive index range to search
            claimed: Positions owned by previously committed channels

        Returns:
            The highest-scoring candidate, or None if no slice qualifies
        """
        range_length = price_range.length
        if range_length < self.min_points:
            return None

        cfg = self._config
        start, end = price_range.start, price_range.end
        min_lookback = min(self.min_points, range_length)
        max_lookback = min(self.max_points, range_length)
        lookback_step = max(1, (max_lookback - min_lookback) // cfg.lookback_samples)

        best: ChannelCandidate | None = None
        for lookback in range(min_lookback, max_lookback + 1, lookback_step):
            max_start = max(start, end - lookback + 1)
            position_step = max(1, (max_start - start) // cfg.position_samples)

            for pos in range(start, max_start + 1, position_step):
                stop = min(pos + lookback, end + 1)
                length = stop - pos
                if length < self.min_points:
                    continue
                if claimed.count(pos, stop) > length * cfg.claimed_overlap_limit:
                    continue

                prices = self._series.window(pos, stop)
                fit = fit_regression(prices)
                breakdown = self._optimizer.optimize(prices, fit)
                if breakdown is None:
                    continue
                if not edges_fit(prices, fit, cfg.edge_deviation_ratio, cfg.edge_window_ratio):
                    continue

                if best is None or breakdown.score > best.score:
                    best = ChannelCandidate(
                        start_idx=pos,
                        end_idx=stop - 1,
                        lookback=length,
                        slope=fit.slope,
                        intercept=fit.intercept,
                        std_dev=fit.std_dev,
                        multiplier=breakdown.multiplier,
                        coverage=breakdown.coverage,
                        center_proximity=breakdown.center_proximity,
                        touches_upper=breakdown.touches_upper,
                        touches_lower=breakdown.touches_lower,
                        score=breakdown.score,
                    )

        return best
