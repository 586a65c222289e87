"""Greedy partitioning of a price history into non-overlapping channels.

The selector works through a list of open index ranges, starting with the
whole series. Each round it searches every open range, commits the single
best channel found, claims the channel's interior and splits the range it
came from into the segments before and after the channel. Long, well-fit
channels are therefore committed first and smaller regimes are backfilled
around them. The run stops at the channel cap, when no open range remains or
when the best candidate scores below the floor.

    SEARCHING ──candidate ≥ floor──▶ COMMITTING ──▶ SPLITTING ──▶ SEARCHING
        │
        └──cap reached / no ranges / no candidate / score < floor──▶ DONE
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Mapping
from enum import Enum
from typing import Any

import structlog

from channelscope.domain.models.channel import Channel, ChannelCandidate, ChannelDetectionConfig
from channelscope.domain.models.price import PricePoint, PriceRange
from channelscope.domain.services.channels.bands import build_channel_points
from channelscope.domain.services.channels.search import CandidateSearch, ClaimedIndexSet
from channelscope.domain.services.channels.series import PriceSeries, prepare_series

logger = structlog.get_logger(__name__)


class SelectorState(str, Enum):
    """States of one multi-channel detection run."""

    SEARCHING = "searching"
    COMMITTING = "committing"
    SPLITTING = "splitting"
    DONE = "done"


class GreedyMultiChannelSelector:
    """Detects up to ``max_channels`` non-overlapping regression channels."""

    def __init__(self, config: ChannelDetectionConfig | None = None) -> None:
        self._config = config or ChannelDetectionConfig()

    @property
    def config(self) -> ChannelDetectionConfig:
        return self._config

    def iter_channels(
        self, series: PriceSeries | Iterable[PricePoint | Mapping[str, Any]]
    ) -> Iterator[Channel]:
        """Yield channels one at a time, in commit order (best first).

        Each yield is a checkpoint: a caller that stops iterating abandons the
        remaining search without further work.

        Args:
            series: Price series (ascending or descending) or raw price records

        Yields:
            Committed channels with materialized bounds and bands
        """
        series = prepare_series(series)
        cfg = self._config
        search = CandidateSearch(series, cfg)
        claimed = ClaimedIndexSet(len(series))

        open_ranges: list[PriceRange] = [series.full_range]
        state = SelectorState.SEARCHING
        committed = 0
        # Candidate and the index of the open range it came from.
        pending: tuple[ChannelCandidate, int] | None = None

        while state is not SelectorState.DONE:
            if state is SelectorState.SEARCHING:
                pending = None
                if committed >= cfg.max_channels or not open_ranges:
                    state = SelectorState.DONE
                    continue

                best, best_range_idx = self._search_open_ranges(search, open_ranges, claimed)
                if best is None or best.score < cfg.score_floor:
                    logger.debug(
                        "Channel search exhausted",
                        committed=committed,
                        open_ranges=len(open_ranges),
                        best_score=best.score if best else None,
                    )
                    state = SelectorState.DONE
                else:
                    pending = (best, best_range_idx)
                    state = SelectorState.COMMITTING

            elif pending is None:
                state = SelectorState.DONE

            elif state is SelectorState.COMMITTING:
                channel = self._commit(series, pending[0], claimed)
                committed += 1
                state = SelectorState.SPLITTING
                yield channel

            elif state is SelectorState.SPLITTING:
                candidate, range_idx = pending
                open_ranges[range_idx : range_idx + 1] = self._split(
                    open_ranges[range_idx], candidate, search.min_points
                )
                state = SelectorState.SEARCHING

    def detect(
        self,
        series: PriceSeries | Iterable[PricePoint | Mapping[str, Any]],
        should_stop: Callable[[], bool] | None = None,
    ) -> list[Channel]:
        """Partition a price history into regression channels.

        Args:
            series: Price series (ascending or descending) or raw price records
            should_stop: Optional callback polled after each committed channel;
                         returning True abandons the remaining search

        Returns:
            Channels sorted by start index (possibly empty)
        """
        series = prepare_series(series)
        channels: list[Channel] = []
        for channel in self.iter_channels(series):
            channels.append(channel)
            if should_stop is not None and should_stop():
                logger.info("Channel detection stopped early", channels=len(channels))
                break

        channels.sort(key=lambda c: c.start_idx)
        logger.info("Channel detection finished", data_points=len(series), channels=len(channels))
        return channels

    @staticmethod
    def _search_open_ranges(
        search: CandidateSearch,
        open_ranges: list[PriceRange],
        claimed: ClaimedIndexSet,
    ) -> tuple[ChannelCandidate | None, int]:
        best: ChannelCandidate | None = None
        best_idx = -1
        for idx, price_range in enumerate(open_ranges):
            candidate = search.best_in_range(price_range, claimed)
            if candidate is not None and (best is None or candidate.score > best.score):
                best = candidate
                best_idx = idx
        return best, best_idx

    def _commit(
        self, series: PriceSeries, candidate: ChannelCandidate, claimed: ClaimedIndexSet
    ) -> Channel:
        """Materialize ``candidate`` and claim its interior, keeping a buffer at each edge."""
        channel = self._materialize(series, candidate)
        buffer = int(candidate.lookback * self._config.edge_buffer_ratio)
        claimed.claim(candidate.start_idx + buffer, candidate.end_idx - buffer)
        logger.debug(
            "Committed channel",
            start_idx=candidate.start_idx,
            end_idx=candidate.end_idx,
            multiplier=candidate.multiplier,
            score=round(candidate.score, 4),
        )
        return channel

    def _split(
        self, consumed: PriceRange, channel: ChannelCandidate, min_points: int
    ) -> list[PriceRange]:
        """Segments of ``consumed`` left open around ``channel``."""
        min_remaining = min_points * self._config.reopen_ratio
        remaining: list[PriceRange] = []
        if channel.start_idx - consumed.start >= min_remaining:
            remaining.append(PriceRange(start=consumed.start, end=channel.start_idx - 1))
        if consumed.end - channel.end_idx >= min_remaining:
            remaining.append(PriceRange(start=channel.end_idx + 1, end=consumed.end))
        return remaining

    def _materialize(self, series: PriceSeries, candidate: ChannelCandidate) -> Channel:
        band_count = self._config.band_count
        points = build_channel_points(
            series,
            start=candidate.start_idx,
            stop=candidate.end_idx + 1,
            origin=candidate.start_idx,
            slope=candidate.slope,
            intercept=candidate.intercept,
            half_width=candidate.multiplier * candidate.std_dev,
            band_count=band_count,
        )
        return Channel.from_candidate(candidate, points, band_count)


def detect_channels(
    series: PriceSeries | Iterable[PricePoint | Mapping[str, Any]],
    config: ChannelDetectionConfig | None = None,
) -> list[Channel]:
    """Detect regression channels with the given (or default) configuration."""
    return GreedyMultiChannelSelector(config).detect(series)
