"""Regression-channel detection engine.

Fits linear-regression channels to price series, either one channel with
caller-chosen parameters or a greedy partition of the whole history into
several scored channels.
"""

from channelscope.domain.services.channels.bands import build_channel_points, generate_bands
from channelscope.domain.services.channels.regression import RegressionFit, fit_regression
from channelscope.domain.services.channels.scoring import (
    MULTIPLIER_TRIALS,
    ChannelScorer,
    MultiplierOptimizer,
    ScoreBreakdown,
    edges_fit,
)
from channelscope.domain.services.channels.search import CandidateSearch, ClaimedIndexSet
from channelscope.domain.services.channels.selector import (
    GreedyMultiChannelSelector,
    SelectorState,
    detect_channels,
)
from channelscope.domain.services.channels.series import PriceSeries, prepare_series
from channelscope.domain.services.channels.single import (
    align_trend_channel,
    build_trend_channel,
    touch_sma_period,
)
from channelscope.domain.services.channels.volume import (
    channel_confluence,
    volume_profile,
    zone_volume_distribution,
)

__all__ = [
    "PriceSeries",
    "prepare_series",
    "RegressionFit",
    "fit_regression",
    "MULTIPLIER_TRIALS",
    "ChannelScorer",
    "MultiplierOptimizer",
    "ScoreBreakdown",
    "edges_fit",
    "CandidateSearch",
    "ClaimedIndexSet",
    "GreedyMultiChannelSelector",
    "SelectorState",
    "detect_channels",
    "generate_bands",
    "build_channel_points",
    # Single-channel mode
    "build_trend_channel",
    "align_trend_channel",
    "touch_sma_period",
    # Volume analysis
    "zone_volume_distribution",
    "volume_profile",
    "channel_confluence",
]
