"""Shared fixtures: deterministic synthetic price histories."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from datetime import date, timedelta
from typing import Any

import numpy as np
import pytest

from channelscope.domain.services.channels.series import PriceSeries, prepare_series

START_DATE = date(2024, 1, 1)

RecordFactory = Callable[..., list[dict[str, Any]]]


def make_records(
    prices: Sequence[float], volumes: Sequence[float] | None = None
) -> list[dict[str, Any]]:
    """Daily records starting 2024-01-01."""
    if volumes is None:
        volumes = [1000.0] * len(prices)
    return [
        {"date": START_DATE + timedelta(days=i), "price": float(p), "volume": float(v)}
        for i, (p, v) in enumerate(zip(prices, volumes, strict=True))
    ]


def near_linear_prices(n: int = 200) -> np.ndarray:
    """Straight line with a deterministic ±0.001 wiggle."""
    i = np.arange(n, dtype=float)
    return 100.0 + 0.5 * i + 0.001 * np.where(i % 2 == 0, 1.0, -1.0)


def two_regime_prices(seed: int = 7) -> np.ndarray:
    """Up-trend for 100 points, then a down-trend for 100 points, with small noise."""
    rng = np.random.default_rng(seed)
    i = np.arange(200, dtype=float)
    trend = np.where(i < 100, 100.0 + 0.5 * i, 150.0 - 0.3 * (i - 100))
    return trend + rng.normal(0.0, 0.3, size=200)


def random_walk_prices(n: int = 300, seed: int = 42) -> np.ndarray:
    rng = np.random.default_rng(seed)
    return 100.0 + np.cumsum(rng.normal(0.0, 1.0, size=n))


@pytest.fixture
def records_factory() -> RecordFactory:
    return make_records


@pytest.fixture
def near_linear_series() -> PriceSeries:
    return prepare_series(make_records(near_linear_prices()))


@pytest.fixture
def two_regime_records() -> list[dict[str, Any]]:
    return make_records(two_regime_prices())


@pytest.fixture
def two_regime_series(two_regime_records: list[dict[str, Any]]) -> PriceSeries:
    return prepare_series(two_regime_records)


@pytest.fixture
def random_walk_series() -> PriceSeries:
    rng = np.random.default_rng(3)
    prices = random_walk_prices()
    volumes = rng.integers(1_000, 10_000, size=len(prices))
    return prepare_series(make_records(prices, volumes))
