"""Unit tests for channel and price domain models."""

from datetime import date

import pytest
from pydantic import ValidationError

from channelscope.domain.models import (
    Channel,
    ChannelCandidate,
    ChannelDetectionConfig,
    ChannelPoint,
    PricePoint,
    PriceRange,
    TrendChannelAlignment,
    TrendChannelConfig,
)


def _candidate(**overrides: object) -> ChannelCandidate:
    values: dict[str, object] = {
        "start_idx": 10,
        "end_idx": 59,
        "lookback": 50,
        "slope": 0.5,
        "intercept": 100.0,
        "std_dev": 1.2,
        "multiplier": 2.0,
        "coverage": 0.96,
        "center_proximity": 1.0,
        "touches_upper": True,
        "touches_lower": False,
        "score": 0.61,
    }
    values.update(overrides)
    return ChannelCandidate.model_validate(values)


@pytest.mark.unit
class TestPriceModels:
    def test_price_point_rejects_non_finite_price(self) -> None:
        with pytest.raises(ValidationError):
            PricePoint(date=date(2024, 1, 1), price=float("nan"))

    def test_price_point_rejects_negative_volume(self) -> None:
        with pytest.raises(ValidationError):
            PricePoint(date=date(2024, 1, 1), price=10.0, volume=-1.0)

    def test_price_point_is_frozen(self) -> None:
        point = PricePoint(date=date(2024, 1, 1), price=10.0)
        with pytest.raises(ValidationError):
            point.price = 11.0  # type: ignore[misc]

    def test_price_range_length_and_membership(self) -> None:
        price_range = PriceRange(start=5, end=14)
        assert price_range.length == 10
        assert 5 in price_range
        assert 14 in price_range
        assert 15 not in price_range

    def test_price_range_rejects_inverted_bounds(self) -> None:
        with pytest.raises(ValidationError):
            PriceRange(start=10, end=9)


@pytest.mark.unit
class TestChannelModels:
    def test_candidate_multiplier_bounds(self) -> None:
        with pytest.raises(ValidationError):
            _candidate(multiplier=0.5)
        with pytest.raises(ValidationError):
            _candidate(multiplier=4.5)

    def test_channel_from_candidate_copies_scoring(self) -> None:
        candidate = _candidate()
        point = ChannelPoint(
            index=10,
            date=date(2024, 1, 11),
            price=100.0,
            center=100.0,
            upper=102.4,
            lower=97.6,
        )
        channel = Channel.from_candidate(candidate, (point,), band_count=10)

        assert channel.start_idx == 10
        assert channel.end_idx == 59
        assert channel.length == 50
        assert channel.score == pytest.approx(0.61)
        assert channel.touches_upper is True
        assert channel.width == pytest.approx(4.8)
        assert "points" not in channel.summary()

    def test_channel_rejects_end_before_start(self) -> None:
        with pytest.raises(ValidationError):
            Channel(
                start_idx=10,
                end_idx=5,
                lookback=6,
                slope=0.0,
                intercept=1.0,
                std_dev=1.0,
                multiplier=2.0,
            )

    def test_channel_point_boundaries(self) -> None:
        point = ChannelPoint(
            index=0,
            date=date(2024, 1, 1),
            price=10.0,
            center=10.0,
            upper=12.0,
            lower=8.0,
            bands=(9.0, 10.0, 11.0),
        )
        assert point.boundaries == (8.0, 9.0, 10.0, 11.0, 12.0)


@pytest.mark.unit
class TestDetectionConfig:
    def test_defaults(self) -> None:
        config = ChannelDetectionConfig()
        assert config.min_ratio == 0.05
        assert config.max_ratio == 0.5
        assert config.starting_multiplier == 2.0
        assert config.max_channels == 10
        assert config.band_count == 10

    def test_min_ratio_must_not_exceed_max_ratio(self) -> None:
        with pytest.raises(ValidationError):
            ChannelDetectionConfig(min_ratio=0.6, max_ratio=0.5)

    def test_hard_limits_cannot_be_loosened(self) -> None:
        with pytest.raises(ValidationError):
            ChannelDetectionConfig(max_channels=11)
        with pytest.raises(ValidationError):
            ChannelDetectionConfig(score_floor=0.1)
        with pytest.raises(ValidationError):
            ChannelDetectionConfig(min_center_proximity=0.5)

    def test_starting_multiplier_range(self) -> None:
        with pytest.raises(ValidationError):
            ChannelDetectionConfig(starting_multiplier=5.0)


@pytest.mark.unit
class TestTrendChannelModels:
    def test_trend_config_rejects_non_positive_multiplier(self) -> None:
        with pytest.raises(ValidationError):
            TrendChannelConfig(multiplier=0)

    def test_alignment_to_config(self) -> None:
        alignment = TrendChannelAlignment(
            intercept_shift=0.4,
            optimal_multiplier=2.7,
            touches_upper=True,
            touches_lower=False,
            coverage_count=60,
            total_points=60,
            std_dev=1.5,
            slope=0.1,
            base_intercept=100.0,
            extreme_magnitude=4.05,
        )
        config = alignment.to_config(end_at=5)

        assert config.lookback == 60
        assert config.multiplier == pytest.approx(2.7)
        assert config.intercept_shift == pytest.approx(0.4)
        assert config.end_at == 5

    def test_alignment_to_config_falls_back_for_zero_multiplier(self) -> None:
        alignment = TrendChannelAlignment(
            intercept_shift=0.0,
            optimal_multiplier=0.0,
            touches_upper=True,
            touches_lower=True,
            coverage_count=5,
            total_points=5,
            std_dev=0.0,
            slope=0.0,
            base_intercept=10.0,
            extreme_magnitude=0.0,
        )
        assert alignment.to_config().multiplier == 1.0
