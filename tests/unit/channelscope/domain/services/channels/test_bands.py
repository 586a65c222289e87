"""Unit tests for band generation and channel point materialization."""

import numpy as np
import pytest

from channelscope.domain.services.channels.bands import build_channel_points, generate_bands
from channelscope.domain.services.channels.series import PriceSeries


@pytest.mark.unit
class TestGenerateBands:
    def test_evenly_spaced_levels(self) -> None:
        bands = generate_bands(np.array([90.0]), np.array([110.0]), band_count=4)
        np.testing.assert_allclose(bands, [[95.0, 100.0, 105.0]])

    def test_shape_follows_points_and_band_count(self) -> None:
        lower = np.linspace(90.0, 95.0, 7)
        bands = generate_bands(lower, lower + 20.0, band_count=10)
        assert bands.shape == (7, 9)
        assert np.all(np.diff(bands, axis=1) > 0)

    def test_single_zone_has_no_levels(self) -> None:
        bands = generate_bands(np.array([1.0, 2.0]), np.array([3.0, 4.0]), band_count=1)
        assert bands.shape == (2, 0)

    def test_rejects_non_positive_band_count(self) -> None:
        with pytest.raises(ValueError):
            generate_bands(np.array([1.0]), np.array([2.0]), band_count=0)


@pytest.mark.unit
class TestBuildChannelPoints:
    def test_center_is_evaluated_relative_to_origin(
        self, near_linear_series: PriceSeries
    ) -> None:
        points = build_channel_points(
            near_linear_series,
            start=10,
            stop=15,
            origin=5,
            slope=2.0,
            intercept=100.0,
            half_width=3.0,
            band_count=6,
        )

        assert [p.index for p in points] == [10, 11, 12, 13, 14]
        assert points[0].center == pytest.approx(110.0)
        assert points[-1].center == pytest.approx(118.0)
        assert points[0].upper == pytest.approx(113.0)
        assert points[0].lower == pytest.approx(107.0)
        assert points[0].bands == pytest.approx((108.0, 109.0, 110.0, 111.0, 112.0))
        assert points[2].price == near_linear_series[12].price
        assert points[2].date == near_linear_series[12].date
