"""Unit tests for the least-squares fit."""

import numpy as np
import pytest

from channelscope.domain.exceptions import InvalidSeriesError
from channelscope.domain.services.channels.regression import fit_regression


@pytest.mark.unit
class TestFitRegression:
    def test_exact_line_has_zero_std_dev(self) -> None:
        prices = 100.0 + 0.5 * np.arange(50, dtype=float)
        fit = fit_regression(prices)

        assert fit.slope == pytest.approx(0.5)
        assert fit.intercept == pytest.approx(100.0)
        assert fit.std_dev == 0.0
        assert fit.is_degenerate

    def test_floating_noise_is_not_rounded_to_zero(self) -> None:
        fit = fit_regression(100.3 + 0.1 * np.arange(200, dtype=float))

        assert fit.slope == pytest.approx(0.1)
        assert 0.0 < fit.std_dev < 1e-9
        assert not fit.is_degenerate

    def test_constant_series_is_degenerate(self) -> None:
        fit = fit_regression(np.full(30, 42.0))
        assert fit.slope == pytest.approx(0.0)
        assert fit.intercept == pytest.approx(42.0)
        assert fit.is_degenerate

    def test_std_dev_is_population_std_of_residuals(self) -> None:
        prices = np.array([1.0, 3.0, 2.0, 4.0, 3.0, 5.0])
        fit = fit_regression(prices)

        expected_slope, expected_intercept = np.polyfit(np.arange(6), prices, 1)
        residuals = prices - (expected_slope * np.arange(6) + expected_intercept)
        assert fit.slope == pytest.approx(expected_slope)
        assert fit.intercept == pytest.approx(expected_intercept)
        assert fit.std_dev == pytest.approx(float(np.std(residuals, ddof=0)))
        assert not fit.is_degenerate

    def test_two_points_fit_exactly(self) -> None:
        fit = fit_regression(np.array([10.0, 12.0]))
        assert fit.slope == pytest.approx(2.0)
        assert fit.intercept == pytest.approx(10.0)
        assert fit.is_degenerate

    def test_center_and_residuals(self) -> None:
        prices = np.array([1.0, 2.5, 3.0, 4.5])
        fit = fit_regression(prices)

        center = fit.center(4)
        assert center.shape == (4,)
        np.testing.assert_allclose(fit.residuals(prices), prices - center)
        assert fit.residuals(prices).sum() == pytest.approx(0.0, abs=1e-12)

    @pytest.mark.parametrize("prices", [np.array([]), np.array([5.0])])
    def test_fewer_than_two_points_raises(self, prices: np.ndarray) -> None:
        with pytest.raises(InvalidSeriesError):
            fit_regression(prices)
