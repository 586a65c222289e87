"""Unit tests for regression channel tools."""

from __future__ import annotations

from typing import Any

import pytest

from channelscope.infrastructure.config import Settings
from channelscope.infrastructure.tools.analysis.channels import (
    AlignTrendChannelTool,
    DetectChannelsTool,
    TrendChannelTool,
    create_channel_tools,
)


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None, trend_lookback=50)


@pytest.mark.unit
class TestDetectChannelsTool:
    def test_schema(self, settings: Settings) -> None:
        tool = DetectChannelsTool(settings)
        schema = tool.get_schema()

        assert tool.get_name() == "detect_regression_channels"
        assert schema.name == "detect_regression_channels"
        assert schema.parameters["required"] == ["series"]
        assert "min_ratio" in schema.parameters["properties"]

    @pytest.mark.asyncio
    async def test_detects_two_regimes(
        self, settings: Settings, two_regime_records: list[dict[str, Any]]
    ) -> None:
        result = await DetectChannelsTool(settings).execute(
            series=two_regime_records, min_ratio=0.3, include_volume_distribution=True
        )

        assert result.success is True
        assert result.data is not None
        assert result.data["data_points"] == 200
        assert result.data["channel_count"] == 2
        assert result.metadata["channel_count"] == 2
        first, second = result.data["channels"]
        assert first["start_idx"] < second["start_idx"]
        assert len(first["points"]) == first["length"]
        assert isinstance(first["points"][0]["date"], str)
        assert sum(first["zone_volume_distribution"].values()) == pytest.approx(100.0)

    @pytest.mark.asyncio
    async def test_summary_without_points(
        self, settings: Settings, two_regime_records: list[dict[str, Any]]
    ) -> None:
        result = await DetectChannelsTool(settings).execute(
            series=two_regime_records, min_ratio=0.3, include_points=False
        )

        assert result.success is True
        assert result.data is not None
        assert all("points" not in c for c in result.data["channels"])

    @pytest.mark.asyncio
    async def test_short_series_is_not_an_error(self, settings: Settings) -> None:
        records = [{"date": f"2024-01-0{d}", "price": 10.0 + d} for d in range(1, 6)]
        result = await DetectChannelsTool(settings).execute(series=records)

        assert result.success is True
        assert result.data is not None
        assert result.data["channels"] == []

    @pytest.mark.asyncio
    async def test_missing_series_fails(self, settings: Settings) -> None:
        result = await DetectChannelsTool(settings).execute()

        assert result.success is False
        assert result.error is not None
        assert "series" in result.error

    @pytest.mark.asyncio
    async def test_unknown_parameter_fails(
        self, settings: Settings, two_regime_records: list[dict[str, Any]]
    ) -> None:
        result = await DetectChannelsTool(settings).execute(
            series=two_regime_records, symbol="AAPL"
        )

        assert result.success is False
        assert result.error is not None
        assert "symbol" in result.error

    @pytest.mark.asyncio
    async def test_malformed_series_fails(self, settings: Settings) -> None:
        records = [{"date": "2024-01-01", "price": "n/a"}]
        result = await DetectChannelsTool(settings).execute(series=records)

        assert result.success is False
        assert result.error is not None
        assert "Point 0" in result.error

    @pytest.mark.asyncio
    async def test_invalid_config_fails(
        self, settings: Settings, two_regime_records: list[dict[str, Any]]
    ) -> None:
        result = await DetectChannelsTool(settings).execute(
            series=two_regime_records, min_ratio=0.6, max_ratio=0.2
        )
        assert result.success is False


@pytest.mark.unit
class TestTrendChannelTool:
    @pytest.mark.asyncio
    async def test_uses_settings_lookback(
        self, settings: Settings, two_regime_records: list[dict[str, Any]]
    ) -> None:
        result = await TrendChannelTool(settings).execute(series=two_regime_records)

        assert result.success is True
        assert result.data is not None
        channel = result.data["channel"]
        assert channel["lookback"] == 50
        assert channel["start_idx"] == 150
        assert len(channel["points"]) == 50
        assert result.data["alignment"] is None

    @pytest.mark.asyncio
    async def test_align_sets_shift_and_multiplier(
        self, settings: Settings, two_regime_records: list[dict[str, Any]]
    ) -> None:
        result = await TrendChannelTool(settings).execute(
            series=two_regime_records, lookback=80, align=True, include_confluence=True
        )

        assert result.success is True
        assert result.data is not None
        alignment = result.data["alignment"]
        channel = result.data["channel"]
        assert alignment["total_points"] == 80
        assert channel["multiplier"] == pytest.approx(alignment["optimal_multiplier"])
        assert channel["intercept_shift"] == pytest.approx(alignment["intercept_shift"])
        assert len(result.data["confluence"]) == 80
        assert {c["upper_state"] for c in result.data["confluence"]} <= {
            "strong",
            "weak",
            "neutral",
        }

    @pytest.mark.asyncio
    async def test_single_point_fails(self, settings: Settings) -> None:
        result = await TrendChannelTool(settings).execute(
            series=[{"date": "2024-01-01", "price": 10.0}]
        )

        assert result.success is False
        assert result.error is not None
        assert "Insufficient data" in result.error


@pytest.mark.unit
class TestAlignTrendChannelTool:
    @pytest.mark.asyncio
    async def test_chart_period_selects_sma(
        self, settings: Settings, two_regime_records: list[dict[str, Any]]
    ) -> None:
        result = await AlignTrendChannelTool(settings).execute(
            series=two_regime_records, chart_period="3M"
        )

        assert result.success is True
        assert result.metadata["sma_period"] == 5
        assert result.data is not None
        assert result.data["total_points"] == 50
        assert result.data["coverage_count"] == 50

    @pytest.mark.asyncio
    async def test_explicit_sma_period_wins(
        self, settings: Settings, two_regime_records: list[dict[str, Any]]
    ) -> None:
        result = await AlignTrendChannelTool(settings).execute(
            series=two_regime_records, chart_period="3M", sma_period=2
        )
        assert result.metadata["sma_period"] == 2


@pytest.mark.unit
class TestCreateChannelTools:
    def test_creates_all_tools(self, settings: Settings) -> None:
        tools = create_channel_tools(settings)
        assert [t.get_name() for t in tools] == [
            "detect_regression_channels",
            "build_trend_channel",
            "align_trend_channel",
        ]
