"""Application settings loaded from environment variables."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from channelscope.domain.models.channel import ChannelDetectionConfig, TrendChannelConfig


class Settings(BaseSettings):
    """Channelscope settings (environment variables prefixed with ``CHANNELSCOPE_``)."""

    model_config = SettingsConfigDict(
        env_prefix="CHANNELSCOPE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Multi-channel detection
    min_ratio: float = Field(default=0.05, description="Min channel length / series")
    max_ratio: float = Field(default=0.50, description="Max channel length / series")
    starting_multiplier: float = Field(default=2.0, description="Preferred std dev multiplier")
    max_channels: int = Field(default=10, description="Cap on detected channels")

    # Single-channel mode
    trend_lookback: int = Field(default=120, description="Default trend channel lookback")
    trend_multiplier: float = Field(default=2.0, description="Default trend channel multiplier")
    trend_intercept_shift: float = Field(default=0.0, description="Default intercept shift")
    trend_end_at: int = Field(default=0, description="Default trailing points to hide")

    band_count: int = Field(default=10, description="Zones between lower and upper bound")

    # Logging
    log_level: str = Field(default="INFO", description="Log level name")
    log_json: bool = Field(default=False, description="Render logs as JSON lines")

    def detection_config(self, **overrides: object) -> ChannelDetectionConfig:
        """Multi-channel configuration from settings, with optional overrides."""
        values: dict[str, object] = {
            "min_ratio": self.min_ratio,
            "max_ratio": self.max_ratio,
            "starting_multiplier": self.starting_multiplier,
            "max_channels": self.max_channels,
            "band_count": self.band_count,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return ChannelDetectionConfig.model_validate(values)

    def trend_config(self, **overrides: object) -> TrendChannelConfig:
        """Single-channel configuration from settings, with optional overrides."""
        values: dict[str, object] = {
            "lookback": self.trend_lookback,
            "multiplier": self.trend_multiplier,
            "intercept_shift": self.trend_intercept_shift,
            "end_at": self.trend_end_at,
            "band_count": self.band_count,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return TrendChannelConfig.model_validate(values)


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()
