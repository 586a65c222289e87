"""Price history sources."""

from channelscope.infrastructure.data_providers.csv_prices import load_price_csv

__all__ = ["load_price_csv"]
