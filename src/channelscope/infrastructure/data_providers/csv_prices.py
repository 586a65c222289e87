"""Price history loaded from CSV files."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pandas as pd  # type: ignore[import-untyped]
import structlog

from channelscope.domain.exceptions import InvalidSeriesError

logger = structlog.get_logger(__name__)


def load_price_csv(
    path: str | Path,
    date_column: str = "date",
    price_column: str = "close",
    volume_column: str | None = "volume",
) -> list[dict[str, Any]]:
    """Read price records from a CSV file.

    Column names are matched case-insensitively. Rows with a missing date or
    price are dropped; a missing volume column yields zero volume.

    Args:
        path: CSV file path
        date_column: Column holding dates (anything ``pandas.to_datetime`` parses)
        price_column: Column holding prices
        volume_column: Column holding traded volume, or None to ignore volume

    Returns:
        Records with ``date``, ``price`` and ``volume`` keys in file order

    Raises:
        InvalidSeriesError: If a required column is missing or dates do not parse
    """
    df = pd.read_csv(path)
    columns = {str(c).strip().lower(): c for c in df.columns}

    def resolve(name: str) -> Any:
        return columns.get(name.strip().lower())

    date_col = resolve(date_column)
    price_col = resolve(price_column)
    if date_col is None or price_col is None:
        missing = [n for n, c in ((date_column, date_col), (price_column, price_col)) if c is None]
        raise InvalidSeriesError(
            f"CSV {path} is missing column(s): {', '.join(missing)} "
            f"(available: {', '.join(map(str, df.columns))})"
        )
    volume_col = resolve(volume_column) if volume_column else None

    rows = len(df)
    df = df.dropna(subset=[date_col, price_col])
    if len(df) < rows:
        logger.warning("Dropped incomplete CSV rows", path=str(path), dropped=rows - len(df))

    try:
        dates = pd.to_datetime(df[date_col])
    except (ValueError, TypeError) as e:
        raise InvalidSeriesError(f"CSV {path}: unparseable dates in column {date_col}") from e

    prices = pd.to_numeric(df[price_col], errors="coerce")
    volumes = (
        pd.to_numeric(df[volume_col], errors="coerce").fillna(0.0)
        if volume_col is not None
        else pd.Series(0.0, index=df.index)
    )

    records = [
        {"date": date.to_pydatetime(), "price": float(price), "volume": float(volume)}
        for date, price, volume in zip(dates, prices, volumes, strict=True)
    ]
    logger.debug("Loaded price CSV", path=str(path), rows=len(records))
    return records
