"""Price series preparation and validation.

Everything entering the channel engine passes through here first. Malformed
input (empty series, non-numeric or non-finite prices, negative volumes,
mismatched array lengths) fails fast with ``InvalidSeriesError`` so the fitting
loops can assume clean numeric arrays.
"""

from __future__ import annotations

import datetime as dt
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

import numpy as np
import structlog
from pydantic import ValidationError

from channelscope.domain.exceptions import InvalidSeriesError
from channelscope.domain.models.price import PricePoint, PriceRange

logger = structlog.get_logger(__name__)


def _sort_key(value: dt.date) -> dt.datetime:
    if isinstance(value, dt.datetime):
        return value
    return dt.datetime.combine(value, dt.time.min)


class PriceSeries:
    """Chronologically ascending, validated price history.

    Holds the immutable ``PricePoint`` tuple alongside numpy arrays of prices
    and volumes so slices can be fitted without re-reading the models.

    Build instances with ``prepare_series`` or ``from_arrays``. The constructor
    only checks that points are already ascending with ``index`` equal to
    position, it does not sort or re-index.
    """

    def __init__(self, points: Sequence[PricePoint]) -> None:
        if not points:
            raise InvalidSeriesError("Price series is empty")
        for position, point in enumerate(points):
            if point.index != position:
                raise InvalidSeriesError(
                    f"Point {position}: index {point.index} does not match its position"
                )
            if position and _sort_key(point.date) < _sort_key(points[position - 1].date):
                raise InvalidSeriesError(f"Point {position}: dates are not ascending")
        self._points = tuple(points)
        self._prices = np.fromiter((p.price for p in self._points), dtype=float)
        self._volumes = np.fromiter((p.volume for p in self._points), dtype=float)
        self._prices.setflags(write=False)
        self._volumes.setflags(write=False)

    @classmethod
    def from_arrays(
        cls,
        dates: Sequence[dt.date],
        prices: Sequence[float],
        volumes: Sequence[float] | None = None,
    ) -> PriceSeries:
        """Build a series from parallel arrays.

        Raises:
            InvalidSeriesError: If the arrays differ in length or hold invalid values
        """
        if volumes is None:
            volumes = [0.0] * len(prices)
        if not len(dates) == len(prices) == len(volumes):
            raise InvalidSeriesError(
                f"Mismatched array lengths: dates={len(dates)}, prices={len(prices)}, "
                f"volumes={len(volumes)}"
            )
        records = [
            {"date": d, "price": p, "volume": v}
            for d, p, v in zip(dates, prices, volumes, strict=True)
        ]
        return prepare_series(records)

    @property
    def points(self) -> tuple[PricePoint, ...]:
        return self._points

    @property
    def prices(self) -> np.ndarray:
        return self._prices

    @property
    def volumes(self) -> np.ndarray:
        return self._volumes

    @property
    def full_range(self) -> PriceRange:
        return PriceRange(start=0, end=len(self._points) - 1)

    def window(self, start: int, stop: int) -> np.ndarray:
        """Prices for positions ``start`` (inclusive) to ``stop`` (exclusive)."""
        return self._prices[start:stop]

    def __len__(self) -> int:
        return len(self._points)

    def __getitem__(self, index: int) -> PricePoint:
        return self._points[index]


def _coerce_point(position: int, record: PricePoint | Mapping[str, Any]) -> PricePoint:
    if isinstance(record, PricePoint):
        return record
    if not isinstance(record, Mapping):
        raise InvalidSeriesError(
            f"Point {position}: expected a PricePoint or mapping, got {type(record).__name__}"
        )
    try:
        return PricePoint.model_validate(record)
    except ValidationError as e:
        fields = ", ".join(".".join(str(loc) for loc in err["loc"]) for err in e.errors())
        raise InvalidSeriesError(f"Point {position}: invalid value for {fields}") from e


def prepare_series(
    records: PriceSeries | Iterable[PricePoint | Mapping[str, Any]],
) -> PriceSeries:
    """Validate price records and normalize them to an ascending, re-indexed series.

    Args:
        records: ``PricePoint`` instances or mappings with ``date``, ``price`` and
                 optional ``volume`` keys, in ascending or descending date order

    Returns:
        Series sorted ascending by date with ``index`` equal to each point's position

    Raises:
        InvalidSeriesError: If the series is empty or any record is malformed
    """
    if isinstance(records, PriceSeries):
        return records

    points = [_coerce_point(i, record) for i, record in enumerate(records)]
    if not points:
        raise InvalidSeriesError("Price series is empty")

    try:
        ordered = sorted(points, key=lambda p: _sort_key(p.date))
    except TypeError as e:
        raise InvalidSeriesError(f"Dates are not mutually comparable: {e}") from e

    if len(points) > 1 and ordered[0] is points[-1]:
        logger.debug("Normalized descending price series", data_points=len(points))

    reindexed = [
        point if point.index == i else point.model_copy(update={"index": i})
        for i, point in enumerate(ordered)
    ]
    return PriceSeries(reindexed)
