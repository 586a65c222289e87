"""Price series domain models."""

import datetime as dt

from pydantic import Field, model_validator

from channelscope.domain.models.base import ValueObject


class PricePoint(ValueObject):
    """Value object representing one observation of a price history."""

    index: int = Field(default=0, ge=0, description="Position within the analysed series")
    date: dt.datetime | dt.date = Field(..., description="Observation date")
    price: float = Field(..., description="Closing price")
    volume: float = Field(default=0.0, ge=0, description="Traded volume")


class PriceRange(ValueObject):
    """Inclusive index bounds into a price series."""

    start: int = Field(..., ge=0, description="First index of the range")
    end: int = Field(..., ge=0, description="Last index of the range (inclusive)")

    @model_validator(mode="after")
    def _check_order(self) -> "PriceRange":
        if self.end < self.start:
            raise ValueError(f"Range end ({self.end}) precedes start ({self.start})")
        return self

    @property
    def length(self) -> int:
        return self.end - self.start + 1

    def __contains__(self, index: object) -> bool:
        return isinstance(index, int) and self.start <= index <= self.end
