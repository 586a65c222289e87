"""Base classes for domain models."""

from pydantic import BaseModel, ConfigDict


class ValueObject(BaseModel):
    """Immutable value object compared by its field values."""

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)
