"""Tool result data models."""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class ToolResult(BaseModel, Generic[T]):
    """Outcome of a tool execution; failures are reported, never raised."""

    success: bool = Field(..., description="Whether tool execution succeeded")
    data: T | None = Field(default=None, description="Tool payload")
    error: str | None = Field(default=None, description="Error message if execution failed")
    metadata: dict[str, Any] = Field(default_factory=dict, description="Additional metadata")
