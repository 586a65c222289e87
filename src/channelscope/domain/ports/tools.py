"""Tool interface for analysis capabilities exposed to callers and agents."""

from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel, Field

from channelscope.domain.models.tool_results import ToolResult

__all__ = ["Tool", "ToolResult", "ToolSchema"]


class ToolSchema(BaseModel):
    """JSON-schema style description of a tool's parameters and return value."""

    name: str = Field(..., description="Tool name")
    description: str = Field(..., description="What the tool does")
    parameters: dict[str, Any] = Field(default_factory=dict, description="Parameter schema")
    returns: dict[str, Any] = Field(default_factory=dict, description="Return value schema")


class Tool(ABC):
    """Abstract tool with a name, a schema and an async ``execute``."""

    @abstractmethod
    def get_name(self) -> str:
        """Get tool name."""

    @abstractmethod
    def get_description(self) -> str:
        """Get tool description."""

    @abstractmethod
    def get_schema(self) -> ToolSchema:
        """Get tool schema."""

    @abstractmethod
    async def execute(self, **kwargs: Any) -> ToolResult:
        """Execute the tool with the given parameters."""

    def validate_parameters(self, **kwargs: Any) -> dict[str, Any]:
        """Check required parameters and fill in schema defaults.

        Args:
            **kwargs: Parameters passed by the caller

        Returns:
            Parameters with defaults applied for anything not provided

        Raises:
            ValueError: If a required parameter is missing or an unknown one is given
        """
        schema = self.get_schema().parameters
        properties: dict[str, Any] = schema.get("properties", {})
        missing = [name for name in schema.get("required", []) if kwargs.get(name) is None]
        if missing:
            raise ValueError(f"Missing required parameter(s): {', '.join(missing)}")

        unknown = sorted(set(kwargs) - set(properties))
        if unknown:
            raise ValueError(f"Unknown parameter(s): {', '.join(unknown)}")

        validated = {
            name: prop["default"]
            for name, prop in properties.items()
            if "default" in prop and kwargs.get(name) is None
        }
        validated.update({name: value for name, value in kwargs.items() if value is not None})
        return validated
