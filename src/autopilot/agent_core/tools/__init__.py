from .models import ToolDefinition, ToolSpec, ToolResult, ToolCallRecord
from .registry import ToolRegistry
from .schema import SchemaValidator

__all__ = [
    "ToolDefinition",
    "ToolSpec",
    "ToolResult",
    "ToolCallRecord",
    "ToolRegistry",
    "SchemaValidator",
]
