"""Tool-related data models."""

from .models import ToolDefinition, ToolSpec, ToolResult, ToolCallRecord

__all__ = ["ToolDefinition", "ToolSpec", "ToolResult", "ToolCallRecord"]
