"""Expose provider-agnostic message model types shared by the loop and the provider clients."""

from .models import (
    Message,
    SystemMessage,
    UserMessage,
    AssistantMessage,
    ToolMessage,
    ToolCall,
    ToolResultEntry,
)

__all__ = [
    "Message",
    "SystemMessage",
    "UserMessage",
    "AssistantMessage",
    "ToolMessage",
    "ToolCall",
    "ToolResultEntry",
]
