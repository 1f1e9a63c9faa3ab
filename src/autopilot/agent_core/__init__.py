"""Provider-agnostic core: messages, tools, the client interface and the decision loop."""

from .agent import AgentLoop, AgentRunParams, AgentRunResult, DEFAULT_MAX_ROUNDS, ROUND_LIMIT_REPLY
from .base import AIClient, ChatRequest, ChatResponse, Usage
from .exceptions import (
    AutoPilotError,
    ConfigurationError,
    MissingCredentialError,
    LLMToolError,
    ToolExecutionError,
    ToolNotFoundError,
    ToolRegistrationError,
    ToolValidationError,
)
from .logger import get_logger, setup_logging
from .system_prompt import build_system_prompt
from .tools import ToolCallRecord, ToolDefinition, ToolRegistry, ToolResult, ToolSpec

__all__ = [
    "AgentLoop",
    "AgentRunParams",
    "AgentRunResult",
    "DEFAULT_MAX_ROUNDS",
    "ROUND_LIMIT_REPLY",
    "AIClient",
    "ChatRequest",
    "ChatResponse",
    "Usage",
    "AutoPilotError",
    "ConfigurationError",
    "MissingCredentialError",
    "LLMToolError",
    "ToolExecutionError",
    "ToolNotFoundError",
    "ToolRegistrationError",
    "ToolValidationError",
    "get_logger",
    "setup_logging",
    "build_system_prompt",
    "ToolCallRecord",
    "ToolDefinition",
    "ToolRegistry",
    "ToolResult",
    "ToolSpec",
]
