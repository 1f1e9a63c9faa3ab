"""Export the exception hierarchy used across setup, provider and tool paths."""

from .exceptions import (
    AutoPilotError,
    ConfigurationError,
    MissingCredentialError,
    LLMToolError,
    ToolRegistrationError,
    ToolNotFoundError,
    ToolExecutionError,
    ToolValidationError,
)

__all__ = [
    "AutoPilotError",
    "ConfigurationError",
    "MissingCredentialError",
    "LLMToolError",
    "ToolRegistrationError",
    "ToolNotFoundError",
    "ToolExecutionError",
    "ToolValidationError",
]
