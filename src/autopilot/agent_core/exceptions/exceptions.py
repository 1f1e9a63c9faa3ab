"""
Custom exception classes for the agent.

This module defines the hierarchy of exceptions raised during setup (configuration,
provider selection, credentials) and during tool discovery, registration, validation
and execution. Tool execution errors are normally absorbed by the registry and never
reach the decision loop.
"""


class AutoPilotError(Exception):
    """Base exception for all errors raised by the agent."""

    pass


class ConfigurationError(AutoPilotError):
    """Raised for setup mistakes such as an unknown provider or an unreadable config file."""

    pass


class MissingCredentialError(ConfigurationError):
    """Raised when a provider is selected but no API key can be found for it."""

    pass


class LLMToolError(AutoPilotError):
    """Base exception for all tool-related errors."""

    pass


class ToolRegistrationError(LLMToolError):
    """Raised when there is an error registering a tool."""

    pass


class ToolNotFoundError(LLMToolError):
    """Raised when a requested tool is not found in the registry."""

    pass


class ToolExecutionError(LLMToolError):
    """Raised when a tool fails during execution."""

    pass


class ToolValidationError(LLMToolError):
    """Raised when tool parameters or definition are invalid."""

    pass
