"""Expose the Anthropic client and its wire-format adapter."""

from .core import AnthropicClient, DEFAULT_ANTHROPIC_MODEL
from .adapter import AnthropicAdapter

__all__ = ["AnthropicClient", "AnthropicAdapter", "DEFAULT_ANTHROPIC_MODEL"]
