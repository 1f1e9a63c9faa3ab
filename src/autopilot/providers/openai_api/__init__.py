"""Expose the OpenAI client and its wire-format adapter."""

from .core import OpenAIClient, DEFAULT_OPENAI_MODEL
from .adapter import OpenAIAdapter

__all__ = ["OpenAIClient", "OpenAIAdapter", "DEFAULT_OPENAI_MODEL"]
