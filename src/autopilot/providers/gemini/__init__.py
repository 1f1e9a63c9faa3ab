"""Gemini client implementation."""

from .core import GeminiClient, DEFAULT_GEMINI_MODEL
from .adapter import GeminiAdapter

__all__ = ["GeminiClient", "GeminiAdapter", "DEFAULT_GEMINI_MODEL"]
