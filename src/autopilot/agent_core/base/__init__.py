"""Re-export the provider client interface and the canonical request/response models."""

from .base import AIClient, ChatRequest, ChatResponse, Usage

__all__ = [
    "AIClient",
    "ChatRequest",
    "ChatResponse",
    "Usage",
]
