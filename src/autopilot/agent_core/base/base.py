"""Core abstractions for LLM provider clients."""

import asyncio
from abc import ABC, abstractmethod
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..messages import Message, ToolCall
from ..tools.models import ToolSpec
from ..logger import get_logger

logger = get_logger(__name__)


class Usage(BaseModel):
    """Token accounting reported by a provider. Missing fields count as zero."""

    input_tokens: int = 0
    output_tokens: int = 0

    @property
    def total_tokens(self) -> int:
        return self.input_tokens + self.output_tokens

    def __add__(self, other: "Usage") -> "Usage":
        return Usage(
            input_tokens=self.input_tokens + other.input_tokens,
            output_tokens=self.output_tokens + other.output_tokens,
        )


class ChatRequest(BaseModel):
    """Canonical request for one model round.

    Attributes:
        system_prompt: Instructions for the model. Each provider places them where it expects.
        messages: The running conversation, oldest first.
        tools: Catalogue of tools the model may call.
    """

    system_prompt: str
    messages: List[Message] = Field(default_factory=list)
    tools: List[ToolSpec] = Field(default_factory=list)


class ChatResponse(BaseModel):
    """Normalized output of one model round.

    Attributes:
        text: Prose returned by the model, if any.
        tool_calls: Tool calls in the order the model emitted them.
        usage: Token accounting, if the provider reported it.
        raw: Provider-specific response payload for advanced use cases.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    text: Optional[str] = None
    tool_calls: List[ToolCall] = Field(default_factory=list)
    usage: Optional[Usage] = None
    raw: Any = Field(default=None, exclude=True, repr=False)

    @property
    def has_tool_calls(self) -> bool:
        return bool(self.tool_calls)


class AIClient(ABC):
    """Abstract base class for provider clients.

    A client is stateless per call: it turns one ``ChatRequest`` into a provider wire
    call and the provider reply back into a ``ChatResponse``. Transport and credential
    errors propagate to the caller.
    """

    provider: str = ""

    def __init__(self, model: str, max_retries: int = 0, base_retry_delay: float = 1.0):
        self.model = model
        self.max_retries = max_retries
        self.base_retry_delay = base_retry_delay

    async def chat(self, request: ChatRequest) -> ChatResponse:
        """
        Runs one model round.

        Args:
            request: System prompt, conversation and tool catalogue.

        Returns:
            The normalized model response.

        Raises:
            Exception: The last provider error once all retries are used up.
        """
        delay = self.base_retry_delay
        for attempt in range(self.max_retries + 1):
            try:
                return await self._chat_impl(request)
            except Exception as e:
                if attempt == self.max_retries:
                    raise

                logger.warning(f"API Error (Retry: {attempt + 1}/{self.max_retries}): {e}. Waiting {delay}s...")
                await asyncio.sleep(delay)
                delay *= 2  # Exponential backoff

        msg = f"Failed to get response after {self.max_retries} retries."
        logger.error(msg)
        raise TimeoutError(msg)

    @abstractmethod
    async def _chat_impl(self, request: ChatRequest) -> ChatResponse:
        pass
