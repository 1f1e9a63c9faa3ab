from typing import Any, Dict, Optional

from anthropic import AsyncAnthropic

from autopilot.agent_core.base import AIClient, ChatRequest, ChatResponse
from autopilot.agent_core.exceptions import MissingCredentialError
from autopilot.agent_core.logger import get_logger
from .adapter import AnthropicAdapter

logger = get_logger(__name__)

DEFAULT_ANTHROPIC_MODEL = "claude-sonnet-4-20250514"


class AnthropicClient(AIClient):
    """
    AIClient implementation for Anthropic's Messages API.
    The system prompt goes into the dedicated ``system`` field.
    """

    provider = "anthropic"

    def __init__(
        self,
        model: str = DEFAULT_ANTHROPIC_MODEL,
        client: Optional[AsyncAnthropic] = None,
        api_key: Optional[str] = None,
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
        max_retries: int = 0,
        base_retry_delay: float = 1.0,
    ):
        """
        Initializes the Anthropic client wrapper.

        Args:
            model: The Claude model identifier.
            client: An initialized AsyncAnthropic client. Built from ``api_key`` when omitted.
            api_key: API key used when no client is passed.
            max_tokens: Output token limit. Defaults to 16384 for opus models, 8192 otherwise.
            temperature: Sampling temperature. Provider default when None.
            max_retries: Retries of a failed request before the error propagates.
            base_retry_delay: Initial backoff delay in seconds.

        Raises:
            MissingCredentialError: If neither a client nor an API key is given.
        """
        super().__init__(model=model, max_retries=max_retries, base_retry_delay=base_retry_delay)
        if client is None:
            if not api_key:
                raise MissingCredentialError("Missing ANTHROPIC_API_KEY")
            client = AsyncAnthropic(api_key=api_key)
        self.client: AsyncAnthropic = client
        self.max_tokens = max_tokens or (16384 if "opus" in model else 8192)
        self.temperature = temperature

    async def _chat_impl(self, request: ChatRequest) -> ChatResponse:
        system, messages = AnthropicAdapter.convert_messages(request.system_prompt, request.messages)
        kwargs: Dict[str, Any] = {"model": self.model, "max_tokens": self.max_tokens, "messages": messages}
        if system:
            kwargs["system"] = system
        if request.tools:
            kwargs["tools"] = AnthropicAdapter.convert_tools(request.tools)
        if self.temperature is not None:
            kwargs["temperature"] = self.temperature

        logger.debug(f"Sending {len(messages)} message(s) to Anthropic model '{self.model}'.")
        response = await self.client.messages.create(**kwargs)
        return AnthropicAdapter.parse_response(response)
