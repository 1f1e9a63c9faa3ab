from typing import Any, Dict, Iterable, Optional, cast

from openai import AsyncOpenAI

from autopilot.agent_core.base import AIClient, ChatRequest, ChatResponse
from autopilot.agent_core.exceptions import MissingCredentialError
from autopilot.agent_core.logger import get_logger
from .adapter import OpenAIAdapter

logger = get_logger(__name__)

DEFAULT_OPENAI_MODEL = "gpt-4o"


class OpenAIClient(AIClient):
    """
    AIClient implementation for OpenAI's chat completions API.
    The system prompt travels as the first message and tool results as ``tool`` role messages.
    """

    provider = "openai"

    def __init__(
        self,
        model: str = DEFAULT_OPENAI_MODEL,
        client: Optional[AsyncOpenAI] = None,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        max_retries: int = 0,
        base_retry_delay: float = 1.0,
    ):
        """
        Initializes the OpenAI client wrapper.

        Args:
            model: The identifier for the OpenAI model to use (e.g., 'gpt-4o').
            client: An initialized AsyncOpenAI client. Built from ``api_key`` when omitted.
            api_key: API key used when no client is passed.
            base_url: Optional endpoint for OpenAI-compatible servers.
            temperature: Sampling temperature. Provider default when None.
            max_tokens: Maximum number of tokens to generate. Provider default when None.
            max_retries: Retries of a failed request before the error propagates.
            base_retry_delay: Initial backoff delay in seconds.

        Raises:
            MissingCredentialError: If neither a client nor an API key is given.
        """
        super().__init__(model=model, max_retries=max_retries, base_retry_delay=base_retry_delay)
        if client is None:
            if not api_key:
                raise MissingCredentialError("Missing OPENAI_API_KEY")
            client = AsyncOpenAI(api_key=api_key, base_url=base_url)
        self.client: AsyncOpenAI = client
        self.temperature = temperature
        self.max_tokens = max_tokens

    async def _chat_impl(self, request: ChatRequest) -> ChatResponse:
        messages = OpenAIAdapter.convert_messages(request.system_prompt, request.messages)
        kwargs: Dict[str, Any] = {"model": self.model, "messages": cast(Iterable[Any], messages)}

        # An empty tools list is rejected by the API
        if request.tools:
            kwargs["tools"] = OpenAIAdapter.convert_tools(request.tools)
        if self.temperature is not None:
            kwargs["temperature"] = self.temperature
        if self.max_tokens is not None:
            kwargs["max_tokens"] = self.max_tokens

        logger.debug(f"Sending {len(messages)} message(s) to OpenAI model '{self.model}'.")
        response = await self.client.chat.completions.create(**kwargs)
        return OpenAIAdapter.parse_response(response)
