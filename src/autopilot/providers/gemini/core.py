from typing import Any, Optional

from google import genai
from google.genai import types
from google.genai.client import AsyncClient

from autopilot.agent_core.base import AIClient, ChatRequest, ChatResponse
from autopilot.agent_core.exceptions import MissingCredentialError
from autopilot.agent_core.logger import get_logger
from .adapter import GeminiAdapter

logger = get_logger(__name__)

DEFAULT_GEMINI_MODEL = "gemini-2.0-flash"


class GeminiClient(AIClient):
    """
    AIClient implementation for Google's Gemini models.
    The system prompt is passed as ``system_instruction`` and the whole conversation is
    sent with every round; no server-side chat session is kept.
    """

    provider = "gemini"

    def __init__(
        self,
        model: str = DEFAULT_GEMINI_MODEL,
        aclient: Optional[AsyncClient] = None,
        api_key: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        max_retries: int = 0,
        base_retry_delay: float = 1.0,
    ):
        """
        Initializes the Gemini client wrapper.

        Args:
            model: The identifier for the Gemini model to use (e.g., 'gemini-2.0-flash').
            aclient: An initialized async Google GenAI client. Built from ``api_key`` when omitted.
            api_key: API key used when no client is passed.
            temperature: Sampling temperature. Provider default when None.
            max_tokens: Maximum number of output tokens. Provider default when None.
            max_retries: Retries of a failed request before the error propagates.
            base_retry_delay: Initial backoff delay in seconds.

        Raises:
            MissingCredentialError: If neither a client nor an API key is given.
        """
        super().__init__(model=model, max_retries=max_retries, base_retry_delay=base_retry_delay)
        if aclient is None:
            if not api_key:
                raise MissingCredentialError("Missing GOOGLE_API_KEY or GEMINI_API_KEY")
            aclient = genai.Client(api_key=api_key).aio
        self.client: AsyncClient = aclient
        self.temperature = temperature
        self.max_tokens = max_tokens

    async def _chat_impl(self, request: ChatRequest) -> ChatResponse:
        system_instruction, contents = GeminiAdapter.convert_messages(request.system_prompt, request.messages)
        tool = GeminiAdapter.convert_tools(request.tools)

        config = types.GenerateContentConfig(
            system_instruction=system_instruction or None,
            temperature=self.temperature,
            max_output_tokens=self.max_tokens,
            tools=[tool] if tool is not None else None,
        )

        logger.debug(f"Sending {len(contents)} content(s) to Gemini model '{self.model}'.")
        response: Any = await self.client.models.generate_content(
            model=self.model,
            contents=contents,  # type: ignore[arg-type]
            config=config,
        )
        return GeminiAdapter.parse_response(response)
