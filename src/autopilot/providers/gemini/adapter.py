"""Translate canonical requests and responses to and from Gemini ``Content`` objects."""

from typing import Any, List, Optional, Sequence, Tuple

from google.genai import types
from google.genai.types import GenerateContentResponse

from autopilot.agent_core.base import ChatResponse, Usage
from autopilot.agent_core.logger import get_logger
from autopilot.agent_core.messages import (
    AssistantMessage,
    Message,
    SystemMessage,
    ToolCall,
    ToolMessage,
    UserMessage,
)
from autopilot.agent_core.tools.models import ToolSpec
from .schema_sanitizer import sanitize

logger = get_logger(__name__)

# Prefix for ids made up locally when Gemini returns a function call without one
SYNTHETIC_ID_PREFIX = "gemini_call_"


class GeminiAdapter:
    """Stateless conversions between the canonical shapes and Gemini's types."""

    @staticmethod
    def convert_tools(tools: Sequence[ToolSpec]) -> Optional[types.Tool]:
        """
        Builds one ``types.Tool`` holding a function declaration per tool.

        Returns:
            The tool object, or None if there are no tools.
        """
        if not tools:
            return None

        declarations = []
        for tool in tools:
            if tool.parameters:
                declarations.append(
                    types.FunctionDeclaration(
                        name=tool.name,
                        description=tool.description,
                        parameters=sanitize(tool.parameters),  # type: ignore[arg-type]
                    )
                )
            else:
                declarations.append(types.FunctionDeclaration(name=tool.name, description=tool.description))
        return types.Tool(function_declarations=declarations)

    @staticmethod
    def convert_messages(system_prompt: str, messages: Sequence[Message]) -> Tuple[str, List[types.Content]]:
        """
        Converts the canonical conversation to Gemini contents.

        Gemini has no system role in the history; system text is returned separately for
        ``system_instruction``. Tool results travel as ``function_response`` parts of a
        single user-role content.

        Args:
            system_prompt: The base system prompt.
            messages: The canonical conversation.

        Returns:
            The combined system instruction and the list of contents.
        """
        system_parts = [system_prompt] if system_prompt else []
        contents: List[types.Content] = []

        for msg in messages:
            if isinstance(msg, SystemMessage):
                system_parts.append(msg.content)
            elif isinstance(msg, UserMessage):
                contents.append(types.Content(role="user", parts=[types.Part(text=msg.content)]))
            elif isinstance(msg, AssistantMessage):
                parts: List[types.Part] = []
                if msg.content:
                    parts.append(types.Part(text=msg.content))
                for call in msg.tool_calls:
                    parts.append(
                        types.Part(
                            function_call=types.FunctionCall(
                                name=call.name, args=call.input, id=GeminiAdapter._wire_id(call.id)
                            )
                        )
                    )
                if parts:
                    contents.append(types.Content(role="model", parts=parts))
            elif isinstance(msg, ToolMessage):
                parts = [
                    types.Part(
                        function_response=types.FunctionResponse(
                            name=entry.name,
                            id=GeminiAdapter._wire_id(entry.tool_call_id),
                            response={"error": entry.content} if entry.is_error else {"result": entry.content},
                        )
                    )
                    for entry in msg.results
                ]
                contents.append(types.Content(role="user", parts=parts))

        return "\n\n".join(system_parts), contents

    @staticmethod
    def parse_response(response: GenerateContentResponse) -> ChatResponse:
        """Collect text and function-call parts of the first candidate in emitted order."""
        texts: List[str] = []
        tool_calls: List[ToolCall] = []

        for index, part in enumerate(GeminiAdapter._first_candidate_parts(response)):
            if part.function_call:
                call = part.function_call
                tool_calls.append(
                    ToolCall(
                        id=call.id or f"{SYNTHETIC_ID_PREFIX}{index}",
                        name=call.name or "",
                        input=dict(call.args or {}),
                    )
                )
            elif part.text:
                texts.append(part.text)

        return ChatResponse(
            text="".join(texts) or None,
            tool_calls=tool_calls,
            usage=GeminiAdapter._parse_usage(response),
            raw=response,
        )

    @staticmethod
    def _first_candidate_parts(response: GenerateContentResponse) -> List[types.Part]:
        if not response.candidates:
            return []
        content = response.candidates[0].content
        if content is None or not content.parts:
            return []
        return list(content.parts)

    @staticmethod
    def _wire_id(call_id: str) -> Optional[str]:
        return None if call_id.startswith(SYNTHETIC_ID_PREFIX) else call_id

    @staticmethod
    def _parse_usage(response: GenerateContentResponse) -> Optional[Usage]:
        metadata: Any = getattr(response, "usage_metadata", None)
        if metadata is None:
            return None
        return Usage(
            input_tokens=getattr(metadata, "prompt_token_count", None) or 0,
            output_tokens=getattr(metadata, "candidates_token_count", None) or 0,
        )
