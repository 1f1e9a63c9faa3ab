"""Translate canonical requests and responses to and from the OpenAI chat completions format."""

import json
from typing import Any, Dict, List, Optional, Sequence

from openai.types.chat import ChatCompletion, ChatCompletionToolParam

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

logger = get_logger(__name__)


class OpenAIAdapter:
    """Stateless conversions between the canonical shapes and OpenAI's wire format."""

    @staticmethod
    def convert_tools(tools: Sequence[ToolSpec]) -> List[ChatCompletionToolParam]:
        """Wrap every tool in OpenAI's ``{"type": "function", "function": {...}}`` envelope."""
        converted: List[ChatCompletionToolParam] = []
        for tool in tools:
            function: Dict[str, Any] = {"name": tool.name, "description": tool.description}
            function["parameters"] = tool.parameters or {"type": "object", "properties": {}}
            converted.append({"type": "function", "function": function})  # type: ignore[typeddict-item]
        return converted

    @staticmethod
    def convert_messages(system_prompt: str, messages: Sequence[Message]) -> List[Dict[str, Any]]:
        """
        Converts the canonical conversation to OpenAI message dictionaries.

        The system prompt becomes the first message. Each tool result becomes its own
        ``tool`` role message, in the order of the preceding assistant's tool calls.

        Args:
            system_prompt: Instructions placed in the leading system message.
            messages: The canonical conversation.

        Returns:
            List of OpenAI message dictionaries.
        """
        openai_messages: List[Dict[str, Any]] = []
        if system_prompt:
            openai_messages.append({"role": "system", "content": system_prompt})

        for msg in messages:
            if isinstance(msg, UserMessage):
                openai_messages.append({"role": "user", "content": msg.content})
            elif isinstance(msg, SystemMessage):
                openai_messages.append({"role": "system", "content": msg.content})
            elif isinstance(msg, AssistantMessage):
                openai_msg: Dict[str, Any] = {"role": "assistant", "content": msg.content or None}
                if msg.tool_calls:
                    openai_msg["tool_calls"] = [
                        {
                            "id": call.id,
                            "type": "function",
                            "function": {"name": call.name, "arguments": json.dumps(call.input)},
                        }
                        for call in msg.tool_calls
                    ]
                openai_messages.append(openai_msg)
            elif isinstance(msg, ToolMessage):
                for entry in msg.results:
                    openai_messages.append(
                        {"role": "tool", "tool_call_id": entry.tool_call_id, "content": entry.content}
                    )
        return openai_messages

    @staticmethod
    def parse_response(response: ChatCompletion) -> ChatResponse:
        """Extract text, tool calls and usage from the first choice of a completion."""
        if not response.choices:
            return ChatResponse(usage=OpenAIAdapter._parse_usage(response), raw=response)

        message = response.choices[0].message
        tool_calls: List[ToolCall] = []
        for tool_call in message.tool_calls or []:
            # Only function tool calls carry a name and arguments
            if tool_call.type != "function":
                continue
            tool_calls.append(
                ToolCall(
                    id=tool_call.id,
                    name=tool_call.function.name,
                    input=OpenAIAdapter._decode_arguments(tool_call.function.name, tool_call.function.arguments),
                )
            )

        return ChatResponse(
            text=message.content or None,
            tool_calls=tool_calls,
            usage=OpenAIAdapter._parse_usage(response),
            raw=response,
        )

    @staticmethod
    def _decode_arguments(tool_name: str, arguments: Optional[str]) -> Dict[str, Any]:
        if not arguments:
            return {}
        try:
            parsed = json.loads(arguments)
        except json.JSONDecodeError as e:
            logger.warning(f"Failed to decode function arguments for '{tool_name}': {e}")
            return {}
        if not isinstance(parsed, dict):
            logger.warning(f"Function arguments for '{tool_name}' are not a JSON object.")
            return {}
        return parsed

    @staticmethod
    def _parse_usage(response: ChatCompletion) -> Optional[Usage]:
        usage = getattr(response, "usage", None)
        if usage is None:
            return None
        return Usage(
            input_tokens=getattr(usage, "prompt_tokens", None) or 0,
            output_tokens=getattr(usage, "completion_tokens", None) or 0,
        )
