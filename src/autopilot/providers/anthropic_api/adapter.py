"""Translate canonical requests and responses to and from the Anthropic Messages format."""

from typing import Any, Dict, List, Optional, Sequence, Tuple

from anthropic.types import Message as AnthropicMessage

from autopilot.agent_core.base import ChatResponse, Usage
from autopilot.agent_core.messages import (
    AssistantMessage,
    Message,
    SystemMessage,
    ToolCall,
    ToolMessage,
    UserMessage,
)
from autopilot.agent_core.tools.models import ToolSpec


class AnthropicAdapter:
    """Stateless conversions between the canonical shapes and Anthropic's wire format."""

    @staticmethod
    def convert_tools(tools: Sequence[ToolSpec]) -> List[Dict[str, Any]]:
        """Anthropic names the parameter schema ``input_schema``."""
        return [
            {
                "name": tool.name,
                "description": tool.description,
                "input_schema": tool.parameters or {"type": "object", "properties": {}},
            }
            for tool in tools
        ]

    @staticmethod
    def convert_messages(system_prompt: str, messages: Sequence[Message]) -> Tuple[str, List[Dict[str, Any]]]:
        """
        Converts the canonical conversation to Anthropic messages.

        System content is returned separately for the dedicated ``system`` field. Tool
        results are nested as ``tool_result`` blocks inside one user-role message;
        assistant turns keep their text block ahead of their ``tool_use`` blocks.

        Args:
            system_prompt: The base system prompt.
            messages: The canonical conversation.

        Returns:
            The combined system text and the list of Anthropic message dictionaries.
        """
        system_parts = [system_prompt] if system_prompt else []
        anthropic_messages: List[Dict[str, Any]] = []

        for msg in messages:
            if isinstance(msg, SystemMessage):
                system_parts.append(msg.content)
            elif isinstance(msg, UserMessage):
                anthropic_messages.append({"role": "user", "content": msg.content})
            elif isinstance(msg, AssistantMessage):
                if not msg.tool_calls:
                    anthropic_messages.append({"role": "assistant", "content": msg.content})
                    continue
                blocks: List[Dict[str, Any]] = []
                if msg.content:
                    blocks.append({"type": "text", "text": msg.content})
                for call in msg.tool_calls:
                    blocks.append({"type": "tool_use", "id": call.id, "name": call.name, "input": call.input})
                anthropic_messages.append({"role": "assistant", "content": blocks})
            elif isinstance(msg, ToolMessage):
                results = []
                for entry in msg.results:
                    block: Dict[str, Any] = {
                        "type": "tool_result",
                        "tool_use_id": entry.tool_call_id,
                        "content": entry.content,
                    }
                    if entry.is_error:
                        block["is_error"] = True
                    results.append(block)
                anthropic_messages.append({"role": "user", "content": results})

        return "\n\n".join(system_parts), anthropic_messages

    @staticmethod
    def parse_response(response: AnthropicMessage) -> ChatResponse:
        """Join the text blocks and collect the ``tool_use`` blocks in emitted order."""
        texts: List[str] = []
        tool_calls: List[ToolCall] = []
        for block in response.content or []:
            if block.type == "text":
                texts.append(block.text)
            elif block.type == "tool_use":
                tool_input = block.input if isinstance(block.input, dict) else {}
                tool_calls.append(ToolCall(id=block.id, name=block.name, input=tool_input))

        return ChatResponse(
            text="".join(texts) or None,
            tool_calls=tool_calls,
            usage=AnthropicAdapter._parse_usage(response),
            raw=response,
        )

    @staticmethod
    def _parse_usage(response: AnthropicMessage) -> Optional[Usage]:
        usage = getattr(response, "usage", None)
        if usage is None:
            return None
        return Usage(
            input_tokens=getattr(usage, "input_tokens", None) or 0,
            output_tokens=getattr(usage, "output_tokens", None) or 0,
        )
