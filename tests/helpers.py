"""Test doubles shared by the loop and runner tests."""

from typing import Any, List, Sequence

from autopilot.agent_core.base import AIClient, ChatRequest, ChatResponse, Usage
from autopilot.agent_core.messages import ToolCall


class ScriptedClient(AIClient):
    """AIClient double that replays canned responses and records every request."""

    provider = "scripted"

    def __init__(self, responses: Sequence[Any], model: str = "scripted-model"):
        super().__init__(model=model)
        self._responses = list(responses)
        self.requests: List[ChatRequest] = []

    async def _chat_impl(self, request: ChatRequest) -> ChatResponse:
        self.requests.append(request)
        if not self._responses:
            raise AssertionError("ScriptedClient ran out of responses")
        response = self._responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


def text_response(text: str, input_tokens: int = 0, output_tokens: int = 0) -> ChatResponse:
    usage = Usage(input_tokens=input_tokens, output_tokens=output_tokens) if (input_tokens or output_tokens) else None
    return ChatResponse(text=text, usage=usage)


def tool_response(*calls: ToolCall, text: str = "", usage: Any = None) -> ChatResponse:
    return ChatResponse(text=text or None, tool_calls=list(calls), usage=usage)
