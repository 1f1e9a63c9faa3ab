from autopilot.agent_core.base import ChatRequest, ChatResponse, Usage
from autopilot.agent_core.messages import AssistantMessage, ToolCall, ToolMessage, UserMessage


def test_messages_are_parsed_by_role() -> None:
    request = ChatRequest.model_validate(
        {
            "system_prompt": "s",
            "messages": [
                {"role": "user", "content": "hi"},
                {"role": "assistant", "tool_calls": [{"id": "1", "name": "exec"}]},
                {"role": "tool", "results": [{"tool_call_id": "1", "name": "exec", "content": "ok"}]},
            ],
        }
    )

    user, assistant, tool = request.messages
    assert isinstance(user, UserMessage)
    assert isinstance(assistant, AssistantMessage)
    assert assistant.content == ""
    assert assistant.tool_calls == [ToolCall(id="1", name="exec", input={})]
    assert isinstance(tool, ToolMessage)
    assert tool.tool_call_ids == ["1"]
    assert tool.results[0].is_error is False


def test_usage_addition_and_total() -> None:
    total = Usage(input_tokens=1, output_tokens=2) + Usage(input_tokens=3)
    assert total == Usage(input_tokens=4, output_tokens=2)
    assert total.total_tokens == 6


def test_chat_response_has_tool_calls() -> None:
    assert not ChatResponse(text="x").has_tool_calls
    assert ChatResponse(tool_calls=[ToolCall(id="1", name="exec")]).has_tool_calls
