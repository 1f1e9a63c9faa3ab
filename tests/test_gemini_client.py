from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
from google.genai import types
from google.genai.client import AsyncClient

from autopilot.agent_core.base import ChatRequest
from autopilot.agent_core.exceptions import MissingCredentialError
from autopilot.agent_core.messages import AssistantMessage, SystemMessage, ToolCall, ToolMessage, ToolResultEntry, UserMessage
from autopilot.agent_core.tools import ToolSpec
from autopilot.providers.gemini import GeminiAdapter, GeminiClient
from autopilot.providers.gemini.adapter import SYNTHETIC_ID_PREFIX


def make_response(*parts: types.Part, prompt_tokens: int = 2, output_tokens: int = 3) -> types.GenerateContentResponse:
    return types.GenerateContentResponse(
        candidates=[types.Candidate(content=types.Content(role="model", parts=list(parts)))],
        usage_metadata=types.GenerateContentResponseUsageMetadata(
            prompt_token_count=prompt_tokens, candidates_token_count=output_tokens
        ),
    )


@pytest.fixture
def mock_genai_client() -> Any:
    client = MagicMock(spec=AsyncClient)
    client.models = MagicMock()
    client.models.generate_content = AsyncMock()
    return client


def test_missing_api_key_raises() -> None:
    with pytest.raises(MissingCredentialError):
        GeminiClient()


@pytest.mark.asyncio
async def test_text_reply_and_config(mock_genai_client: Any) -> None:
    mock_genai_client.models.generate_content.return_value = make_response(types.Part(text="Hi!"))
    client = GeminiClient(aclient=mock_genai_client)
    spec = ToolSpec(
        name="file_read",
        description="Read a file.",
        parameters={
            "type": "object",
            "properties": {"file_path": {"type": "string", "description": "Path"}},
            "required": ["file_path", "ghost"],
            "additionalProperties": False,
        },
    )

    response = await client.chat(ChatRequest(system_prompt="sys", messages=[UserMessage(content="hi")], tools=[spec]))

    assert response.text == "Hi!"
    assert response.usage is not None
    assert response.usage.total_tokens == 5

    kwargs = mock_genai_client.models.generate_content.call_args.kwargs
    assert kwargs["model"] == "gemini-2.0-flash"
    config = kwargs["config"]
    assert config.system_instruction == "sys"
    declaration = config.tools[0].function_declarations[0]
    assert declaration.name == "file_read"
    assert declaration.parameters.required == ["file_path"]
    contents = kwargs["contents"]
    assert contents[0].role == "user"
    assert contents[0].parts[0].text == "hi"


@pytest.mark.asyncio
async def test_function_calls_get_synthetic_ids_when_missing(mock_genai_client: Any) -> None:
    mock_genai_client.models.generate_content.return_value = make_response(
        types.Part(function_call=types.FunctionCall(name="exec", args={"command": "ls"})),
        types.Part(function_call=types.FunctionCall(name="list_dir", args={}, id="fc_2")),
    )
    client = GeminiClient(aclient=mock_genai_client)

    response = await client.chat(ChatRequest(system_prompt="", messages=[UserMessage(content="x")]))

    assert response.text is None
    assert response.tool_calls[0].id.startswith(SYNTHETIC_ID_PREFIX)
    assert response.tool_calls[0].input == {"command": "ls"}
    assert response.tool_calls[1].id == "fc_2"
    assert mock_genai_client.models.generate_content.call_args.kwargs["config"].tools is None


def test_convert_messages_tool_round() -> None:
    synthetic = f"{SYNTHETIC_ID_PREFIX}0"
    messages = [
        UserMessage(content="go"),
        AssistantMessage(
            content="On it.",
            tool_calls=[ToolCall(id=synthetic, name="exec", input={"command": "ls"})],
        ),
        ToolMessage(results=[ToolResultEntry(tool_call_id=synthetic, name="exec", content="a.txt")]),
        SystemMessage(content="more"),
    ]

    system, contents = GeminiAdapter.convert_messages("base", messages)

    assert system == "base\n\nmore"
    assert [c.role for c in contents] == ["user", "model", "user"]
    model_parts = contents[1].parts
    assert model_parts[0].text == "On it."
    assert model_parts[1].function_call.name == "exec"
    assert model_parts[1].function_call.id is None
    response_part = contents[2].parts[0].function_response
    assert response_part.name == "exec"
    assert response_part.response == {"result": "a.txt"}


def test_error_results_use_error_key() -> None:
    _, contents = GeminiAdapter.convert_messages(
        "", [ToolMessage(results=[ToolResultEntry(tool_call_id="id1", name="exec", content="bad", is_error=True)])]
    )
    function_response = contents[0].parts[0].function_response
    assert function_response.response == {"error": "bad"}
    assert function_response.id == "id1"


def test_empty_candidates_give_empty_response() -> None:
    response = GeminiAdapter.parse_response(types.GenerateContentResponse(candidates=[]))
    assert response.text is None
    assert response.tool_calls == []
    assert response.usage is None
