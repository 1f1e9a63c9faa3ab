"""Provider-agnostic message models for the agent conversation."""

from typing import Annotated, Any, Dict, List, Literal, Union

from pydantic import BaseModel, Field


class ToolCall(BaseModel):
    """A model-issued request to invoke one tool.

    Attributes:
        id: Opaque, provider-issued identifier, unique within one assistant turn.
        name: Name of the requested tool. Not guaranteed to be registered.
        input: Parameter mapping. Its shape is only checked by the tool itself.
    """

    id: str
    name: str
    input: Dict[str, Any] = Field(default_factory=dict)


class ToolResultEntry(BaseModel):
    """Feedback for one previously issued tool call."""

    tool_call_id: str
    name: str
    content: str
    is_error: bool = False


class SystemMessage(BaseModel):
    """Message authored by the system to steer behavior."""

    role: Literal["system"] = "system"
    content: str


class UserMessage(BaseModel):
    """Message authored by an end user."""

    role: Literal["user"] = "user"
    content: str


class AssistantMessage(BaseModel):
    """Message authored by the assistant, optionally containing tool calls."""

    role: Literal["assistant"] = "assistant"
    content: str = ""
    tool_calls: List[ToolCall] = Field(default_factory=list)


class ToolMessage(BaseModel):
    """Aggregated tool output for every call of the preceding assistant message."""

    role: Literal["tool"] = "tool"
    results: List[ToolResultEntry] = Field(default_factory=list)

    @property
    def tool_call_ids(self) -> List[str]:
        return [entry.tool_call_id for entry in self.results]


Message = Annotated[
    Union[SystemMessage, UserMessage, AssistantMessage, ToolMessage],
    Field(discriminator="role"),
]
