"""Tool definitions, catalogue views and execution results."""

import json
from typing import Any, Callable, Dict, Optional, Type, Union

from pydantic import BaseModel, ConfigDict


class ToolSpec(BaseModel):
    """Catalogue view of a tool: what the model is shown, without the callable.

    Attributes:
        name: The unique name of the tool.
        description: Natural-language description used by the model to pick the tool.
        parameters: JSON schema of the accepted parameters, forwarded verbatim to providers.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    description: str
    parameters: Optional[Dict[str, Any]] = None


class ToolDefinition(BaseModel):
    """
    Represents the definition of a tool that can be registered with the agent.

    Attributes:
        name: The unique name of the tool.
        description: A brief description of what the tool does.
        func: The callable implementing the tool. It receives the parameters as keyword
              arguments and may be sync or async. It may return a ``ToolResult`` or any
              JSON-serialisable value.
        parameters: A JSON schema defining the input parameters for the tool's function.
        args_model: Optional Pydantic model used for validating and coercing arguments.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    description: str
    func: Callable
    parameters: Optional[Dict[str, Any]] = None
    args_model: Optional[Type[BaseModel]] = None

    def spec(self) -> ToolSpec:
        """Return the catalogue view of this definition."""
        return ToolSpec(name=self.name, description=self.description, parameters=self.parameters)


class ToolResult(BaseModel):
    """Outcome of one tool invocation.

    Attributes:
        content: Text or structured payload. Sent to the model (as JSON when structured).
        details: Diagnostic metadata, never shown to the model. ``details["error"]`` marks failures.
    """

    content: Union[str, Dict[str, Any]]
    details: Optional[Dict[str, Any]] = None

    @classmethod
    def ok(cls, content: Union[str, Dict[str, Any]], **details: Any) -> "ToolResult":
        return cls(content=content, details=details or None)

    @classmethod
    def failure(cls, text: str, /, **details: Any) -> "ToolResult":
        return cls(content=text, details={"error": True, **details})

    @property
    def is_error(self) -> bool:
        return bool(self.details and self.details.get("error"))

    @property
    def text(self) -> str:
        """Content as the model sees it."""
        if isinstance(self.content, str):
            return self.content
        return json.dumps(self.content, default=str)


class ToolCallRecord(BaseModel):
    """Audit-trail entry for one dispatched tool call."""

    name: str
    input: Dict[str, Any]
    result: ToolResult
