"""Helpers shared by the built-in tools."""

import re
from pathlib import Path
from typing import Callable, Type

from pydantic import BaseModel

from autopilot.agent_core.exceptions import ToolValidationError
from autopilot.agent_core.tools import SchemaValidator, ToolDefinition

# C0 control characters except tab, newline and carriage return, plus DEL
_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")


def build_definition(name: str, description: str, func: Callable, args_model: Type[BaseModel]) -> ToolDefinition:
    """Pair a tool callable with the schema generated from its argument model."""
    return ToolDefinition(
        name=name,
        description=description,
        func=func,
        parameters=SchemaValidator.from_model(args_model),
        args_model=args_model,
    )


def resolve_workspace_path(raw_path: str) -> Path:
    """
    Resolve ``raw_path`` against the current working directory.

    Raises:
        ToolValidationError: If the resolved path lies outside the working directory.
    """
    cwd = Path.cwd().resolve()
    resolved = (cwd / raw_path).resolve()
    if resolved != cwd and cwd not in resolved.parents:
        raise ToolValidationError(f"Path escapes working directory: {raw_path}")
    return resolved


def sanitize_output(text: str) -> str:
    return _CONTROL_CHARS.sub("", text)


def truncate_middle(text: str, max_chars: int) -> str:
    """Keep the head and the tail of ``text``, marking how much was dropped in between."""
    if len(text) <= max_chars:
        return text
    half = max_chars // 2
    return f"{text[:half]}\n\n…[truncated {len(text) - max_chars} chars]…\n\n{text[-half:]}"


def truncate_tail(text: str, max_chars: int) -> str:
    if len(text) <= max_chars:
        return text
    return text[:max_chars] + "\n…[truncated]"
