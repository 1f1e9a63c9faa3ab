from typing import Any

import pytest

from autopilot.agent_core.tools import ToolRegistry, ToolResult
from autopilot.config import AgentSettings


@pytest.fixture
def registry() -> ToolRegistry:
    return ToolRegistry(tool_timeout=5.0)


@pytest.fixture
def echo_registry(registry: ToolRegistry) -> ToolRegistry:
    async def echo(**params: Any) -> ToolResult:
        return ToolResult.ok(f"echo: {params.get('text', '')}")

    registry.register(
        "echo",
        description="Echo the text back.",
        func=echo,
        parameters={"type": "object", "properties": {"text": {"type": "string"}}},
    )
    return registry


@pytest.fixture
def settings() -> AgentSettings:
    return AgentSettings(
        provider="openai",
        env={"OPENAI_API_KEY": "sk-test", "ANTHROPIC_API_KEY": "ak-test", "GOOGLE_API_KEY": "gk-test"},
    )
