"""Caller-facing entry point: wire settings, registry, client and prompt, then run the loop."""

from typing import Optional

from .agent_core.agent import AgentLoop, AgentRunParams, AgentRunResult
from .agent_core.base import AIClient
from .agent_core.logger import get_logger
from .agent_core.system_prompt import build_system_prompt
from .agent_core.tools import ToolRegistry
from .config import AgentSettings, load_settings
from .providers import create_ai_client, default_model
from .tools import register_builtin_tools

logger = get_logger(__name__)


def resolve_model(params: AgentRunParams, settings: AgentSettings, provider: str) -> str:
    """Explicit model, else the configured model for the configured provider, else the provider default."""
    if params.model:
        return params.model
    if settings.model and provider.lower() == settings.provider.lower():
        return settings.model
    return default_model(provider)


async def run_agent(
    params: AgentRunParams,
    *,
    settings: Optional[AgentSettings] = None,
    registry: Optional[ToolRegistry] = None,
    client: Optional[AIClient] = None,
) -> AgentRunResult:
    """
    Runs the agent for one message.

    Args:
        params: The message and per-run options.
        settings: Resolved settings. Loaded from file and environment when omitted.
        registry: Registry to use. A fresh one is created when omitted; built-in tools
            are registered once per registry either way.
        client: Pre-built provider client. Created through the factory when omitted.

    Returns:
        The run result.

    Raises:
        ConfigurationError: If the provider is unknown or its credentials are missing.
            Raised before any model round.
        Exception: Any error raised by the provider client during a round.
    """
    settings = settings or load_settings()
    provider = params.provider or settings.provider

    if registry is None:
        registry = ToolRegistry(tool_timeout=settings.tool_timeout)
    register_builtin_tools(registry, settings)

    if client is None:
        client = create_ai_client(provider, model=resolve_model(params, settings, provider), settings=settings)

    system_prompt = build_system_prompt(
        registry,
        provider=provider,
        model=client.model,
        thinking_level=params.thinking_level,
    )

    logger.info(f"Running agent with {provider} model '{client.model}' ({len(registry)} tool(s)).")
    loop = AgentLoop(client, registry, system_prompt, max_rounds=settings.max_rounds)
    return await loop.run(params.message, dry_run=params.dry_run)
