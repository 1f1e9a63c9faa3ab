"""AutoPilot: a conversational automation agent driving LLM tool calls."""

__version__ = "0.1.0"

from .agent_core.agent import AgentLoop, AgentRunParams, AgentRunResult  # noqa: E402
from .agent_core.tools import ToolRegistry  # noqa: E402
from .config import AgentSettings, load_settings  # noqa: E402
from .providers import create_ai_client  # noqa: E402
from .runner import run_agent  # noqa: E402

__all__ = [
    "__version__",
    "AgentLoop",
    "AgentRunParams",
    "AgentRunResult",
    "AgentSettings",
    "ToolRegistry",
    "create_ai_client",
    "load_settings",
    "run_agent",
]
