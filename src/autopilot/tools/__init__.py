"""Built-in tools and their one-shot registration."""

from typing import List, Optional

from autopilot.agent_core.logger import get_logger
from autopilot.agent_core.tools import ToolDefinition, ToolRegistry
from autopilot.config import AgentSettings
from .exec_tool import create_exec_tool
from .file_tools import create_file_read_tool, create_file_write_tool, create_list_dir_tool
from .web_fetch import create_web_fetch_tool
from .web_search import create_web_search_tool

logger = get_logger(__name__)


def builtin_tools(settings: Optional[AgentSettings] = None) -> List[ToolDefinition]:
    settings = settings or AgentSettings()
    return [
        create_exec_tool(),
        create_web_search_tool(api_key=settings.brave_api_key),
        create_web_fetch_tool(),
        create_file_read_tool(),
        create_file_write_tool(),
        create_list_dir_tool(),
    ]


def register_builtin_tools(registry: ToolRegistry, settings: Optional[AgentSettings] = None) -> None:
    """
    Register every built-in tool into ``registry``.

    Idempotent per registry: later calls are no-ops.
    """
    if registry.builtins_registered:
        return
    for definition in builtin_tools(settings):
        registry.register(definition)
    registry.builtins_registered = True
    logger.debug(f"Registered {len(registry)} built-in tool(s).")


__all__ = [
    "builtin_tools",
    "register_builtin_tools",
    "create_exec_tool",
    "create_file_read_tool",
    "create_file_write_tool",
    "create_list_dir_tool",
    "create_web_fetch_tool",
    "create_web_search_tool",
]
