from .loop import AgentLoop, DEFAULT_MAX_ROUNDS, ROUND_LIMIT_REPLY, format_dry_run
from .models import AgentRunParams, AgentRunResult

__all__ = [
    "AgentLoop",
    "AgentRunParams",
    "AgentRunResult",
    "DEFAULT_MAX_ROUNDS",
    "ROUND_LIMIT_REPLY",
    "format_dry_run",
]
