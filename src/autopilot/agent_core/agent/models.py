"""Inputs and outputs of one agent run."""

from typing import List, Optional

from pydantic import BaseModel, Field

from ..tools.models import ToolCallRecord


class AgentRunParams(BaseModel):
    """What the caller asks the agent to do.

    Attributes:
        message: The user's natural-language request.
        provider: Provider identifier passed to the client factory. Defaults to the configured one.
        model: Model identifier. Falls back to the configured or provider default.
        dry_run: Describe requested tool calls instead of executing them.
        thinking_level: Free-form hint rendered into the system prompt.
    """

    message: str
    provider: Optional[str] = None
    model: Optional[str] = None
    dry_run: bool = False
    thinking_level: Optional[str] = None


class AgentRunResult(BaseModel):
    """Outcome of one agent run.

    Attributes:
        reply: Final text reply (or the dry-run description, or the round-limit notice).
        tool_calls: Every dispatched call, in execution order.
        model: Model that served the run.
        tokens_used: Total tokens across all rounds, if any provider round reported usage.
        rounds: Number of model rounds performed.
        round_limit_reached: True if the run stopped because the round cap was hit.
    """

    reply: str
    tool_calls: List[ToolCallRecord] = Field(default_factory=list)
    model: str
    tokens_used: Optional[int] = None
    rounds: int = 0
    round_limit_reached: bool = False
