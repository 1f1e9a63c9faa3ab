"""The decision loop: ask the model, run the tools it requests, feed results back."""

import json
from typing import List, Optional, Sequence

from ..base import AIClient, ChatRequest, Usage
from ..logger import get_logger
from ..messages import AssistantMessage, Message, ToolCall, ToolMessage, ToolResultEntry, UserMessage
from ..tools.models import ToolCallRecord
from ..tools.registry import ToolRegistry
from .models import AgentRunResult

logger = get_logger(__name__)

DEFAULT_MAX_ROUNDS = 10

ROUND_LIMIT_REPLY = "Stopped after reaching the maximum of {n} tool rounds without a final answer."


def format_dry_run(text: Optional[str], tool_calls: Sequence[ToolCall]) -> str:
    """Describe the requested tool calls without executing them.

    Args:
        text: Prose the model returned alongside the calls, if any.
        tool_calls: The requested calls, in emitted order.

    Returns:
        A human-readable block per call with its name, id and indented JSON parameters.
    """
    lines: List[str] = []
    if text:
        lines.extend([text, ""])
    lines.append("Requested tool calls (dry run, nothing executed):")
    for call in tool_calls:
        lines.append("")
        lines.append(f"┌─ Tool: {call.name}")
        lines.append(f"│  ID:   {call.id}")
        lines.append("│  Params:")
        for line in json.dumps(call.input, indent=2, ensure_ascii=False, default=str).splitlines():
            lines.append(f"│    {line}")
        lines.append("└────────────────────")
    return "\n".join(lines) + "\n"


class AgentLoop:
    """
    Drives one request to completion against a client and a tool registry.

    Each round sends the system prompt, the conversation so far and the tool catalogue
    to the model. Tool calls from one round run sequentially in the order the model
    emitted them, and their results go back as a single tool message whose call ids
    match the preceding assistant message. Errors raised by the client propagate.
    """

    def __init__(
        self,
        client: AIClient,
        registry: ToolRegistry,
        system_prompt: str,
        max_rounds: int = DEFAULT_MAX_ROUNDS,
    ):
        """
        Args:
            client: Provider client used for every round.
            registry: Registry whose catalogue is offered and whose tools are dispatched.
            system_prompt: Instructions sent with every round.
            max_rounds: Hard cap on model rounds. Must be at least 1.

        Raises:
            ValueError: If ``max_rounds`` is smaller than 1.
        """
        if max_rounds < 1:
            raise ValueError(f"max_rounds must be >= 1, got {max_rounds}")
        self.client = client
        self.registry = registry
        self.system_prompt = system_prompt
        self.max_rounds = max_rounds

    async def run(self, message: str, *, dry_run: bool = False) -> AgentRunResult:
        """
        Runs the decision loop for one user message.

        Args:
            message: The user's request.
            dry_run: Stop at the first round that requests tools and describe the calls.

        Returns:
            The final reply together with the audit trail of dispatched calls.
        """
        conversation: List[Message] = [UserMessage(content=message)]
        records: List[ToolCallRecord] = []
        usage: Optional[Usage] = None

        for round_index in range(self.max_rounds):
            request = ChatRequest(
                system_prompt=self.system_prompt,
                messages=conversation,
                tools=self.registry.catalogue(),
            )
            response = await self.client.chat(request)
            if response.usage is not None:
                usage = response.usage if usage is None else usage + response.usage

            if not response.has_tool_calls:
                logger.debug("No tool calls found in response. Loop finished.")
                return self._result(response.text or "", records, usage, round_index + 1)

            if dry_run:
                logger.info(f"Dry run: model requested {len(response.tool_calls)} tool call(s), not executing.")
                return self._result(
                    format_dry_run(response.text, response.tool_calls), records, usage, round_index + 1
                )

            logger.info(
                f"Round {round_index + 1}/{self.max_rounds}: Processing {len(response.tool_calls)} tool call(s)."
            )
            conversation.append(AssistantMessage(content=response.text or "", tool_calls=response.tool_calls))

            entries: List[ToolResultEntry] = []
            for call in response.tool_calls:
                result = await self.registry.dispatch(call.name, call.input)
                records.append(ToolCallRecord(name=call.name, input=call.input, result=result))
                entries.append(
                    ToolResultEntry(tool_call_id=call.id, name=call.name, content=result.text, is_error=result.is_error)
                )
            conversation.append(ToolMessage(results=entries))

        logger.warning(f"Max tool rounds ({self.max_rounds}) reached. Stopping execution.")
        result = self._result(ROUND_LIMIT_REPLY.format(n=self.max_rounds), records, usage, self.max_rounds)
        result.round_limit_reached = True
        return result

    def _result(
        self, reply: str, records: List[ToolCallRecord], usage: Optional[Usage], rounds: int
    ) -> AgentRunResult:
        return AgentRunResult(
            reply=reply,
            tool_calls=records,
            model=self.client.model,
            tokens_used=usage.total_tokens if usage is not None else None,
            rounds=rounds,
        )
