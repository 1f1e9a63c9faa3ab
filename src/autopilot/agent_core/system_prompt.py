"""Builds the system prompt: identity, tool catalogue, runtime facts and extra instructions."""

from datetime import date
from typing import List, Optional

from .tools.registry import ToolRegistry

DEFAULT_THINKING_LEVEL = "medium"

IDENTITY = "\n".join(
    [
        "You are AutoPilot, a personal AI automation agent.",
        "You can run shell commands, read and write files in the working directory,",
        "fetch web pages and search the web.",
        "Always confirm destructive actions with the user before executing.",
    ]
)


def _tooling_section(registry: ToolRegistry) -> str:
    specs = registry.catalogue()
    if not specs:
        return ""

    lines = ["## Available Tools", "", "You have access to the following tools:", ""]
    lines.extend(f"- **{spec.name}**: {spec.description}" for spec in specs)
    lines.append("")
    lines.append(
        "Use tools when needed to complete the user's request. Prefer combining multiple tool calls efficiently."
    )
    return "\n".join(lines)


def _runtime_section(provider: str, model: str, thinking_level: Optional[str], today: date) -> str:
    return "\n".join(
        [
            "## Runtime",
            f"- Thinking level: {thinking_level or DEFAULT_THINKING_LEVEL}",
            f"- Provider: {provider}",
            f"- Model: {model}",
            f"- Date: {today.isoformat()}",
        ]
    )


def build_system_prompt(
    registry: ToolRegistry,
    *,
    provider: str,
    model: str,
    thinking_level: Optional[str] = None,
    extra_instructions: Optional[str] = None,
    today: Optional[date] = None,
) -> str:
    """
    Assemble the system prompt sent with every round.

    Args:
        registry: Registry whose catalogue is listed in the tools section.
        provider: Provider identifier shown in the runtime section.
        model: Model identifier shown in the runtime section.
        thinking_level: Reasoning hint. Defaults to "medium".
        extra_instructions: Appended verbatim (stripped) when non-blank.
        today: Date shown in the runtime section. Defaults to the current date.

    Returns:
        The sections joined by blank lines. Empty sections are left out.
    """
    sections: List[str] = [
        IDENTITY,
        _tooling_section(registry),
        _runtime_section(provider, model, thinking_level, today or date.today()),
    ]
    if extra_instructions and extra_instructions.strip():
        sections.append(extra_instructions.strip())
    return "\n\n".join(section for section in sections if section)
