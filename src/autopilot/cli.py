"""
autopilot.cli - terminal entry point.

Commands
--------
  agent   One-shot request:  autopilot agent -m "list the files here"
  chat    Interactive session; type exit or quit to stop
  tools   Show the built-in tool catalogue
"""

import asyncio
import json
from typing import Optional

import typer
from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table

from . import __version__
from .agent_core.agent import AgentRunParams, AgentRunResult
from .agent_core.exceptions import AutoPilotError
from .agent_core.logger import setup_logging
from .agent_core.tools import ToolRegistry
from .config import AgentSettings, load_settings
from .runner import run_agent
from .tools import register_builtin_tools

console = Console()
app = typer.Typer(
    help="AutoPilot: a personal AI automation agent.",
    add_completion=False,
    no_args_is_help=True,
)

EXIT_WORDS = ("exit", "quit")


def _load(max_rounds: Optional[int] = None) -> AgentSettings:
    """Load settings, apply CLI overrides and configure logging, or exit with an error."""
    try:
        settings = load_settings()
    except AutoPilotError as e:
        console.print(f"[bold red]Configuration error:[/bold red] {e}")
        raise typer.Exit(code=1)

    if max_rounds is not None:
        settings = settings.model_copy(update={"max_rounds": max_rounds})
    setup_logging(settings.log_level.upper())
    return settings


def _print_result(result: AgentRunResult) -> None:
    console.print()
    console.print(Panel(Markdown(result.reply or "(empty reply)"), title="autopilot", border_style="green"))
    if result.tool_calls:
        console.print(f"[dim]  [{len(result.tool_calls)} tool call(s) executed][/dim]")


@app.command()
def agent(
    message: str = typer.Option(..., "--message", "-m", help="The request for the agent."),
    provider: Optional[str] = typer.Option(None, "--provider", "-p", help="openai, anthropic or gemini."),
    model: Optional[str] = typer.Option(None, "--model", help="Model identifier."),
    thinking: Optional[str] = typer.Option(None, "--thinking", help="Thinking level hint (default medium)."),
    dry_run: bool = typer.Option(False, "--dry-run", help="Show requested tool calls without running them."),
    as_json: bool = typer.Option(False, "--json", help="Print the full result as JSON."),
    max_rounds: Optional[int] = typer.Option(None, "--max-rounds", min=1, help="Maximum model rounds."),
) -> None:
    """Run the agent once for a single message."""
    settings = _load(max_rounds)
    params = AgentRunParams(
        message=message, provider=provider, model=model, dry_run=dry_run, thinking_level=thinking
    )

    try:
        if as_json:
            result = asyncio.run(run_agent(params, settings=settings))
        else:
            with console.status("[bold cyan]Thinking…", spinner="dots"):
                result = asyncio.run(run_agent(params, settings=settings))
    except Exception as e:
        # Configuration and provider errors alike end the exchange with a message
        console.print(f"[bold red]Error:[/bold red] {str(e) or type(e).__name__}")
        raise typer.Exit(code=1)

    if as_json:
        typer.echo(json.dumps(result.model_dump(mode="json"), indent=2, ensure_ascii=False))
    else:
        _print_result(result)


@app.command()
def chat(
    provider: Optional[str] = typer.Option(None, "--provider", "-p", help="openai, anthropic or gemini."),
    model: Optional[str] = typer.Option(None, "--model", help="Model identifier."),
    dry_run: bool = typer.Option(False, "--dry-run", help="Show requested tool calls without running them."),
) -> None:
    """Start an interactive chat session."""
    settings = _load()
    registry = ToolRegistry(tool_timeout=settings.tool_timeout)

    console.print(
        Panel(
            "[bold]AutoPilot Interactive Mode[/bold]\n"
            "Type a message to chat with the agent, or [bold]exit[/bold] / [bold]quit[/bold] to stop.",
            border_style="cyan",
        )
    )

    while True:
        try:
            user_input = Prompt.ask("\n[bold cyan]you[/bold cyan]")
        except (KeyboardInterrupt, EOFError):
            console.print("\n[dim]Goodbye![/dim]")
            break

        message = user_input.strip()
        if not message:
            continue
        if message.lower() in EXIT_WORDS:
            console.print("[dim]Goodbye![/dim]")
            break

        params = AgentRunParams(message=message, provider=provider, model=model, dry_run=dry_run)
        try:
            with console.status("[bold cyan]Thinking…", spinner="dots"):
                result = asyncio.run(run_agent(params, settings=settings, registry=registry))
        except Exception as e:
            # A failed turn must not end the session
            console.print(f"\n[bold red]Error:[/bold red] {e}")
            continue

        _print_result(result)


@app.command()
def tools() -> None:
    """List the built-in tools the agent can call."""
    settings = _load()
    registry = ToolRegistry(tool_timeout=settings.tool_timeout)
    register_builtin_tools(registry, settings)

    table = Table(title="Available tools")
    table.add_column("Name", style="bold")
    table.add_column("Description")
    for spec in registry.catalogue():
        table.add_row(spec.name, spec.description)
    console.print(table)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"autopilot v{__version__}")
        raise typer.Exit()


@app.callback()
def _callback(
    version: bool = typer.Option(
        False, "--version", "-v", callback=_version_callback, is_eager=True, help="Show the version and exit."
    ),
) -> None:
    pass


def main() -> None:
    app()
