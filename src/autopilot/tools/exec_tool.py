"""Shell command execution."""

import asyncio
import os
import shutil
import signal
import sys
from typing import List, Optional

from pydantic import BaseModel, Field

from autopilot.agent_core.logger import get_logger
from autopilot.agent_core.tools import ToolDefinition, ToolResult
from .common import build_definition, sanitize_output, truncate_middle

logger = get_logger(__name__)

MAX_OUTPUT_CHARS = 30_000
DEFAULT_TIMEOUT_MS = 30_000


class ExecParams(BaseModel):
    command: str = Field(description="The shell command to execute")
    cwd: Optional[str] = Field(default=None, description="Working directory for the command")
    timeout_ms: int = Field(default=DEFAULT_TIMEOUT_MS, ge=1, description="Timeout in milliseconds (default 30000)")


def shell_argv(command: str) -> List[str]:
    """
    Build the argv that runs ``command`` in the user's shell.

    PowerShell on Windows. Elsewhere ``$SHELL``, falling back to bash for fish (whose
    syntax differs from POSIX shells) and to ``sh`` when nothing is set.
    """
    if sys.platform == "win32":
        return ["powershell.exe", "-NoProfile", "-NonInteractive", "-Command", command]

    shell = os.environ.get("SHELL", "").strip()
    if os.path.basename(shell) == "fish":
        shell = shutil.which("bash") or shutil.which("sh") or "sh"
    return [shell or "sh", "-c", command]


def _kill_tree(process: asyncio.subprocess.Process) -> None:
    """Kill the command together with any children it spawned."""
    if sys.platform == "win32":
        process.kill()
        return
    try:
        os.killpg(process.pid, signal.SIGKILL)
    except ProcessLookupError:
        logger.debug(f"Process group {process.pid} already exited.")


async def run_command(command: str, cwd: Optional[str] = None, timeout_ms: int = DEFAULT_TIMEOUT_MS) -> ToolResult:
    """Execute ``command`` and report stdout, stderr and the exit code."""
    argv = shell_argv(command)
    try:
        process = await asyncio.create_subprocess_exec(
            *argv,
            cwd=cwd,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            # Own process group, so a timeout can take down the whole tree
            start_new_session=sys.platform != "win32",
        )
    except OSError as e:
        logger.warning(f"Failed to start command '{command}': {e}")
        return ToolResult.failure(f"Command failed: {e}", command=command)

    stdout_task = asyncio.ensure_future(process.stdout.read())  # type: ignore[union-attr]
    stderr_task = asyncio.ensure_future(process.stderr.read())  # type: ignore[union-attr]

    killed = False
    try:
        await asyncio.wait_for(process.wait(), timeout=timeout_ms / 1000)
    except asyncio.TimeoutError:
        logger.warning(f"Command timed out after {timeout_ms}ms, killing: {command}")
        _kill_tree(process)
        await process.wait()
        killed = True
    except asyncio.CancelledError:
        # Cancelled from outside, e.g. by the registry's tool timeout
        logger.warning(f"Command cancelled, killing: {command}")
        _kill_tree(process)
        stdout_task.cancel()
        stderr_task.cancel()
        raise
    stdout_bytes, stderr_bytes = await asyncio.gather(stdout_task, stderr_task)

    stdout = sanitize_output(stdout_bytes.decode("utf-8", errors="replace"))
    stderr = sanitize_output(stderr_bytes.decode("utf-8", errors="replace"))
    sections = []
    if stdout:
        sections.append(f"stdout:\n{truncate_middle(stdout, MAX_OUTPUT_CHARS)}")
    if stderr:
        sections.append(f"stderr:\n{truncate_middle(stderr, MAX_OUTPUT_CHARS)}")

    return ToolResult.ok(
        "\n\n".join(sections) or "(no output)",
        command=command,
        exit_code=process.returncode,
        killed=killed,
    )


def create_exec_tool() -> ToolDefinition:
    return build_definition(
        name="exec",
        description=" ".join(
            [
                "Execute a shell command and return stdout/stderr.",
                "Use for file operations, git, system commands, etc.",
                "Commands run in the user's shell (bash/zsh/powershell).",
                "Timeout: 30s by default. Destructive actions require user confirmation.",
            ]
        ),
        func=run_command,
        args_model=ExecParams,
    )
