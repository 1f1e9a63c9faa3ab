import asyncio
import sys
from pathlib import Path

import httpx
import pytest

from autopilot.agent_core.tools import ToolRegistry
from autopilot.config import AgentSettings
from autopilot.tools import builtin_tools, register_builtin_tools
from autopilot.tools.common import truncate_middle
from autopilot.tools.exec_tool import shell_argv
from autopilot.tools.file_tools import MAX_READ_CHARS
from autopilot.tools.web_fetch import create_web_fetch_tool, strip_html
from autopilot.tools.web_search import BRAVE_SEARCH_URL, create_web_search_tool

BUILTIN_NAMES = ["exec", "web_search", "web_fetch", "file_read", "file_write", "list_dir"]


@pytest.fixture
def workspace(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def tools_registry() -> ToolRegistry:
    registry = ToolRegistry(tool_timeout=10.0)
    register_builtin_tools(registry, AgentSettings())
    return registry


def test_register_builtin_tools_is_idempotent() -> None:
    registry = ToolRegistry()
    register_builtin_tools(registry)
    register_builtin_tools(registry)

    assert registry.names == BUILTIN_NAMES
    assert registry.builtins_registered


def test_builtin_definitions_carry_schemas() -> None:
    for definition in builtin_tools():
        assert definition.args_model is not None
        assert definition.parameters is not None
        assert definition.parameters["type"] == "object"


@pytest.mark.asyncio
async def test_file_write_then_read(workspace: Path, tools_registry: ToolRegistry) -> None:
    written = await tools_registry.dispatch("file_write", {"file_path": "notes/todo.txt", "content": "a\nb\nc\nd"})
    assert not written.is_error
    assert (workspace / "notes" / "todo.txt").read_text(encoding="utf-8") == "a\nb\nc\nd"

    await tools_registry.dispatch("file_write", {"file_path": "notes/todo.txt", "content": "\ne", "append": True})
    result = await tools_registry.dispatch("file_read", {"file_path": "notes/todo.txt", "start_line": 2, "end_line": 3})

    assert result.content == "b\nc"
    assert result.details is not None
    assert result.details["lines"] == 5


@pytest.mark.asyncio
async def test_file_read_truncates_large_files(workspace: Path, tools_registry: ToolRegistry) -> None:
    (workspace / "big.txt").write_text("x" * (MAX_READ_CHARS + 10), encoding="utf-8")

    result = await tools_registry.dispatch("file_read", {"file_path": "big.txt"})

    assert result.text.endswith("…[truncated]")
    assert len(result.text) < MAX_READ_CHARS + 20


@pytest.mark.asyncio
async def test_file_read_missing_file(workspace: Path, tools_registry: ToolRegistry) -> None:
    result = await tools_registry.dispatch("file_read", {"file_path": "nope.txt"})

    assert result.is_error
    assert "File not found" in result.text


@pytest.mark.asyncio
async def test_paths_outside_working_directory_are_rejected(workspace: Path, tools_registry: ToolRegistry) -> None:
    result = await tools_registry.dispatch("file_read", {"file_path": "../../etc/passwd"})

    assert result.is_error
    assert "escapes working directory" in result.text


@pytest.mark.asyncio
async def test_list_dir_hides_noise_and_limits_depth(workspace: Path, tools_registry: ToolRegistry) -> None:
    (workspace / ".git").mkdir()
    (workspace / "node_modules").mkdir()
    deep = workspace / "a" / "b" / "c" / "d"
    deep.mkdir(parents=True)
    (deep / "deep.txt").write_text("x", encoding="utf-8")
    (workspace / "top.txt").write_text("x", encoding="utf-8")

    flat = await tools_registry.dispatch("list_dir", {"dir_path": "."})
    nested = await tools_registry.dispatch("list_dir", {"dir_path": ".", "recursive": True})

    assert flat.text.splitlines() == ["a/", "top.txt"]
    assert nested.text.splitlines() == ["a/", "  b/", "    c/", "top.txt"]


@pytest.mark.asyncio
@pytest.mark.skipif(sys.platform == "win32", reason="POSIX shell")
async def test_exec_captures_output_and_exit_code(
    workspace: Path, tools_registry: ToolRegistry, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("SHELL", "/bin/sh")

    result = await tools_registry.dispatch("exec", {"command": "echo hello; echo oops >&2; exit 3"})

    assert result.text == "stdout:\nhello\n\n\nstderr:\noops\n"
    assert result.details == {"command": "echo hello; echo oops >&2; exit 3", "exit_code": 3, "killed": False}


@pytest.mark.asyncio
@pytest.mark.skipif(sys.platform == "win32", reason="POSIX shell")
async def test_exec_no_output(tools_registry: ToolRegistry, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SHELL", "/bin/sh")
    result = await tools_registry.dispatch("exec", {"command": "true"})
    assert result.text == "(no output)"


@pytest.mark.asyncio
@pytest.mark.skipif(sys.platform == "win32", reason="POSIX shell")
async def test_exec_timeout_kills_command(tools_registry: ToolRegistry, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SHELL", "/bin/sh")

    result = await tools_registry.dispatch("exec", {"command": "sleep 5", "timeout_ms": 200})

    assert result.details is not None
    assert result.details["killed"] is True


@pytest.mark.asyncio
@pytest.mark.skipif(sys.platform == "win32", reason="POSIX shell")
async def test_exec_is_killed_when_registry_timeout_fires_first(
    workspace: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("SHELL", "/bin/sh")
    registry = ToolRegistry(tool_timeout=0.5)
    register_builtin_tools(registry, AgentSettings())

    result = await registry.dispatch("exec", {"command": "sleep 2; touch marker", "timeout_ms": 60000})

    assert result.is_error
    assert "timed out" in result.text
    await asyncio.sleep(2.5)
    assert not (workspace / "marker").exists()


@pytest.mark.skipif(sys.platform == "win32", reason="POSIX shell")
def test_shell_argv_replaces_fish(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SHELL", "/usr/bin/fish")
    argv = shell_argv("ls")
    assert not argv[0].endswith("fish")
    assert argv[1:] == ["-c", "ls"]


def test_truncate_middle_keeps_head_and_tail() -> None:
    text = "a" * 10 + "b" * 10
    truncated = truncate_middle(text, 10)

    assert truncated.startswith("aaaaa")
    assert truncated.endswith("bbbbb")
    assert "…[truncated 10 chars]…" in truncated


def test_strip_html() -> None:
    markup = "<html><head><style>p{}</style></head><body><nav>menu</nav><p>Fish &amp; chips</p><script>x()</script></body></html>"
    assert strip_html(markup) == "Fish & chips"


@pytest.mark.asyncio
async def test_web_fetch_strips_html_and_truncates() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.headers["User-Agent"].startswith("AutoPilot")
        return httpx.Response(200, html="<p>Hello <b>world</b></p>")

    registry = ToolRegistry()
    registry.register(create_web_fetch_tool(transport=httpx.MockTransport(handler)))

    full = await registry.dispatch("web_fetch", {"url": "https://example.com"})
    short = await registry.dispatch("web_fetch", {"url": "https://example.com", "max_chars": 5})

    assert full.text == "Hello world"
    assert short.text == "Hello\n\n…[truncated]"


@pytest.mark.asyncio
async def test_web_fetch_http_error_is_error_result() -> None:
    transport = httpx.MockTransport(lambda request: httpx.Response(404))
    registry = ToolRegistry()
    registry.register(create_web_fetch_tool(transport=transport))

    result = await registry.dispatch("web_fetch", {"url": "https://example.com/missing"})

    assert result.is_error
    assert result.text == "HTTP 404 Not Found"


@pytest.mark.asyncio
async def test_web_search_without_key_is_error_result() -> None:
    registry = ToolRegistry()
    registry.register(create_web_search_tool(api_key=None))

    result = await registry.dispatch("web_search", {"query": "python"})

    assert result.is_error
    assert "BRAVE_API_KEY" in result.text


@pytest.mark.asyncio
async def test_web_search_formats_results_and_caps_count() -> None:
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = request.url
        seen["token"] = request.headers["X-Subscription-Token"]
        return httpx.Response(
            200,
            json={"web": {"results": [{"title": "Python", "url": "https://python.org", "description": "Home"}]}},
        )

    registry = ToolRegistry()
    registry.register(create_web_search_tool(api_key="brave-key", transport=httpx.MockTransport(handler)))

    result = await registry.dispatch("web_search", {"query": "python", "count": 50})

    assert result.text == "1. **Python**\n   https://python.org\n   Home"
    assert str(seen["url"]).startswith(BRAVE_SEARCH_URL)
    assert seen["url"].params["count"] == "20"
    assert seen["token"] == "brave-key"


@pytest.mark.asyncio
async def test_web_search_no_results() -> None:
    transport = httpx.MockTransport(lambda request: httpx.Response(200, json={}))
    registry = ToolRegistry()
    registry.register(create_web_search_tool(api_key="k", transport=transport))

    result = await registry.dispatch("web_search", {"query": "zzzz"})

    assert not result.is_error
    assert result.text == "No results found for: zzzz"
