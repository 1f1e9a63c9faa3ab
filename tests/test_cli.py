import json
from typing import Any, List

import pytest
from typer.testing import CliRunner

from autopilot import cli
from autopilot.agent_core.agent import AgentRunParams, AgentRunResult
from autopilot.config import AgentSettings

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(cli, "load_settings", lambda: AgentSettings(env={}))
    monkeypatch.setattr(cli, "setup_logging", lambda level: None)


def test_agent_command_prints_json(monkeypatch: pytest.MonkeyPatch) -> None:
    seen: List[AgentRunParams] = []

    async def fake_run_agent(params: AgentRunParams, **kwargs: Any) -> AgentRunResult:
        seen.append(params)
        assert kwargs["settings"].max_rounds == 3
        return AgentRunResult(reply="All done", model="gpt-4o", rounds=1)

    monkeypatch.setattr(cli, "run_agent", fake_run_agent)

    result = runner.invoke(
        cli.app, ["agent", "-m", "do it", "--provider", "anthropic", "--dry-run", "--json", "--max-rounds", "3"]
    )

    assert result.exit_code == 0, result.output
    payload = json.loads(result.output)
    assert payload["reply"] == "All done"
    assert seen[0].message == "do it"
    assert seen[0].provider == "anthropic"
    assert seen[0].dry_run is True


def test_agent_command_reports_configuration_errors(monkeypatch: pytest.MonkeyPatch) -> None:
    from autopilot.agent_core.exceptions import MissingCredentialError

    async def failing_run_agent(params: AgentRunParams, **kwargs: Any) -> AgentRunResult:
        raise MissingCredentialError("Missing OPENAI_API_KEY")

    monkeypatch.setattr(cli, "run_agent", failing_run_agent)

    result = runner.invoke(cli.app, ["agent", "-m", "hi"])

    assert result.exit_code == 1
    assert "Missing OPENAI_API_KEY" in result.output


def test_chat_survives_errors_and_exits(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: List[str] = []

    async def flaky_run_agent(params: AgentRunParams, **kwargs: Any) -> AgentRunResult:
        calls.append(params.message)
        if params.message == "first":
            raise RuntimeError("provider exploded")
        return AgentRunResult(reply="second answer", model="gpt-4o", rounds=1)

    monkeypatch.setattr(cli, "run_agent", flaky_run_agent)

    result = runner.invoke(cli.app, ["chat"], input="first\n\nsecond\nexit\n")

    assert result.exit_code == 0, result.output
    assert calls == ["first", "second"]
    assert "provider exploded" in result.output
    assert "second answer" in result.output
    assert "Goodbye" in result.output


def test_tools_command_lists_catalogue() -> None:
    result = runner.invoke(cli.app, ["tools"])

    assert result.exit_code == 0, result.output
    for name in ("exec", "file_read", "web_search"):
        assert name in result.output


def test_agent_command_reports_provider_errors(monkeypatch: pytest.MonkeyPatch) -> None:
    async def failing_run_agent(params: AgentRunParams, **kwargs: Any) -> AgentRunResult:
        raise ConnectionError("connection reset by peer")

    monkeypatch.setattr(cli, "run_agent", failing_run_agent)

    result = runner.invoke(cli.app, ["agent", "-m", "hi", "--json"])

    assert result.exit_code == 1
    assert "connection reset by peer" in result.output
    assert result.exception is None or isinstance(result.exception, SystemExit)
