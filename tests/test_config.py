import json
from pathlib import Path

import pytest

from autopilot.agent_core.exceptions import ConfigurationError
from autopilot.config import AgentSettings, load_settings


def test_defaults_without_file_or_env(tmp_path: Path) -> None:
    settings = load_settings(config_path=_write(tmp_path, {}), env={}, use_dotenv=False)

    assert settings.provider == "openai"
    assert settings.model is None
    assert settings.max_rounds == 10
    assert settings.tool_timeout == 180.0
    assert settings.max_retries == 0
    assert settings.log_level == "WARNING"


def _write(tmp_path: Path, payload: object) -> Path:
    path = tmp_path / "autopilot.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_file_values_with_camel_case_aliases(tmp_path: Path) -> None:
    path = _write(tmp_path, {"agent": {"provider": "anthropic", "model": "claude-x", "maxRounds": 4, "apiKey": "k"}})

    settings = load_settings(config_path=path, env={}, use_dotenv=False)

    assert settings.provider == "anthropic"
    assert settings.model == "claude-x"
    assert settings.max_rounds == 4
    assert settings.api_key == "k"


def test_environment_overrides_file(tmp_path: Path) -> None:
    path = _write(tmp_path, {"agent": {"provider": "anthropic", "max_rounds": 4}})
    env = {
        "AUTOPILOT_PROVIDER": "gemini",
        "AUTOPILOT_MAX_ROUNDS": "7",
        "BRAVE_API_KEY": "brave",
        "OPENAI_BASE_URL": "http://localhost:8000/v1",
    }

    settings = load_settings(config_path=path, env=env, use_dotenv=False)

    assert settings.provider == "gemini"
    assert settings.max_rounds == 7
    assert settings.brave_api_key == "brave"
    assert settings.openai_base_url == "http://localhost:8000/v1"


def test_missing_explicit_file_is_an_error(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError, match="not found"):
        load_settings(config_path=tmp_path / "missing.json", env={}, use_dotenv=False)


def test_invalid_json_is_an_error(tmp_path: Path) -> None:
    path = tmp_path / "autopilot.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(ConfigurationError, match="Invalid JSON"):
        load_settings(config_path=path, env={}, use_dotenv=False)


def test_non_object_agent_section_is_an_error(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError):
        load_settings(config_path=_write(tmp_path, {"agent": ["x"]}), env={}, use_dotenv=False)


def test_invalid_value_is_an_error(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError, match="Invalid configuration"):
        load_settings(config_path=_write(tmp_path, {}), env={"AUTOPILOT_MAX_ROUNDS": "0"}, use_dotenv=False)


def test_api_key_for_prefers_explicit_key() -> None:
    settings = AgentSettings(api_key="explicit", env={"OPENAI_API_KEY": "from-env"})
    assert settings.api_key_for("openai") == "explicit"


def test_api_key_for_falls_back_to_vendor_variables() -> None:
    settings = AgentSettings(env={"OPENAI_API_KEY": "o", "ANTHROPIC_API_KEY": "a", "GEMINI_API_KEY": "g"})

    assert settings.api_key_for("OpenAI") == "o"
    assert settings.api_key_for("anthropic") == "a"
    assert settings.api_key_for("gemini") == "g"
    assert settings.api_key_for("unknown") is None
