"""
Agent configuration.

Settings come from three layers, later ones winning: field defaults, an optional JSON
file (``~/.autopilot/autopilot.json`` unless another path is given) and environment
variables (a ``.env`` file is loaded first when present). Provider API keys fall back
to each vendor's conventional environment variable.
"""

import json
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, Field, ValidationError

from .agent_core.exceptions import ConfigurationError
from .agent_core.logger import get_logger

logger = get_logger(__name__)

DEFAULT_CONFIG_PATH = Path.home() / ".autopilot" / "autopilot.json"

PROVIDER_KEY_ENV: Dict[str, tuple[str, ...]] = {
    "openai": ("OPENAI_API_KEY",),
    "anthropic": ("ANTHROPIC_API_KEY",),
    "gemini": ("GOOGLE_API_KEY", "GEMINI_API_KEY"),
}

_ENV_OVERRIDES = {
    "AUTOPILOT_PROVIDER": "provider",
    "AUTOPILOT_MODEL": "model",
    "AUTOPILOT_API_KEY": "api_key",
    "AUTOPILOT_MAX_ROUNDS": "max_rounds",
    "AUTOPILOT_TOOL_TIMEOUT": "tool_timeout",
    "AUTOPILOT_MAX_RETRIES": "max_retries",
    "AUTOPILOT_LOG_LEVEL": "log_level",
    "OPENAI_BASE_URL": "openai_base_url",
    "BRAVE_API_KEY": "brave_api_key",
}


class AgentSettings(BaseModel):
    """
    Runtime settings for one agent process.

    Attributes:
        provider: Default provider identifier ("openai", "anthropic" or "gemini").
        model: Default model. None selects the provider's default.
        api_key: Key override. Takes precedence over the provider's environment variable.
        max_rounds: Hard cap on model rounds per run.
        tool_timeout: Seconds a single tool execution may take.
        max_retries: Client-side retries of a failed model call.
        log_level: Level used by the CLI when it configures logging.
        openai_base_url: Alternative endpoint for OpenAI-compatible servers.
        brave_api_key: Key for the web_search tool.
        env: Environment the settings were resolved against.
    """

    provider: str = "openai"
    model: Optional[str] = None
    api_key: Optional[str] = Field(default=None, repr=False)
    max_rounds: int = Field(default=10, ge=1)
    tool_timeout: float = Field(default=180.0, gt=0)
    max_retries: int = Field(default=0, ge=0)
    log_level: str = "WARNING"
    openai_base_url: Optional[str] = None
    brave_api_key: Optional[str] = Field(default=None, repr=False)
    env: Dict[str, str] = Field(default_factory=dict, exclude=True, repr=False)

    def api_key_for(self, provider: str) -> Optional[str]:
        """Resolve the API key for ``provider``.

        Returns:
            The explicit key if configured, otherwise the first non-empty conventional
            environment variable for that provider, otherwise None.
        """
        if self.api_key:
            return self.api_key
        for var in PROVIDER_KEY_ENV.get(provider.lower(), ()):
            value = self.env.get(var)
            if value:
                return value
        return None


def _read_config_file(path: Path) -> Dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid JSON in config file {path}: {e}") from e
    except OSError as e:
        raise ConfigurationError(f"Cannot read config file {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {path} must contain a JSON object.")

    section = data.get("agent", {})
    if not isinstance(section, dict):
        raise ConfigurationError(f"'agent' section in {path} must be an object.")

    # camelCase keys are accepted for compatibility with hand-written files
    aliases = {"apiKey": "api_key", "maxRounds": "max_rounds", "toolTimeout": "tool_timeout"}
    return {aliases.get(k, k): v for k, v in section.items()}


def load_settings(
    config_path: Optional[Path | str] = None,
    env: Optional[Mapping[str, str]] = None,
    use_dotenv: bool = True,
) -> AgentSettings:
    """Build ``AgentSettings`` from file and environment.

    Args:
        config_path: JSON config file. Defaults to ``~/.autopilot/autopilot.json``; a
            missing default file is ignored, a missing explicit file is an error.
        env: Environment mapping. Defaults to ``os.environ``.
        use_dotenv: Load a ``.env`` file into the process environment first.

    Returns:
        The resolved settings.

    Raises:
        ConfigurationError: If the file or an override cannot be parsed.
    """
    if use_dotenv and env is None:
        env_file = find_dotenv(usecwd=True)
        if env_file:
            logger.debug(f"Loading .env from: {env_file}")
            load_dotenv(env_file)

    environ = dict(os.environ if env is None else env)
    values: Dict[str, Any] = {}

    path = Path(config_path) if config_path is not None else DEFAULT_CONFIG_PATH
    if path.exists():
        values.update(_read_config_file(path))
    elif config_path is not None:
        raise ConfigurationError(f"Config file not found: {path}")

    for var, field_name in _ENV_OVERRIDES.items():
        value = environ.get(var)
        if value:
            values[field_name] = value

    try:
        return AgentSettings(**values, env=environ)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e
