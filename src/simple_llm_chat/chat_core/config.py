"""Immutable runtime configuration loaded once at startup from a key=value settings file."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, Iterable, Optional, Tuple

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, ConfigDict

from .logger import get_logger

logger = get_logger(__name__)

DEFAULT_CONFIG_FILE = "LLMSettings.ini"
CONFIG_ENV_VAR = "SIMPLE_LLM_CHAT_CONFIG"
DEFAULT_MAX_CONTENT_LENGTH = 8000


class ChatConfig(BaseModel):
    """
    Process-wide settings, read-only after startup.

    The object is passed explicitly to every component that needs a setting;
    nothing reads configuration from module globals.

    Attributes:
        llm_server: Base URL of the OpenAI-compatible server, without ``/v1``.
        api_key: Bearer token forwarded verbatim.
        model: Model identifier sent with every request.
        system_prompt: Fixed system message prepended to every request.
        assistant_name: Label printed before each assistant reply.
        searxng_instance: Optional SearXNG base URL tried first for web searches.
        show_tool_output: Print full tool output instead of only the exit code.
        max_content_length: Character cap for file and website content.
        tools: Enabled tool names.
        tools_requiring_approval: Tool names that need confirmation before running.
        max_tool_rounds: Cap on tool round-trips per turn; None means unbounded.
    """

    model_config = ConfigDict(frozen=True)

    llm_server: str = ""
    api_key: str = ""
    model: str = ""
    system_prompt: str = ""
    assistant_name: str = "Assistant"
    searxng_instance: str = ""
    show_tool_output: bool = False
    max_content_length: int = DEFAULT_MAX_CONTENT_LENGTH
    tools: Tuple[str, ...] = ()
    tools_requiring_approval: Tuple[str, ...] = ()
    max_tool_rounds: Optional[int] = None

    @classmethod
    def from_mapping(cls, values: Dict[str, Optional[str]]) -> "ChatConfig":
        """Build a configuration from raw settings.

        Keys are matched case-insensitively and unknown keys are ignored.
        Malformed integers fall back to their defaults.

        Args:
            values: Raw key/value pairs, e.g. as returned by :func:`parse_settings`.

        Returns:
            The validated configuration.
        """
        raw = {key.strip().lower(): (value or "").strip() for key, value in values.items() if key and key.strip()}

        fields: Dict[str, object] = {
            "llm_server": raw.get("llmserver", "").rstrip("/"),
            "api_key": raw.get("apikey", ""),
            "model": raw.get("model", ""),
            "system_prompt": raw.get("sysprompt", ""),
            "searxng_instance": raw.get("searxnginstance", "").rstrip("/"),
            "show_tool_output": _parse_int(raw.get("showtooloutput"), 0) == 1,
            "max_content_length": _parse_int(raw.get("maxcontentlength"), DEFAULT_MAX_CONTENT_LENGTH),
            "tools": _parse_list(raw.get("tools")),
            "tools_requiring_approval": _parse_list(raw.get("toolsrequiringapproval")),
        }
        if raw.get("assistantname"):
            fields["assistant_name"] = raw["assistantname"]

        max_rounds = _parse_int(raw.get("maxtoolrounds"), 0)
        if max_rounds > 0:
            fields["max_tool_rounds"] = max_rounds

        return cls(**fields)


def _parse_int(value: Optional[str], default: int) -> int:
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        logger.warning("Ignoring non-integer setting value %r.", value)
        return default


def _parse_list(value: Optional[str]) -> Tuple[str, ...]:
    if not value:
        return ()
    return tuple(token.strip() for token in value.split(",") if token.strip())


def parse_settings(lines: Iterable[str]) -> Dict[str, str]:
    """Split ``key=value`` lines on the first ``=``.

    Values are kept verbatim apart from surrounding whitespace: quotes and
    ``#`` inside a value are not special. Blank lines, lines starting with
    ``#`` and lines without ``=`` are skipped. Later keys win.
    """
    settings: Dict[str, str] = {}
    for line in lines:
        stripped = line.strip()
        if not stripped or stripped.startswith("#") or "=" not in stripped:
            continue
        key, value = stripped.split("=", 1)
        if key.strip():
            settings[key.strip()] = value.strip()
    return settings


def load_environment(dotenv_path: str | Path | None = None) -> bool:
    """Load a ``.env`` file (default: searched from the working directory) into the environment.

    Variables that are already set win, so ``SIMPLE_LLM_CHAT_CONFIG`` can live in
    ``.env`` and still be overridden from the shell.

    Returns:
        True if a file was found and loaded.
    """
    path = dotenv_path if dotenv_path is not None else find_dotenv(usecwd=True)
    if not path:
        return False
    return load_dotenv(path, override=False)


def default_config_path() -> Path:
    """Settings path from ``SIMPLE_LLM_CHAT_CONFIG`` or ``LLMSettings.ini`` in the working directory."""
    return Path(os.getenv(CONFIG_ENV_VAR) or DEFAULT_CONFIG_FILE)


def load_config(path: str | Path | None = None) -> ChatConfig:
    """Load the settings file.

    A missing file is not fatal: the error is logged and defaults are used.

    Args:
        path: Settings file to read. Defaults to :func:`default_config_path`.

    Returns:
        The loaded configuration.
    """
    config_path = Path(path) if path is not None else default_config_path()
    if not config_path.is_file():
        logger.error("Failed to open config file: %s", config_path)
        return ChatConfig()

    try:
        text = config_path.read_text(encoding="utf-8-sig")
    except OSError as exc:
        logger.error("Failed to open config file: %s (%s)", config_path, exc)
        return ChatConfig()

    config = ChatConfig.from_mapping(parse_settings(text.splitlines()))
    logger.debug("Loaded config from %s (model=%s, tools=%s)", config_path, config.model, ",".join(config.tools))
    return config
