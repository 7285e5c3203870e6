"""
Configuration management for Module Scorecard.

Settings are resolved with the following priority:
1. Process environment (after loading a local .env file)
2. .module-scorecard.toml in the working directory
3. pyproject.toml in the working directory ([tool.module-scorecard])
4. Built-in defaults
"""

import os
import tomllib
from pathlib import Path
from typing import Any, NamedTuple

from dotenv import load_dotenv

# Configuration files are looked up relative to the working directory
PROJECT_ROOT = Path.cwd()

GITHUB_API = "https://api.github.com"
NPM_REGISTRY = "https://registry.npmjs.org"

DEFAULT_LOG_LEVEL = "info"

# LOG_LEVEL may be given numerically: 0 silent, 1 info, 2 debug, 3 error
NUMERIC_LOG_LEVELS = {
    "0": "silent",
    "1": "info",
    "2": "debug",
    "3": "error",
}

# Global configuration for SSL verification
# Default: True (verify SSL certificates)
VERIFY_SSL = True


class ScorecardConfig(NamedTuple):
    """Process-wide settings, read once at startup."""

    github_token: str | None
    log_level: str = DEFAULT_LOG_LEVEL
    log_file: Path | None = None
    verify_ssl: bool = True
    github_api: str = GITHUB_API
    npm_registry: str = NPM_REGISTRY


def load_config_file(config_path: Path) -> dict:
    """Load a TOML configuration file."""
    if not config_path.exists():
        return {}
    try:
        with open(config_path, "rb") as f:
            return tomllib.load(f)
    except Exception as e:
        raise ValueError(f"Failed to load config from {config_path}: {e}") from e


def get_tool_config() -> dict[str, Any]:
    """
    Return the [tool.module-scorecard] table.

    .module-scorecard.toml takes priority over pyproject.toml; the tables are
    not merged.
    """
    for filename in (".module-scorecard.toml", "pyproject.toml"):
        config_path = PROJECT_ROOT / filename
        if config_path.exists():
            config = load_config_file(config_path)
            table = config.get("tool", {}).get("module-scorecard", {})
            if table:
                return table
    return {}


def normalize_log_level(value: str | int | None) -> str:
    """
    Map a LOG_LEVEL value to a level name.

    Accepts the numeric form (0-3) or a name such as "debug". Unknown values
    fall back to the default level.
    """
    if value is None:
        return DEFAULT_LOG_LEVEL
    text = str(value).strip().lower()
    if text in NUMERIC_LOG_LEVELS:
        return NUMERIC_LOG_LEVELS[text]
    if text in {"silent", "debug", "info", "warning", "error", "critical"}:
        return text
    return DEFAULT_LOG_LEVEL


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in {"1", "true", "yes", "on"}


def load_config() -> ScorecardConfig:
    """
    Build the process configuration.

    Returns:
        ScorecardConfig with the credential, logging and SSL settings.
    """
    load_dotenv()
    tool_config = get_tool_config()

    log_level = normalize_log_level(
        os.getenv("LOG_LEVEL") or tool_config.get("log_level")
    )

    log_file_value = os.getenv("LOG_FILE") or tool_config.get("log_file")
    log_file = Path(log_file_value).expanduser() if log_file_value else None

    verify_ssl = bool(tool_config.get("verify_ssl", True))
    insecure = os.getenv("MODULE_SCORECARD_INSECURE")
    if insecure:
        verify_ssl = not _parse_bool(insecure)

    return ScorecardConfig(
        github_token=os.getenv("GITHUB_TOKEN") or None,
        log_level=log_level,
        log_file=log_file,
        verify_ssl=verify_ssl,
    )


def set_verify_ssl(verify: bool) -> None:
    """
    Set the SSL verification setting globally.

    Args:
        verify: Whether to verify SSL certificates.
    """
    global VERIFY_SSL
    VERIFY_SSL = verify


def get_verify_ssl() -> bool:
    """
    Get the current SSL verification setting.

    Returns:
        Whether SSL verification is enabled.
    """
    return VERIFY_SSL
