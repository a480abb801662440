"""Transport configuration loader.

Loads transport and logging settings from a YAML file and validates them
against a JSON schema before use.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from jsonschema import Draft202012Validator

from mcp_stdio.transports.base import DEFAULT_SHUTDOWN_SIGNALS

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

CONFIG_SCHEMA: dict[str, Any] = {
    "type": "object",
    "required": ["version"],
    "properties": {
        "version": {"type": "string"},
        "transport": {
            "type": "object",
            "properties": {
                "shutdown_signals": {
                    "type": "array",
                    "items": {"type": "string", "minLength": 1},
                },
                "skip_blank_lines": {"type": "boolean"},
            },
            "additionalProperties": False,
        },
        "logging": {
            "type": "object",
            "properties": {
                "level": {"type": "string", "enum": LOG_LEVELS},
                "file": {"type": "string"},
                "json": {"type": "boolean"},
            },
            "additionalProperties": False,
        },
    },
}


class ConfigError(Exception):
    """Raised when configuration loading or validation fails."""

    pass


def expand_env_vars(value: str) -> str:
    """Expand ${VAR_NAME} references. Unknown variables are left unchanged."""
    pattern = re.compile(r"\$\{([^}]+)\}")

    def replacer(match: re.Match[str]) -> str:
        var_name = match.group(1)
        env_value = os.environ.get(var_name)
        if env_value is not None:
            return env_value
        if var_name == "HOME":
            return os.path.expanduser("~")
        return match.group(0)

    return pattern.sub(replacer, value)


@dataclass
class TransportConfig:
    """Settings for the stdio transport and its logging."""

    version: str = "1.0"

    # Transport settings
    shutdown_signals: list[str] = field(default_factory=lambda: list(DEFAULT_SHUTDOWN_SIGNALS))
    skip_blank_lines: bool = False

    # Logging settings
    log_level: str = "INFO"
    log_file: str = ""
    log_json: bool = False

    @classmethod
    def from_dict(cls, config: dict[str, Any]) -> TransportConfig:
        """Create a TransportConfig from a configuration dictionary.

        Args:
            config: Dictionary parsed from YAML.

        Returns:
            TransportConfig with defaults filled in.
        """
        transport = config.get("transport", {})
        logging_cfg = config.get("logging", {})

        return cls(
            version=config.get("version", "1.0"),
            shutdown_signals=list(
                transport.get("shutdown_signals", DEFAULT_SHUTDOWN_SIGNALS)
            ),
            skip_blank_lines=transport.get("skip_blank_lines", False),
            log_level=logging_cfg.get("level", "INFO"),
            log_file=expand_env_vars(logging_cfg.get("file", "")),
            log_json=logging_cfg.get("json", False),
        )


def validate_config(config: Any) -> None:
    """Validate a parsed configuration document.

    Raises:
        ConfigError: On the first schema violation.
    """
    errors = list(Draft202012Validator(CONFIG_SCHEMA).iter_errors(config))
    if errors:
        error = errors[0]
        path = ".".join(str(p) for p in error.path) if error.path else "root"
        raise ConfigError(f"Config validation failed at '{path}': {error.message}")


def load_config(path: Path) -> TransportConfig:
    """Load transport configuration from a YAML file.

    Args:
        path: Path to the configuration file.

    Returns:
        TransportConfig instance.

    Raises:
        ConfigError: If the file cannot be found, parsed, or validated.
    """
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")

    try:
        with open(path, encoding="utf-8") as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse config YAML: {e}") from e

    if not isinstance(config, dict):
        raise ConfigError("Config must be a YAML mapping")

    if "version" not in config:
        raise ConfigError("Config must include 'version' field")

    validate_config(config)
    return TransportConfig.from_dict(config)
