"""Configuration loader with YAML parsing and environment variable substitution."""

import os
import re
from pathlib import Path

import structlog
import yaml

from pretty_stack.utils.logging import LogEventNames

from .schema import AppConfig

log = structlog.get_logger()


def substitute_env_vars(text: str) -> str:
    """
    Replace ${VAR_NAME} patterns with environment variable values.

    Args:
        text: Text containing ${VAR_NAME} patterns

    Returns:
        Text with environment variables substituted

    Raises:
        ValueError: If a referenced environment variable is not found
    """

    def replacer(match: re.Match[str]) -> str:
        var_name = match.group(1)
        value = os.environ.get(var_name)
        if value is None:
            raise ValueError(f"Environment variable {var_name} not found")
        return value

    return re.sub(r"\$\{([^}]+)\}", replacer, text)


def load_config(path: Path) -> AppConfig:
    """
    Load configuration from YAML file with environment variable substitution.

    Args:
        path: Path to YAML configuration file

    Returns:
        Validated AppConfig instance

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If environment variables are missing or config is invalid
        ValidationError: If config doesn't match schema
    """
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    log.debug(LogEventNames.CONFIG_LOADING, path=str(path))

    with path.open(encoding="utf-8") as f:
        raw_yaml = f.read()

    yaml_with_env = substitute_env_vars(raw_yaml)

    # An empty file means all defaults
    config_dict = yaml.safe_load(yaml_with_env) or {}
    if not isinstance(config_dict, dict):
        raise ValueError(f"Configuration root must be a mapping: {path}")

    config = AppConfig.model_validate(config_dict)
    log.debug(LogEventNames.CONFIG_LOADED, path=str(path))
    return config
