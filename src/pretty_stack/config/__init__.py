"""Configuration loading and validation."""

from .loader import load_config, substitute_env_vars
from .schema import AppConfig, FileLoggingConfig, LoggingConfig, Options

__all__ = [
    # Loader
    "load_config",
    "substitute_env_vars",
    # Root config
    "AppConfig",
    # Sections
    "FileLoggingConfig",
    "LoggingConfig",
    "Options",
]
