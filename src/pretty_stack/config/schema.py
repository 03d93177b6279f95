"""Pydantic models for configuration schema."""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Options(BaseModel):
    """Rendering options for one prettified trace."""

    model_config = ConfigDict(frozen=True)

    underline: str = Field("‾", description="Character repeated to underline the failing token")
    no_trace: bool = Field(False, description="Show only the frame that threw")
    smart_underline: bool = Field(True, description="Size the underline to the failing token")
    skip_node_files: bool = Field(False, description="Drop frames from node: internals")
    skip_modules: tuple[str, ...] = Field((), description="node_modules packages to drop")
    colors: bool = Field(True, description="Emit ANSI colors")

    @field_validator("underline")
    @classmethod
    def validate_underline(cls, v: str) -> str:
        """Reject an empty underline."""
        if not v:
            raise ValueError("Underline must not be empty")
        return v

    @field_validator("skip_modules")
    @classmethod
    def validate_skip_modules(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        """Reject blank module names, which would match every package."""
        for module in v:
            if not module.strip():
                raise ValueError("Module names in skip_modules must not be blank")
        return v


class FileLoggingConfig(BaseModel):
    """File logging configuration."""

    enabled: bool = False
    path: Path = Path("pretty-stack.log")


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"
    format: Literal["json", "console"] = "console"
    file: FileLoggingConfig = FileLoggingConfig()


class AppConfig(BaseSettings):
    """Root configuration for the pretty-stack command."""

    options: Options = Options()
    logging: LoggingConfig = LoggingConfig()

    model_config = SettingsConfigDict(
        env_prefix="PRETTY_STACK_",
        env_nested_delimiter="__",
    )
