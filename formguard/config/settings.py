"""
Shared validation settings.

One ValidationSettings value is the single source for parameters every
environment needs (the password pattern, for instance). The server adapter
reads them directly; the client form is rendered from the same values.

Load order (later wins): model defaults, YAML file, .env file, FORMGUARD_*
environment variables.
"""

import os
from pathlib import Path
from typing import Any, Literal

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

from formguard.core.predicates.builtin import EMAIL_PATTERN

ENV_PREFIX = "FORMGUARD_"

DEFAULT_PASSWORD_PATTERN = r"^(?=.*\d).{4,8}$"


class ValidationSettings(BaseModel):
    """
    Configuration shared by every environment.

    Attributes:
        password_pattern: Regex the password must fully match
        email_pattern: Regex used for the configurable email format rule
        log_level: DEBUG, INFO, WARNING, ERROR or CRITICAL
        log_format: "json" or "text"
        rules_path: Optional YAML rule set file
    """

    password_pattern: str = Field(DEFAULT_PASSWORD_PATTERN, min_length=1)
    email_pattern: str = Field(EMAIL_PATTERN, min_length=1)
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_format: Literal["json", "text"] = "json"
    rules_path: Path | None = None

    class Config:
        frozen = True

    @field_validator("log_level", mode="before")
    @classmethod
    def upper_log_level(cls, v):
        return v.upper() if isinstance(v, str) else v

    def parameters(self) -> dict[str, Any]:
        """Rule parameters exposed to environment adapters."""
        return {
            "password_pattern": self.password_pattern,
            "email_pattern": self.email_pattern,
        }


def load_settings(
    config_path: str | Path | None = None,
    env_file: str | Path | None = None,
) -> ValidationSettings:
    """
    Load settings from an optional YAML file and the environment.

    Args:
        config_path: YAML file with a top-level ``settings`` mapping (or a flat mapping)
        env_file: Optional .env file loaded before reading environment variables

    Returns:
        Frozen ValidationSettings

    Raises:
        FileNotFoundError: If config_path is given but missing
        ValueError: If the YAML file is not a mapping
    """
    values: dict[str, Any] = {}

    if config_path is not None:
        path = Path(config_path)
        if not path.exists():
            raise FileNotFoundError(f"Settings file not found: {config_path}")
        with open(path) as f:
            config = yaml.safe_load(f) or {}
        if not isinstance(config, dict):
            raise ValueError(f"Settings file {config_path} must contain a mapping")
        values.update(config.get("settings", config) or {})

    if env_file is not None:
        load_dotenv(env_file, override=True)

    for name in ValidationSettings.model_fields:
        env_value = os.getenv(f"{ENV_PREFIX}{name.upper()}")
        if env_value:
            values[name] = env_value

    return ValidationSettings(**values)
