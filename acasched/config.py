"""
Runtime settings, read from the environment and overridden by CLI options.
"""

import os
from pathlib import Path
from typing import Any, Dict

from pydantic import BaseModel, ValidationError, field_validator

from .errors import ConfigError

# Environment variable -> Settings field
ENV_VARS = {
    "AZURE_SUBSCRIPTION_ID": "subscription_id",
    "ACASCHED_LOG_DIR": "log_dir",
    "ACASCHED_LOG_PREFIX": "log_prefix",
    "ACASCHED_AUTO_INSTALL": "auto_install",
}


class Settings(BaseModel):
    """Validated configuration for one invocation."""
    subscription_id: str
    log_dir: Path = Path(".")
    log_prefix: str = "ContainerApps"
    auto_install: bool = True

    @field_validator("subscription_id")
    @classmethod
    def _subscription_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("subscription id must not be empty")
        return value

    @field_validator("log_prefix")
    @classmethod
    def _prefix_is_plain_name(cls, value: str) -> str:
        value = value.strip()
        if "/" in value or "\\" in value:
            raise ValueError("log prefix must not contain path separators")
        return value

    @classmethod
    def from_env(cls, **overrides: Any) -> "Settings":
        """
        Build settings from environment variables, then apply overrides.

        Overrides set to None are ignored so unset CLI options fall through to
        the environment.

        Raises:
            ConfigError: If the resulting settings are invalid
        """
        data: Dict[str, Any] = {}
        for env_name, field_name in ENV_VARS.items():
            value = os.environ.get(env_name)
            if value is not None:
                data[field_name] = value

        data.update({key: value for key, value in overrides.items() if value is not None})

        if "subscription_id" not in data:
            raise ConfigError("No subscription id configured. Set AZURE_SUBSCRIPTION_ID or pass --subscription-id")

        try:
            return cls(**data)
        except ValidationError as e:
            raise ConfigError(f"Invalid settings: {e}") from e
