"""YAML client configuration loader."""

from __future__ import annotations

import os
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, SecretStr, ValidationError

from incidentapi.errors import ConfigError

DEFAULT_CONFIG_PATH = Path("incidentapi.yaml")
TOKEN_ENV_VAR = "INCIDENTAPI_TOKEN"


class ClientConfig(BaseModel):
    """Immutable settings handed to the HTTP gateway."""

    model_config = ConfigDict(frozen=True)

    base_url: str
    api_token: SecretStr
    timeout: float = Field(30.0, gt=0)
    accept: str = "application/json"
    user_agent: str = "incidentapi/0.1"
    default_actor: str | None = None


class ConfigFile(BaseModel):
    client: ClientConfig


def load_config(config_path: Path = DEFAULT_CONFIG_PATH) -> ClientConfig:
    """Load and validate the client configuration file.

    The file holds a single ``client`` mapping. When ``api_token`` is left
    out of the file, it is read from ``INCIDENTAPI_TOKEN``.

    Args:
        config_path: Path to the YAML file.

    Returns:
        A frozen ClientConfig.

    Raises:
        ConfigError: If the file is missing, unreadable or invalid.
    """
    if not config_path.is_file():
        raise ConfigError(f"Missing configuration file: {config_path}")

    try:
        with open(config_path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Cannot read {config_path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Invalid {config_path}: expected a mapping")

    client = data.get("client")
    if isinstance(client, dict) and "api_token" not in client:
        token = os.environ.get(TOKEN_ENV_VAR)
        if token:
            data["client"] = {**client, "api_token": token}

    try:
        return ConfigFile.model_validate(data).client
    except ValidationError as e:
        raise ConfigError(f"Invalid {config_path}: {e}") from e
