"""YAML configuration loader with env var resolution and Pydantic validation.

Loads config from (priority order):
1. explicit path argument
2. ./novaposhta.yaml (working directory)
3. ~/.novaposhta/config.yaml (user home)

Environment variables override YAML: NOVAPOSHTA_<KEY>.
${VAR} references in YAML values resolve from environment at load time.
"""

import logging
import os
import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator

from novaposhta.models import ResponseFormat

logger = logging.getLogger(__name__)

DEFAULT_API_URI = "https://api.novaposhta.ua/v2.0"

_ENV_PREFIX = "NOVAPOSHTA_"
_ENV_VAR_PATTERN = re.compile(r"\$\{([^}]+)\}")


def resolve_env_vars(value: str) -> str:
    """Resolve ${VAR} references in a string from environment variables.

    Args:
        value: String potentially containing ${VAR} references.

    Returns:
        String with all ${VAR} references replaced by their env values.
        Missing env vars resolve to empty string.
    """
    def _replace(match: re.Match) -> str:
        return os.environ.get(match.group(1), "")

    return _ENV_VAR_PATTERN.sub(_replace, value)


def _resolve_env_vars_recursive(data: Any) -> Any:
    """Recursively resolve ${VAR} references in a nested data structure."""
    if isinstance(data, str):
        return resolve_env_vars(data)
    elif isinstance(data, dict):
        return {k: _resolve_env_vars_recursive(v) for k, v in data.items()}
    elif isinstance(data, list):
        return [_resolve_env_vars_recursive(item) for item in data]
    return data


class NovaPoshtaConfig(BaseModel):
    """Connection settings for the Nova Poshta API."""

    api_key: str = ""
    api_uri: str = DEFAULT_API_URI
    language: str = "ru"
    response_format: ResponseFormat = ResponseFormat.JSON
    timeout: float = Field(default=0, ge=0, description="Seconds per call; 0 disables")

    @field_validator("api_uri")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        """Normalize the base URI so endpoint paths can be appended."""
        return value.rstrip("/")


def _find_config_file() -> Path | None:
    """Search for config file in standard locations.

    Returns:
        Path to config file if found, None otherwise.
    """
    candidates = [
        Path.cwd() / "novaposhta.yaml",
        Path.cwd() / "novaposhta.yml",
        Path.home() / ".novaposhta" / "config.yaml",
        Path.home() / ".novaposhta" / "config.yml",
    ]
    for candidate in candidates:
        if candidate.exists():
            return candidate
    return None


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    """Apply NOVAPOSHTA_<KEY> env var overrides to config data.

    Only keys that name a NovaPoshtaConfig field are applied, so
    ``NOVAPOSHTA_API_KEY`` sets ``api_key``.

    Args:
        data: Parsed YAML config dict.

    Returns:
        Config dict with env var overrides applied.
    """
    known_fields = set(NovaPoshtaConfig.model_fields)
    for key, value in os.environ.items():
        if not key.startswith(_ENV_PREFIX):
            continue
        field_name = key[len(_ENV_PREFIX):].lower()
        if field_name in known_fields:
            data[field_name] = value
    return data


def load_config(config_path: str | None = None) -> NovaPoshtaConfig:
    """Load client configuration from YAML with env var resolution.

    Args:
        config_path: Explicit path to config file. If None, searches
            standard locations (cwd, then ~/.novaposhta/).

    Returns:
        Validated NovaPoshtaConfig. Without any file, defaults plus
        environment overrides are used.

    Raises:
        FileNotFoundError: If an explicit config_path does not exist.
    """
    raw_data: dict[str, Any] = {}
    if config_path:
        path: Path | None = Path(config_path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
    else:
        path = _find_config_file()

    if path is not None:
        logger.info("Loading config from %s", path)
        with open(path) as f:
            raw_data = yaml.safe_load(f) or {}

    data = _resolve_env_vars_recursive(raw_data)
    data = _apply_env_overrides(data)
    return NovaPoshtaConfig(**data)
