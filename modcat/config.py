"""Configuration — scanner settings from an optional YAML file and the environment.

Values are resolved in precedence order:
    environment variables  >  YAML settings file  >  defaults
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Mapping, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError

from modcat.github.client import DEFAULT_API_URL, DEFAULT_TIMEOUT
from modcat.registry.cache import DEFAULT_TTL
from modcat.spec import HUGO_VERSION, PLATFORM_DOMAIN

logger = logging.getLogger(__name__)

# Environment variable → settings field
ENV_VARS = {
    "GITHUB_TOKEN": "token",
    "MODCAT_ORG": "organization",
    "MODCAT_API_URL": "api_url",
    "MODCAT_CENTRAL_REGISTRY": "central_registry",
    "MODCAT_CONCURRENCY": "concurrency",
    "MODCAT_LOG_LEVEL": "log_level",
    "MODCAT_LOG_FILE": "log_file",
}


class ConfigError(Exception):
    """Raised when scanner configuration is invalid or missing."""


class Settings(BaseModel):
    """Everything the scanner needs to know about the platform."""

    organization: str = "info-tech-io"
    repo_prefix: str = "mod_"
    api_url: str = DEFAULT_API_URL
    github_host: str = "github.com"
    branch: str = "main"
    platform_domain: str = PLATFORM_DOMAIN
    hugo_version: str = HUGO_VERSION
    token: Optional[str] = None
    central_registry: Path = Path("modules.json")
    cache_ttl: float = Field(default=DEFAULT_TTL, gt=0)
    cache_central: bool = False  # central entries are re-read on every lookup
    request_timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0)
    concurrency: int = Field(default=1, ge=1)
    log_level: str = "INFO"
    log_file: Optional[Path] = None


def load_settings(
    path: str | Path | None = None,
    env: Mapping[str, str] | None = None,
) -> Settings:
    """Load settings from an optional YAML file, overlaid with environment variables.

    Args:
        path: YAML settings file. The mapping may sit under a ``modcat`` key.
        env: Environment to read (default: ``os.environ``).

    Raises:
        ConfigError: If the file is missing, unreadable, or holds invalid values.
    """
    env = os.environ if env is None else env
    data: dict = {}

    if path is not None:
        data = _read_yaml(Path(path))

    for var, field_name in ENV_VARS.items():
        value = env.get(var)
        if value:
            data[field_name] = value

    try:
        settings = Settings.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e

    logger.debug(
        "Settings: org=%s prefix=%s central=%s token=%s",
        settings.organization,
        settings.repo_prefix,
        settings.central_registry,
        "set" if settings.token else "unset",
    )
    return settings


def _read_yaml(path: Path) -> dict:
    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug("Loading settings from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    section = data.get("modcat", data)
    if not isinstance(section, dict):
        raise ConfigError(f"Expected a mapping under 'modcat' in {path}")
    return dict(section)
