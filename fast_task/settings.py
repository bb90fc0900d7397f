"""Process settings and the JSON connection-profile store."""

import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from fast_task.errors import ConfigError
from fast_task.models import ConnectionProfile

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path.home() / ".config" / "fast-task" / "config.json"


class FastTaskSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="FAST_TASK_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    config_path: Path = DEFAULT_CONFIG_PATH
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"  # overridden by --verbose

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value: object) -> object:
        return value.upper() if isinstance(value, str) else value


@lru_cache(maxsize=1)
def get_settings() -> FastTaskSettings:
    return FastTaskSettings()


def config_path() -> Path:
    return get_settings().config_path.expanduser()


def load(path: Path | None = None) -> ConnectionProfile:
    """Read the stored profile, returning an empty (unconfigured) one if it is missing or unreadable."""
    path = path or config_path()
    if not path.exists():
        return ConnectionProfile()
    try:
        return ConnectionProfile.model_validate_json(path.read_bytes())
    except (OSError, ValidationError) as exc:
        logger.warning("Ignoring unreadable config %s: %s", path, exc)
        return ConnectionProfile()


def save(profile: ConnectionProfile, path: Path | None = None) -> Path:
    path = path or config_path()
    data = profile.model_dump(by_alias=True)
    data["api_token"] = profile.credential.get_secret_value()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(data, indent=2) + "\n")
    except OSError as exc:
        raise ConfigError(f"Failed to write config to {path}: {exc}") from exc
    logger.debug("Wrote config to %s", path)
    return path


def is_configured(profile: ConnectionProfile) -> bool:
    return profile.is_configured
