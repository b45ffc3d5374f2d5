"""Configuration models and loading."""

import json
import os
from collections.abc import Mapping
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError

CONFIG_DIR = Path.home() / ".config" / "webhook-forwarder"
CONFIG_FILE = CONFIG_DIR / "config.json"

# Environment variables that override values from the config file
ENV_OVERRIDES = {
    "PROXY_API_KEY": ("auth", "api_key"),
    "N8N_WEBHOOK_URL": ("upstream", "webhook_url"),
    "N8N_USER": ("upstream", "username"),
    "N8N_PASS": ("upstream", "password"),
}


class ServerSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    host: str = "127.0.0.1"
    port: int = 8080


class UpstreamSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    webhook_url: str = ""
    username: str = ""
    password: str = ""
    timeout: float = 5.0  # httpx default

    @property
    def has_basic_auth(self) -> bool:
        return bool(self.username and self.password)


class AuthSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    api_key: str = ""


class Config(BaseModel):
    model_config = ConfigDict(frozen=True)

    server: ServerSettings = Field(default_factory=ServerSettings)
    upstream: UpstreamSettings = Field(default_factory=UpstreamSettings)
    auth: AuthSettings = Field(default_factory=AuthSettings)


def config_path() -> Path:
    """Return the config file location, honouring WEBHOOK_FORWARDER_CONFIG."""
    override = os.environ.get("WEBHOOK_FORWARDER_CONFIG")
    return Path(override) if override else CONFIG_FILE


def load_config(path: Path | None = None) -> Config:
    """Load configuration from JSON file, creating default if needed.

    Environment variables listed in ENV_OVERRIDES take precedence over the file.
    """
    path = path or config_path()
    data = _read_config_file(path)
    return Config.model_validate(apply_env_overrides(data, os.environ))


def apply_env_overrides(data: dict, environ: Mapping[str, str]) -> dict:
    """Return a copy of raw config data with environment overrides applied."""
    merged = {section: dict(values) for section, values in data.items() if isinstance(values, dict)}
    for env_name, (section, field) in ENV_OVERRIDES.items():
        value = environ.get(env_name)
        if value:
            merged.setdefault(section, {})[field] = value
    return merged


def _read_config_file(path: Path) -> dict:
    if not path.exists():
        path.parent.mkdir(parents=True, exist_ok=True)
        default = Config()
        path.write_text(default.model_dump_json(indent=2))
        return default.model_dump()

    try:
        data = json.loads(path.read_text())
        return Config.model_validate(data).model_dump()
    except (json.JSONDecodeError, ValidationError):
        # Backup corrupted config and recreate default
        backup = path.with_suffix(".json.bak")
        path.rename(backup)
        default = Config()
        path.write_text(default.model_dump_json(indent=2))
        return default.model_dump()
