"""Installer configuration: JSON file plus environment overrides."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

from winsvc_installer.errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_NAME = "installer.json"

ENV_PREFIX = "WINSVC_INSTALLER_"
ENV_NAME_SUGGESTIONS = f"{ENV_PREFIX}NAME_SUGGESTIONS"
ENV_LOG_DIR = f"{ENV_PREFIX}LOG_DIR"


class InstallerConfig(BaseModel):
    """Settings that shape prompting, logging and external-process waits."""

    name_suggestions: list[str] = Field(default_factory=list)
    log_dir: Path = Path("log")
    log_level: str = "INFO"
    command_timeout_seconds: float | None = None
    child_timeout_seconds: float | None = None
    stop_on_install_failure: bool = False


def default_config_path() -> Path:
    """``installer.json`` in the current working directory."""
    return Path.cwd() / DEFAULT_CONFIG_NAME


def _apply_env_overrides(data: dict[str, object]) -> dict[str, object]:
    """Merge ``WINSVC_INSTALLER_*`` variables into the raw config data."""
    result = dict(data)
    raw_names = os.environ.get(ENV_NAME_SUGGESTIONS, "")
    extra = [name.strip() for name in raw_names.split(";") if name.strip()]
    if extra:
        existing = result.get("name_suggestions", [])
        base = list(existing) if isinstance(existing, list) else []
        result["name_suggestions"] = [*base, *extra]
    log_dir = os.environ.get(ENV_LOG_DIR, "").strip()
    if log_dir:
        result["log_dir"] = log_dir
    return result


def load_config(path: Path | None = None) -> InstallerConfig:
    """Load the config file at *path* (default: ``./installer.json``).

    A missing file yields defaults. Unreadable JSON or values that fail
    validation raise `ConfigError`.
    """
    config_path = path if path is not None else default_config_path()
    data: dict[str, object] = {}
    if config_path.is_file():
        try:
            loaded = json.loads(config_path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as exc:
            msg = f"Could not read config file {config_path}: {exc}"
            raise ConfigError(msg) from exc
        if not isinstance(loaded, dict):
            msg = f"Config file {config_path} must contain a JSON object"
            raise ConfigError(msg)
        data = loaded
        logger.debug("Loaded config from %s", config_path)
    else:
        logger.debug("No config file at %s, using defaults", config_path)

    try:
        config = InstallerConfig.model_validate(_apply_env_overrides(data))
    except ValidationError as exc:
        msg = f"Invalid config in {config_path}: {exc}"
        raise ConfigError(msg) from exc

    config.name_suggestions = [n.strip() for n in config.name_suggestions if n.strip()]
    return config
