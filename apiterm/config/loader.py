import os
import re
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, ValidationError

from apiterm.config.schema import AppConfig
from apiterm.errors import ConfigError
from apiterm.logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_CONFIG_PATH = Path("~/.config/apiterm/apiterm.yml")


def expand_env_vars(config: object) -> object:
    """Recursively replace ${VAR} patterns with environment variable values.

    Unknown variables are left untouched.
    """
    if isinstance(config, dict):
        return {k: expand_env_vars(v) for k, v in config.items()}
    if isinstance(config, list):
        return [expand_env_vars(item) for item in config]
    if isinstance(config, str):

        def replace_env_var(match: re.Match[str]) -> str:
            return os.getenv(match.group(1), match.group(0))

        return re.sub(r"\$\{([^}]+)\}", replace_env_var, config)
    return config


def _warn_unknown_keys(model: BaseModel, path: str, config_path: Path) -> None:
    """Recursively warn about unknown keys in a model and its nested models."""
    if model.model_extra:
        logger.warning("Unknown keys in {} at {}: {}", path, config_path, list(model.model_extra.keys()))
    for field_name, field_value in model.__dict__.items():
        if isinstance(field_value, BaseModel):
            _warn_unknown_keys(field_value, f"{path}.{field_name}", config_path)


def default_config_path() -> Path:
    """Return the config path from ``APITERM_CONFIG`` or the per-user default."""
    env_path = os.environ.get("APITERM_CONFIG")
    if env_path:
        return Path(env_path).expanduser()
    return DEFAULT_CONFIG_PATH.expanduser()


def load_config(path: Optional[Path] = None) -> AppConfig:
    """Load and validate configuration from a YAML file.

    A missing file yields defaults, as does one that cannot be read or parsed.
    A file that parses but fails validation raises ConfigError.
    """
    if path is None:
        path = default_config_path()
    if not path.exists():
        return AppConfig()

    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.warning("Failed to read config file {}: {}", path, e)
        return AppConfig()

    if not isinstance(raw, dict):
        raise ConfigError(f"{path}: top level must be a mapping, got {type(raw).__name__}")

    try:
        model = AppConfig.model_validate(expand_env_vars(raw))
    except ValidationError as e:
        raise ConfigError(f"{path}: {e}") from e
    _warn_unknown_keys(model, "root", path)
    return model
