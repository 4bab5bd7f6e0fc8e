"""apiterm configuration."""

from apiterm.config.loader import default_config_path, load_config
from apiterm.config.schema import AppConfig, LoggingConfig, UIConfig

__all__ = ["AppConfig", "LoggingConfig", "UIConfig", "default_config_path", "load_config"]
