"""Configuration module for gamebot."""

from gamebot.config.loader import get_config_path, load_config, save_config
from gamebot.config.schema import Config

__all__ = ["Config", "get_config_path", "load_config", "save_config"]
