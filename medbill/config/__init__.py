"""Configuration package."""

from .defaults import DEFAULT_CONFIG
from .settings import Config, load_config, save_config

__all__ = ["DEFAULT_CONFIG", "Config", "load_config", "save_config"]
