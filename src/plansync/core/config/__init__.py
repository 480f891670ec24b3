"""Core configuration loading exports."""

from plansync.core.config.loader import DEFAULT_CONFIG_NAME, load_config

__all__ = ["DEFAULT_CONFIG_NAME", "load_config"]
