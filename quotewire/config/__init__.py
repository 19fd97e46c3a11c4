"""Configuration module."""

from quotewire.config.logging import configure_logging, get_logger
from quotewire.config.settings import Settings, get_settings, reset_settings

__all__ = [
    "Settings",
    "get_settings",
    "reset_settings",
    "configure_logging",
    "get_logger",
]
