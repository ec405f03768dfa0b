"""Configuration for the Qayd client."""

from qayd.config.logging import configure_logging, get_logger
from qayd.config.navigation import NavigationItem, load_navigation
from qayd.config.settings import FlatSettings, get_settings

__all__ = [
    "FlatSettings",
    "NavigationItem",
    "configure_logging",
    "get_logger",
    "get_settings",
    "load_navigation",
]
