"""Configuration module."""

from shopdesk.config.logging import configure_logging, get_logger, sale_context
from shopdesk.config.settings import Settings, get_settings, reset_settings, shop_timezone

__all__ = [
    "Settings",
    "get_settings",
    "reset_settings",
    "shop_timezone",
    "configure_logging",
    "get_logger",
    "sale_context",
]
