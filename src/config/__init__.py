"""Configuration module for the workforce platform."""

from .database import DatabaseSettings, get_database_settings
from .settings import ChainSettings, Settings, get_settings

__all__ = [
    "ChainSettings",
    "DatabaseSettings",
    "get_database_settings",
    "Settings",
    "get_settings",
]
