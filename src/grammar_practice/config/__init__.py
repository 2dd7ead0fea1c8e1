"""Configuration package for grammar practice."""

from grammar_practice.config.app_config import (
    AppConfig,
    AuthConfig,
    StoreConfig,
    clear_config_cache,
    load_app_config,
    save_workbook_location,
)

__all__ = [
    "AppConfig",
    "AuthConfig",
    "StoreConfig",
    "clear_config_cache",
    "load_app_config",
    "save_workbook_location",
]
