"""Application configuration loader.

Loads configuration from data/config/app_config_v1.yaml, applies
environment overrides and falls back to built-in defaults.

Usage:
    from grammar_practice.config.app_config import load_app_config

    config = load_app_config()
    workbook = config.store.require_workbook_path()
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import structlog
import yaml

from grammar_practice.core.errors import ConfigurationError

logger = structlog.get_logger(__name__)

# Config file path (relative to project root)
CONFIG_FILE = Path("data/config/app_config_v1.yaml")

# Environment overrides
WORKBOOK_ENV = "GRAMMAR_PRACTICE_WORKBOOK"
EMAIL_DOMAIN_ENV = "GRAMMAR_PRACTICE_EMAIL_DOMAIN"

DEFAULT_EMAIL_DOMAIN = "@orono.k12.mn.us"
DEFAULT_IDENTITY_HEADER = "X-Verified-Email"


@dataclass
class StoreConfig:
    """Where the workbook lives and how proficiency sheets are found."""

    workbook_path: str | None = None
    proficiency_tables: dict[str, str] = field(default_factory=dict)

    def require_workbook_path(self) -> Path:
        """Get the workbook location, failing if unset or missing.

        Raises:
            ConfigurationError: If the location is unset or the file does not exist.
        """
        if not self.workbook_path:
            raise ConfigurationError(
                "Workbook location not configured. "
                f"Run 'grammar configure <workbook>' or set {WORKBOOK_ENV}."
            )
        path = Path(self.workbook_path)
        if not path.is_file():
            raise ConfigurationError(f"Workbook not accessible: {path}")
        return path


@dataclass
class AuthConfig:
    """Identity and session settings."""

    email_domain: str = DEFAULT_EMAIL_DOMAIN
    identity_header: str = DEFAULT_IDENTITY_HEADER
    session_max_age_hours: float = 24


@dataclass
class AppConfig:
    """Application-wide configuration."""

    store: StoreConfig = field(default_factory=StoreConfig)
    auth: AuthConfig = field(default_factory=AuthConfig)
    paths: dict[str, str] = field(default_factory=dict)

    @property
    def state_dir(self) -> Path:
        return Path(self.paths.get("state_dir", "data/state"))


# Module-level cache
_cached_config: AppConfig | None = None


def _get_defaults() -> dict[str, Any]:
    """Get default configuration values."""
    return {
        "store": {
            "workbook_path": None,
            "proficiency_tables": {},
        },
        "auth": {
            "email_domain": DEFAULT_EMAIL_DOMAIN,
            "identity_header": DEFAULT_IDENTITY_HEADER,
            "session_max_age_hours": 24,
        },
        "paths": {
            "state_dir": "data/state",
            "config_dir": "data/config",
        },
    }


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    """Overlay environment variables on top of file values."""
    workbook = os.environ.get(WORKBOOK_ENV)
    if workbook:
        data.setdefault("store", {})["workbook_path"] = workbook

    domain = os.environ.get(EMAIL_DOMAIN_ENV)
    if domain:
        data.setdefault("auth", {})["email_domain"] = domain

    return data


def _parse_config(data: dict[str, Any]) -> AppConfig:
    """Parse configuration dictionary into AppConfig object."""
    store_data = data.get("store") or {}
    store = StoreConfig(
        workbook_path=store_data.get("workbook_path"),
        proficiency_tables={
            str(k): str(v) for k, v in (store_data.get("proficiency_tables") or {}).items()
        },
    )

    auth_data = data.get("auth") or {}
    auth = AuthConfig(
        email_domain=auth_data.get("email_domain", DEFAULT_EMAIL_DOMAIN),
        identity_header=auth_data.get("identity_header", DEFAULT_IDENTITY_HEADER),
        session_max_age_hours=float(auth_data.get("session_max_age_hours", 24)),
    )

    paths = data.get("paths") or {}

    return AppConfig(store=store, auth=auth, paths=paths)


def load_app_config(force_reload: bool = False) -> AppConfig:
    """Load application config.

    Args:
        force_reload: If True, ignore cached config and reload from file.

    Returns:
        AppConfig object with all settings.
    """
    global _cached_config

    if _cached_config is not None and not force_reload:
        return _cached_config

    data: dict[str, Any]

    if CONFIG_FILE.exists():
        logger.debug("config.loaded", source=str(CONFIG_FILE))
        data = yaml.safe_load(CONFIG_FILE.read_text(encoding="utf-8")) or {}
    else:
        logger.info("config.using_defaults")
        data = _get_defaults()

    _cached_config = _parse_config(_apply_env_overrides(data))
    return _cached_config


def save_workbook_location(workbook_path: Path) -> Path:
    """Persist the workbook location to the config file.

    Keeps every other setting already present in the file.

    Returns:
        Path of the written config file.
    """
    if CONFIG_FILE.exists():
        data = yaml.safe_load(CONFIG_FILE.read_text(encoding="utf-8")) or {}
    else:
        data = _get_defaults()

    data.setdefault("store", {})["workbook_path"] = str(workbook_path)

    CONFIG_FILE.parent.mkdir(parents=True, exist_ok=True)
    CONFIG_FILE.write_text(
        yaml.safe_dump(data, sort_keys=False, allow_unicode=True), encoding="utf-8"
    )
    clear_config_cache()

    logger.info("config.workbook_saved", workbook=str(workbook_path))
    return CONFIG_FILE


def clear_config_cache() -> None:
    """Clear the configuration cache.

    Useful for testing or when config is modified at runtime.
    """
    global _cached_config
    _cached_config = None
