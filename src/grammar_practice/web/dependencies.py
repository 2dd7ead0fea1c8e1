"""FastAPI dependencies: caller identity and operation services."""

from __future__ import annotations

from fastapi import Request

from grammar_practice.config.app_config import load_app_config
from grammar_practice.core.services import Services, build_services

# Global services instance, built on first successful use
_services: Services | None = None


def get_services() -> Services:
    """Get the shared services, opening the configured workbook on first use.

    Raises:
        ConfigurationError: While the workbook location is unset or missing.
    """
    global _services
    if _services is None:
        _services = build_services(load_app_config())
    return _services


def set_services(services: Services | None) -> None:
    """Install prebuilt services (for testing), or clear with None."""
    global _services
    _services = services


def get_identity(request: Request) -> str:
    """Verified email supplied by the upstream identity provider."""
    header = load_app_config().auth.identity_header
    return request.headers.get(header, "").strip()
