"""Core business logic.

Modules:
- errors: error taxonomy shared by every layer
- sessions: identity resolution and per-identity sessions
- catalog: grammar question lookup
- recorder: score attempt recording
- reporter: progress history and class statistics
- services: wiring from configuration
"""

__all__ = [
    "errors",
    "sessions",
    "catalog",
    "recorder",
    "reporter",
    "services",
]
