"""Error taxonomy for grammar practice operations.

Every operation raises a subclass of GrammarPracticeError. The web layer
turns them into a uniform ``{"success": false, "message": ...}`` body using
the ``status_code`` carried by each class.
"""

from __future__ import annotations

from enum import Enum


class GrammarPracticeError(Exception):
    """Base error for all grammar practice operations."""

    status_code: int = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ConfigurationError(GrammarPracticeError):
    """Workbook location is unset or inaccessible."""

    status_code = 503


class StoreError(GrammarPracticeError):
    """Underlying tabular store failure or uncoercible cell."""

    status_code = 502


class InvalidRequestError(GrammarPracticeError):
    """Request arguments cannot be processed."""

    status_code = 400


class AuthErrorReason(str, Enum):
    """Reasons an authentication or authorization check fails."""

    INVALID_DOMAIN = "invalid_domain"
    NOT_AUTHORIZED = "not_authorized"
    NO_SESSION = "no_session"
    SESSION_EXPIRED = "session_expired"
    WRONG_ROLE = "wrong_role"
    DOMAIN_REVOKED = "domain_revoked"


_AUTH_MESSAGES = {
    AuthErrorReason.INVALID_DOMAIN: "Please use your school email address ({domain}).",
    AuthErrorReason.NOT_AUTHORIZED: (
        "Email not found in the teacher list or the student roster. "
        "Please contact your teacher if you believe this is an error."
    ),
    AuthErrorReason.NO_SESSION: "No valid session found",
    AuthErrorReason.SESSION_EXPIRED: "Session expired",
    AuthErrorReason.WRONG_ROLE: "Access denied for this user type",
    AuthErrorReason.DOMAIN_REVOKED: "Invalid domain - session terminated",
}


class AuthError(GrammarPracticeError):
    """Authentication or session validation failure."""

    def __init__(self, reason: AuthErrorReason, domain: str = ""):
        self.reason = reason
        super().__init__(_AUTH_MESSAGES[reason].format(domain=domain))

    @property
    def status_code(self) -> int:  # type: ignore[override]
        if self.reason == AuthErrorReason.WRONG_ROLE:
            return 403
        return 401


class NotFoundReason(str, Enum):
    """Which lookup failed."""

    TABLE_NOT_FOUND = "table_not_found"
    DESTINATION_NOT_FOUND = "destination_not_found"


class NotFoundError(GrammarPracticeError):
    """A required sheet could not be located."""

    status_code = 404

    def __init__(self, reason: NotFoundReason, message: str):
        self.reason = reason
        super().__init__(message)
