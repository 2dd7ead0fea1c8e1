"""Identity and session management.

Resolves a verified email to a teacher or student and keeps one session
record per caller identity in an injected SessionStore.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Protocol

import structlog

from grammar_practice.core.errors import AuthError, AuthErrorReason, StoreError
from grammar_practice.db.records import StudentRecord
from grammar_practice.db.sheets_repository import load_roster, load_teachers
from grammar_practice.db.workbook import TabularStore

logger = structlog.get_logger(__name__)

SESSIONS_SCHEMA = "sessions_v1"
SESSIONS_FILENAME = "sessions_v1.json"


def local_now() -> datetime:
    """Current wall-clock time, timezone-aware in the local zone."""
    return datetime.now().astimezone()


class UserType(str, Enum):
    TEACHER = "teacher"
    STUDENT = "student"


@dataclass
class Session:
    """An authenticated caller."""

    user_type: UserType
    user_email: str
    created_at: datetime
    student_info: StudentRecord | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "user_type": self.user_type.value,
            "user_email": self.user_email,
            "created_at": self.created_at.isoformat(),
            "student_info": self.student_info.to_dict() if self.student_info else None,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Session | None:
        """Rebuild a session; None if the session fields are missing or invalid."""
        user_email = data.get("user_email")
        try:
            user_type = UserType(data.get("user_type"))
            created_raw = data.get("created_at")
            created_at = (
                datetime.fromisoformat(created_raw).astimezone() if created_raw else local_now()
            )
        except (TypeError, ValueError):
            return None
        if not user_email:
            return None
        info = data.get("student_info")

        return cls(
            user_type=user_type,
            user_email=user_email,
            created_at=created_at,
            student_info=StudentRecord.from_dict(info) if info else None,
        )


# =============================================================================
# SESSION STORES
# =============================================================================


class SessionStore(Protocol):
    """Single-slot session storage per caller identity."""

    def load(self, identity: str) -> dict[str, Any] | None: ...

    def save(self, identity: str, data: dict[str, Any]) -> None: ...

    def delete(self, identity: str) -> None: ...


class MemorySessionStore:
    """Session store kept in process memory."""

    def __init__(self):
        self._records: dict[str, dict[str, Any]] = {}

    def load(self, identity: str) -> dict[str, Any] | None:
        record = self._records.get(identity)
        return dict(record) if record is not None else None

    def save(self, identity: str, data: dict[str, Any]) -> None:
        self._records[identity] = dict(data)

    def delete(self, identity: str) -> None:
        self._records.pop(identity, None)


class JsonFileSessionStore:
    """Session store persisted as a JSON state file.

    Args:
        state_dir: Directory holding sessions_v1.json
    """

    def __init__(self, state_dir: Path):
        self.path = Path(state_dir) / SESSIONS_FILENAME

    def _read_all(self) -> dict[str, dict[str, Any]]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("sessions_state_corrupt", path=str(self.path), error=str(e))
            return {}
        if not isinstance(data, dict) or data.get("$schema") != SESSIONS_SCHEMA:
            logger.warning(
                "sessions_state_invalid_schema",
                expected=SESSIONS_SCHEMA,
                got=data.get("$schema") if isinstance(data, dict) else None,
            )
            return {}
        sessions = data.get("sessions")
        return sessions if isinstance(sessions, dict) else {}

    def _write_all(self, sessions: dict[str, dict[str, Any]]) -> None:
        payload = {"$schema": SESSIONS_SCHEMA, "sessions": sessions}
        tmp_path = self.path.with_suffix(".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
            tmp_path.replace(self.path)
        except OSError as e:
            raise StoreError(f"Cannot write session state {self.path}: {e}") from e

    def load(self, identity: str) -> dict[str, Any] | None:
        record = self._read_all().get(identity)
        return record if isinstance(record, dict) else None

    def save(self, identity: str, data: dict[str, Any]) -> None:
        sessions = self._read_all()
        sessions[identity] = data
        self._write_all(sessions)

    def delete(self, identity: str) -> None:
        sessions = self._read_all()
        if sessions.pop(identity, None) is not None:
            self._write_all(sessions)


# =============================================================================
# SESSION MANAGER
# =============================================================================


class SessionManager:
    """Authenticates callers and validates their sessions.

    Args:
        store: Workbook holding the Teacher Emails and Student Roster sheets
        session_store: Per-identity session storage
        email_domain: Required email suffix, e.g. "@orono.k12.mn.us"
        max_age: Sessions older than this are expired
        clock: Returns the current time (timezone-aware)
    """

    def __init__(
        self,
        store: TabularStore,
        session_store: SessionStore,
        email_domain: str,
        max_age: timedelta = timedelta(hours=24),
        clock: Callable[[], datetime] = local_now,
    ):
        self.store = store
        self.session_store = session_store
        self.email_domain = email_domain
        self.max_age = max_age
        self.clock = clock

    def is_valid_domain(self, email: str | None) -> bool:
        """True if the email ends with the configured domain suffix."""
        if not email or not isinstance(email, str):
            return False
        return email.lower().endswith(self.email_domain.lower())

    def authenticate(self, email: str) -> Session:
        """Resolve a verified email to a role and start a new session.

        Teachers take precedence over students. Any prior session for the
        same identity is replaced.

        Raises:
            AuthError: INVALID_DOMAIN or NOT_AUTHORIZED
        """
        if not self.is_valid_domain(email):
            logger.info("auth.rejected", email=email, reason="invalid_domain")
            raise AuthError(AuthErrorReason.INVALID_DOMAIN, domain=self.email_domain)

        session: Session | None = None
        if any(t.email == email for t in load_teachers(self.store)):
            session = Session(
                user_type=UserType.TEACHER, user_email=email, created_at=self.clock()
            )
        else:
            student = next((s for s in load_roster(self.store) if s.email == email), None)
            if student is not None:
                session = Session(
                    user_type=UserType.STUDENT,
                    user_email=email,
                    created_at=self.clock(),
                    student_info=student,
                )

        if session is None:
            logger.info("auth.rejected", email=email, reason="not_authorized")
            raise AuthError(AuthErrorReason.NOT_AUTHORIZED)

        self.session_store.save(email, session.to_dict())
        logger.info("auth.succeeded", email=email, user_type=session.user_type.value)
        return session

    def get_current_session(self, identity: str) -> Session | None:
        """Stored session for the identity, or None."""
        if not identity:
            return None
        data = self.session_store.load(identity)
        if not data:
            return None
        return Session.from_dict(data)

    def validate(self, identity: str, required_role: UserType | None = None) -> Session:
        """Check the caller's session.

        Expired sessions and sessions whose email no longer passes the
        domain check are destroyed before raising.

        Raises:
            AuthError: NO_SESSION, SESSION_EXPIRED, WRONG_ROLE or DOMAIN_REVOKED
        """
        session = self.get_current_session(identity)
        if session is None:
            raise AuthError(AuthErrorReason.NO_SESSION)

        if self.clock() - session.created_at > self.max_age:
            self.logout(identity)
            logger.info("session.expired", email=session.user_email)
            raise AuthError(AuthErrorReason.SESSION_EXPIRED)

        if required_role is not None and session.user_type != required_role:
            raise AuthError(AuthErrorReason.WRONG_ROLE)

        if not self.is_valid_domain(session.user_email):
            self.logout(identity)
            logger.warning("session.revoked", email=session.user_email)
            raise AuthError(AuthErrorReason.DOMAIN_REVOKED)

        return session

    def logout(self, identity: str) -> None:
        """Destroy the caller's session. Safe to call repeatedly."""
        self.session_store.delete(identity)
        logger.debug("session.destroyed", identity=identity)
