"""Progress and statistics reporting over the proficiency sheets.

Responsibilities:
- Per-student attempt history (student and teacher views)
- Teacher roster lookup by name derived from the teacher's email
- Class statistics: totals, averages, today's activity, per-unit breakdown
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Iterable

import structlog

from grammar_practice.core.errors import (
    InvalidRequestError,
    NotFoundError,
    NotFoundReason,
)
from grammar_practice.core.sessions import SessionManager, UserType
from grammar_practice.db.records import (
    ScoreAttempt,
    StudentRecord,
    normalize_unit,
    round_half_up,
)
from grammar_practice.db.sheets_repository import (
    find_proficiency_sheet,
    load_attempts,
    load_roster,
    proficiency_sheets,
)
from grammar_practice.db.workbook import TabularStore

logger = structlog.get_logger(__name__)

# =============================================================================
# DATA CLASSES
# =============================================================================


@dataclass
class UnitStats:
    """Aggregate of all attempts for one unit."""

    unit: str
    average_score: int
    sessions: int


@dataclass
class ClassStats:
    """Aggregate of all attempts by one teacher's students."""

    total_students: int
    total_sessions: int = 0
    average_score: int = 0
    active_today: int = 0
    unit_breakdown: list[UnitStats] = field(default_factory=list)


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================


def teacher_display_name(email: str) -> str:
    """Derive a teacher's name from their email.

    ``jane.doe@school.org`` -> ``jane doe`` (first dot only).
    """
    return email.split("@")[0].replace(".", " ", 1)


def sort_newest_first(attempts: Iterable[ScoreAttempt]) -> list[ScoreAttempt]:
    """Sort by timestamp descending; equal timestamps keep their order."""
    return sorted(attempts, key=lambda a: a.timestamp, reverse=True)


def unit_sort_key(unit: str) -> tuple[int, float, str]:
    """Numeric units first by value, then other labels alphabetically."""
    try:
        value = float(unit)
    except ValueError:
        return (1, 0.0, unit)
    if math.isnan(value):
        return (1, 0.0, unit)
    return (0, value, unit)


def _mean_percentage(attempts: list[ScoreAttempt]) -> int:
    if not attempts:
        return 0
    return round_half_up(sum(a.percentage for a in attempts) / len(attempts))


# =============================================================================
# REPORTER
# =============================================================================


class ProgressReporter:
    """Read-only reports built from the roster and proficiency sheets."""

    def __init__(
        self,
        store: TabularStore,
        sessions: SessionManager,
        proficiency_tables: dict[str, str] | None = None,
    ):
        self.store = store
        self.sessions = sessions
        self.proficiency_tables = proficiency_tables or {}

    def _all_attempts(self) -> list[ScoreAttempt]:
        attempts: list[ScoreAttempt] = []
        for sheet_name in proficiency_sheets(self.store):
            attempts.extend(load_attempts(self.store, sheet_name))
        return attempts

    def get_student_progress(
        self, identity: str, requested_email: str | None = None
    ) -> list[ScoreAttempt]:
        """Attempt history of one student, newest first.

        Teachers name the student and search every proficiency sheet.
        Students always get their own history from their teacher's sheet;
        any requested email is ignored.

        Raises:
            InvalidRequestError: Teacher caller without a student email
            NotFoundError: TABLE_NOT_FOUND if a student's teacher has no sheet
        """
        session = self.sessions.validate(identity)

        if session.user_type == UserType.TEACHER:
            if not requested_email:
                raise InvalidRequestError("Student email is required")
            target = requested_email
            candidates = self._all_attempts()
        else:
            target = session.user_email
            teacher_name = session.student_info.teacher_name if session.student_info else ""
            sheet_name = find_proficiency_sheet(
                self.store, teacher_name, self.proficiency_tables
            )
            if sheet_name is None:
                raise NotFoundError(
                    NotFoundReason.TABLE_NOT_FOUND,
                    f"Proficiency sheet not found for teacher: {teacher_name}",
                )
            candidates = load_attempts(self.store, sheet_name)

        return sort_newest_first(a for a in candidates if a.student_email == target)

    def get_teacher_students(self, identity: str) -> list[StudentRecord]:
        """Roster entries whose teacher column contains the caller's name.

        Matching is a case-insensitive substring test, so values such as
        "Jane Doe (Period 3)" still match.
        """
        session = self.sessions.validate(identity, UserType.TEACHER)

        name = teacher_display_name(session.user_email).lower()
        return [
            s
            for s in load_roster(self.store)
            if s.teacher_name and name in s.teacher_name.lower()
        ]

    def _teacher_attempts(self, identity: str) -> tuple[list[StudentRecord], list[ScoreAttempt]]:
        students = self.get_teacher_students(identity)
        emails = {s.email for s in students}
        attempts = [a for a in self._all_attempts() if a.student_email in emails]
        return students, attempts

    def get_class_statistics(self, identity: str) -> ClassStats:
        """Totals, averages and per-unit breakdown for the caller's class."""
        students, attempts = self._teacher_attempts(identity)

        today = self.sessions.clock().astimezone().date()
        active_today = sum(1 for a in attempts if a.timestamp.astimezone().date() == today)

        by_unit: dict[str, list[ScoreAttempt]] = {}
        for attempt in attempts:
            by_unit.setdefault(attempt.unit, []).append(attempt)

        breakdown = [
            UnitStats(unit=unit, average_score=_mean_percentage(group), sessions=len(group))
            for unit, group in by_unit.items()
        ]
        breakdown.sort(key=lambda u: unit_sort_key(u.unit))

        stats = ClassStats(
            total_students=len(students),
            total_sessions=len(attempts),
            average_score=_mean_percentage(attempts),
            active_today=active_today,
            unit_breakdown=breakdown,
        )
        logger.debug(
            "class_statistics.computed",
            total_students=stats.total_students,
            total_sessions=stats.total_sessions,
        )
        return stats

    def get_filtered_progress(
        self,
        identity: str,
        student_email: str | None = None,
        unit: Any = None,
    ) -> list[ScoreAttempt]:
        """Attempts of the caller's students, optionally by student and unit."""
        _, attempts = self._teacher_attempts(identity)

        wanted_unit = normalize_unit(unit)
        filtered = (
            a
            for a in attempts
            if (not student_email or a.student_email == student_email)
            and (not wanted_unit or a.unit == wanted_unit)
        )
        return sort_newest_first(filtered)
