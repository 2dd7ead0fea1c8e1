"""Progress recorder: append scored practice attempts."""

from __future__ import annotations

import math
from typing import Any

import structlog

from grammar_practice.core.errors import (
    InvalidRequestError,
    NotFoundError,
    NotFoundReason,
)
from grammar_practice.core.sessions import SessionManager, UserType
from grammar_practice.db.records import ScoreAttempt, compute_percentage, normalize_unit
from grammar_practice.db.sheets_repository import append_attempt, find_proficiency_sheet
from grammar_practice.db.workbook import TabularStore

logger = structlog.get_logger(__name__)


class ProgressRecorder:
    """Writes one ScoreAttempt per completed practice session.

    Args:
        store: Workbook holding the proficiency sheets
        sessions: Session manager used to authorize callers
        proficiency_tables: Optional explicit teacher name -> sheet name mapping
    """

    def __init__(
        self,
        store: TabularStore,
        sessions: SessionManager,
        proficiency_tables: dict[str, str] | None = None,
    ):
        self.store = store
        self.sessions = sessions
        self.proficiency_tables = proficiency_tables or {}

    def record_score(
        self, identity: str, unit: Any, score: int | float, total: int | float
    ) -> ScoreAttempt:
        """Append the caller's score to their teacher's proficiency sheet.

        Raises:
            AuthError: If the caller has no valid student session
            InvalidRequestError: If total is not positive, score is negative
                or either is not a finite number
            NotFoundError: DESTINATION_NOT_FOUND if no sheet matches the teacher
        """
        session = self.sessions.validate(identity, UserType.STUDENT)

        if not (math.isfinite(score) and math.isfinite(total)) or total <= 0 or score < 0:
            raise InvalidRequestError(
                f"Invalid score {score} of {total}: total must be positive and score non-negative"
            )
        try:
            percentage = compute_percentage(score, total)
        except OverflowError as e:
            raise InvalidRequestError(f"Invalid score {score} of {total}: out of range") from e

        student = session.student_info
        teacher_name = student.teacher_name if student else ""
        sheet_name = find_proficiency_sheet(self.store, teacher_name, self.proficiency_tables)
        if sheet_name is None:
            raise NotFoundError(
                NotFoundReason.DESTINATION_NOT_FOUND,
                f"Proficiency sheet not found for teacher: {teacher_name}",
            )

        attempt = ScoreAttempt(
            timestamp=self.sessions.clock(),
            student_email=session.user_email,
            student_name=student.full_name if student else "",
            unit=normalize_unit(unit),
            score=score,
            total=total,
            percentage=percentage,
        )
        append_attempt(self.store, sheet_name, attempt)

        logger.info(
            "score.recorded",
            student_email=attempt.student_email,
            sheet=sheet_name,
            unit=attempt.unit,
            percentage=attempt.percentage,
        )
        return attempt
