"""Repository functions for workbook sheets.

Reads sheets into typed records and appends score attempts.
"""

from __future__ import annotations

from typing import Any, Callable, TypeVar

import structlog

from grammar_practice.core.errors import StoreError
from grammar_practice.db.records import (
    FIRST_DATA_ROW,
    SHEET_GRAMMAR_QUESTIONS,
    SHEET_PROFICIENCY_PREFIX,
    SHEET_STUDENT_ROSTER,
    SHEET_TEACHER_EMAILS,
    GrammarQuestion,
    ScoreAttempt,
    StudentRecord,
    TeacherRecord,
)
from grammar_practice.db.workbook import TabularStore

logger = structlog.get_logger(__name__)

T = TypeVar("T")


def _load(store: TabularStore, sheet_name: str, factory: Callable[[list[Any]], T]) -> list[T]:
    rows = store.read_rows(sheet_name)
    return [factory(row) for row in rows[FIRST_DATA_ROW:] if _has_content(row)]


def _has_content(row: list[Any]) -> bool:
    return any(cell not in (None, "") for cell in row)


def load_teachers(store: TabularStore) -> list[TeacherRecord]:
    """All rows of the Teacher Emails sheet."""
    return _load(store, SHEET_TEACHER_EMAILS, TeacherRecord.from_row)


def load_roster(store: TabularStore) -> list[StudentRecord]:
    """All rows of the Student Roster sheet."""
    return _load(store, SHEET_STUDENT_ROSTER, StudentRecord.from_row)


def load_questions(store: TabularStore) -> list[GrammarQuestion]:
    """All rows of the Grammar Questions sheet."""
    return _load(store, SHEET_GRAMMAR_QUESTIONS, GrammarQuestion.from_row)


def load_attempts(store: TabularStore, sheet_name: str) -> list[ScoreAttempt]:
    """All score attempts recorded in one proficiency sheet.

    Rows whose cells cannot be read as an attempt are logged and skipped.
    """
    attempts = []
    rows = store.read_rows(sheet_name)
    for row_index, row in enumerate(rows[FIRST_DATA_ROW:], start=FIRST_DATA_ROW):
        if not _has_content(row):
            continue
        try:
            attempts.append(ScoreAttempt.from_row(row))
        except StoreError as e:
            logger.warning(
                "proficiency_sheet.row_invalid",
                sheet=sheet_name,
                row_index=row_index,
                error=e.message,
            )
    return attempts


def proficiency_sheets(store: TabularStore) -> list[str]:
    """Names of every proficiency sheet, in workbook order."""
    return [name for name in store.sheet_names() if SHEET_PROFICIENCY_PREFIX in name]


def find_proficiency_sheet(
    store: TabularStore,
    teacher_name: str,
    mapping: dict[str, str] | None = None,
) -> str | None:
    """Resolve the proficiency sheet for a teacher.

    An explicit ``mapping`` entry wins when it names an existing sheet.
    Otherwise the first sheet whose name contains both the proficiency
    prefix and the teacher name is used.

    Args:
        store: Workbook to search
        teacher_name: Teacher name as written in the roster
        mapping: Optional teacher name -> sheet name mapping

    Returns:
        Sheet name, or None if no sheet matches
    """
    names = store.sheet_names()

    if mapping and teacher_name in mapping:
        mapped = mapping[teacher_name]
        if mapped in names:
            return mapped
        logger.warning(
            "proficiency_sheet.mapping_missing", teacher=teacher_name, sheet=mapped
        )

    if not teacher_name:
        return None

    for name in names:
        if SHEET_PROFICIENCY_PREFIX in name and teacher_name in name:
            return name
    return None


def append_attempt(store: TabularStore, sheet_name: str, attempt: ScoreAttempt) -> None:
    """Append one score attempt row to a proficiency sheet."""
    store.append_row(sheet_name, attempt.to_row())
    logger.debug(
        "proficiency_sheet.appended",
        sheet=sheet_name,
        student_email=attempt.student_email,
    )
