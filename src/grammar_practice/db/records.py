"""Typed record schema for workbook sheets.

Each sheet's rows are converted into dataclasses here, so nothing past the
store boundary handles raw cells. Row 0 of every sheet is a header.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from grammar_practice.core.errors import StoreError

# =============================================================================
# SHEET NAMES & LAYOUTS
# =============================================================================

SHEET_TEACHER_EMAILS = "Teacher Emails"
SHEET_STUDENT_ROSTER = "Student Roster"
SHEET_GRAMMAR_QUESTIONS = "Grammar Questions"
SHEET_PROFICIENCY_PREFIX = "Student Proficiency"

FIRST_DATA_ROW = 1

TEACHER_HEADER = ["Email"]
ROSTER_HEADER = ["Email", "Last Name", "First Name", "Teacher", "Period"]
QUESTION_HEADER = [
    "Unit",
    "Topic",
    "Topic Description",
    "Question Type",
    "Difficulty Level",
    "Question",
    "Answer",
    "Incorrect 1",
    "Incorrect 2",
    "Incorrect 3",
    "Incorrect 4",
    "Hint",
]
PROFICIENCY_HEADER = ["Timestamp", "Email", "Name", "Unit", "Score", "Total", "Percentage"]


def proficiency_sheet_name(teacher_name: str) -> str:
    """Conventional proficiency sheet name for a teacher."""
    return f"{SHEET_PROFICIENCY_PREFIX} {teacher_name}"


# =============================================================================
# CELL COERCION
# =============================================================================


def _pad(row: list[Any], width: int) -> list[Any]:
    if len(row) >= width:
        return list(row)
    return list(row) + [""] * (width - len(row))


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def normalize_unit(value: Any) -> str:
    """Normalize a unit identifier to its opaque string form.

    ``3``, ``3.0`` and ``"3"`` all normalize to ``"3"``; empty cells become "".
    """
    return _text(value)


def _number(value: Any, column: str) -> int | float:
    if isinstance(value, bool):
        raise StoreError(f"Invalid {column} value: {value!r}")
    if isinstance(value, int):
        return value
    try:
        number = float(str(value).strip())
    except ValueError as e:
        raise StoreError(f"Invalid {column} value: {value!r}") from e
    if number.is_integer():
        return int(number)
    return number


def parse_timestamp(value: Any) -> datetime:
    """Parse a timestamp cell into a timezone-aware datetime.

    Naive values are interpreted in the process-local time zone.
    """
    if isinstance(value, datetime):
        parsed = value
    else:
        try:
            parsed = datetime.fromisoformat(str(value).strip())
        except ValueError as e:
            raise StoreError(f"Invalid timestamp value: {value!r}") from e
    return parsed.astimezone()


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves rounded up (33.5 -> 34)."""
    return int(math.floor(value + 0.5))


def compute_percentage(score: float, total: float) -> int:
    """Percentage of ``score`` over ``total`` rounded half-up."""
    return round_half_up(score / total * 100)


# =============================================================================
# RECORDS
# =============================================================================


@dataclass(frozen=True)
class TeacherRecord:
    """Row of the Teacher Emails sheet."""

    email: str

    @classmethod
    def from_row(cls, row: list[Any]) -> TeacherRecord:
        return cls(email=_text(_pad(row, 1)[0]))


@dataclass(frozen=True)
class StudentRecord:
    """Row of the Student Roster sheet."""

    email: str
    last_name: str
    first_name: str
    teacher_name: str
    period: str

    @classmethod
    def from_row(cls, row: list[Any]) -> StudentRecord:
        cells = _pad(row, len(ROSTER_HEADER))
        return cls(
            email=_text(cells[0]),
            last_name=_text(cells[1]),
            first_name=_text(cells[2]),
            teacher_name=_text(cells[3]),
            period=_text(cells[4]),
        )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "email": self.email,
            "last_name": self.last_name,
            "first_name": self.first_name,
            "teacher_name": self.teacher_name,
            "period": self.period,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> StudentRecord:
        return cls(
            email=data.get("email", ""),
            last_name=data.get("last_name", ""),
            first_name=data.get("first_name", ""),
            teacher_name=data.get("teacher_name", ""),
            period=data.get("period", ""),
        )


@dataclass(frozen=True)
class GrammarQuestion:
    """Row of the Grammar Questions sheet."""

    unit: str
    topic: str
    topic_description: str
    question_type: str
    difficulty_level: str
    question: str
    answer: str
    incorrect1: str
    incorrect2: str
    incorrect3: str
    incorrect4: str
    hint: str

    @classmethod
    def from_row(cls, row: list[Any]) -> GrammarQuestion:
        cells = [_text(c) for c in _pad(row, len(QUESTION_HEADER))]
        return cls(
            unit=normalize_unit(cells[0]),
            topic=cells[1],
            topic_description=cells[2],
            question_type=cells[3],
            difficulty_level=cells[4],
            question=cells[5],
            answer=cells[6],
            incorrect1=cells[7],
            incorrect2=cells[8],
            incorrect3=cells[9],
            incorrect4=cells[10],
            hint=cells[11],
        )


@dataclass(frozen=True)
class ScoreAttempt:
    """Row of a Student Proficiency sheet."""

    timestamp: datetime
    student_email: str
    student_name: str
    unit: str
    score: int | float
    total: int | float
    percentage: int | float

    @classmethod
    def from_row(cls, row: list[Any]) -> ScoreAttempt:
        cells = _pad(row, len(PROFICIENCY_HEADER))
        return cls(
            timestamp=parse_timestamp(cells[0]),
            student_email=_text(cells[1]),
            student_name=_text(cells[2]),
            unit=normalize_unit(cells[3]),
            score=_number(cells[4], "score"),
            total=_number(cells[5], "total"),
            percentage=_number(cells[6], "percentage"),
        )

    def to_row(self) -> list[Any]:
        """Cells in sheet column order, timestamp as ISO-8601."""
        return [
            self.timestamp.isoformat(),
            self.student_email,
            self.student_name,
            self.unit,
            self.score,
            self.total,
            self.percentage,
        ]
