"""Shared fixtures: a seeded in-memory workbook, a controllable clock and
services wired to both."""

from datetime import datetime, timedelta

import pytest

from grammar_practice.config.app_config import AppConfig, clear_config_cache
from grammar_practice.core.services import build_services
from grammar_practice.core.sessions import MemorySessionStore
from grammar_practice.db.records import (
    PROFICIENCY_HEADER,
    QUESTION_HEADER,
    ROSTER_HEADER,
    SHEET_GRAMMAR_QUESTIONS,
    SHEET_STUDENT_ROSTER,
    SHEET_TEACHER_EMAILS,
    TEACHER_HEADER,
)
from grammar_practice.db.workbook import MemoryWorkbook

DOMAIN = "@orono.k12.mn.us"

TEACHER_JANE = "jane.doe@orono.k12.mn.us"
TEACHER_JOHN = "john.smith@orono.k12.mn.us"
BOTH_ROLES = "both.roles@orono.k12.mn.us"
STUDENT_AMY = "a@orono.k12.mn.us"
STUDENT_BEN = "b@orono.k12.mn.us"
STUDENT_CARA = "c@orono.k12.mn.us"
STUDENT_NO_SHEET = "nosheet@orono.k12.mn.us"

JANE_SHEET = "Student Proficiency Jane Doe"
JOHN_SHEET = "Student Proficiency John Smith"


def local(*args: int) -> datetime:
    """Timezone-aware datetime in the process-local zone."""
    return datetime(*args).astimezone()


def ts(*args: int) -> str:
    return local(*args).isoformat()


NOW = local(2026, 10, 19, 10, 0)


class FakeClock:
    """Callable clock that tests can move forward."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


def question(unit, topic, text="Q", answer="A"):
    return [unit, topic, f"{topic} description", "multiple choice", "easy", text, answer,
            "w1", "w2", "w3", "w4", "hint"]


def seed_sheets() -> dict[str, list[list]]:
    return {
        SHEET_TEACHER_EMAILS: [
            TEACHER_HEADER,
            [TEACHER_JANE],
            [TEACHER_JOHN],
            [BOTH_ROLES],
        ],
        SHEET_STUDENT_ROSTER: [
            ROSTER_HEADER,
            [STUDENT_AMY, "Adams", "Amy", "Jane Doe", 3],
            [STUDENT_BEN, "Brown", "Ben", "Jane Doe (Period 5)", 5],
            [STUDENT_CARA, "Chen", "Cara", "John Smith", 2],
            [BOTH_ROLES, "Roles", "Both", "Jane Doe", 1],
            [STUDENT_NO_SHEET, "Nobody", "Nora", "Mary Major", 4],
        ],
        SHEET_GRAMMAR_QUESTIONS: [
            QUESTION_HEADER,
            question(1, "Nouns", "Which word is a noun?"),
            question("1", "Verbs", "Which word is a verb?"),
            question(2.0, "Commas"),
            question(10, "Clauses"),
            question(1, "Nouns", "Pick the proper noun"),
            question("", "Orphan"),
            question(3, ""),
        ],
        JANE_SHEET: [
            PROFICIENCY_HEADER,
            [ts(2026, 10, 18, 9, 0), STUDENT_AMY, "Amy Adams", 1, 7, 10, 70],
            [ts(2026, 10, 19, 8, 0), STUDENT_AMY, "Amy Adams", 2, 9, 10, 90],
            [ts(2026, 10, 19, 9, 30), STUDENT_BEN, "Ben Brown", "1", 5, 10, 50],
        ],
        JOHN_SHEET: [
            PROFICIENCY_HEADER,
            [ts(2026, 10, 17, 14, 0), STUDENT_CARA, "Cara Chen", 1, 10, 10, 100],
            [ts(2026, 10, 10, 11, 0), STUDENT_AMY, "Amy Adams", 10, 8, 10, 80],
        ],
    }


@pytest.fixture(autouse=True)
def _fresh_config():
    """Never leak cached configuration between tests."""
    clear_config_cache()
    yield
    clear_config_cache()


@pytest.fixture
def workbook() -> MemoryWorkbook:
    return MemoryWorkbook(seed_sheets())


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(NOW)


@pytest.fixture
def session_store() -> MemorySessionStore:
    return MemorySessionStore()


@pytest.fixture
def services(workbook, session_store, clock):
    return build_services(AppConfig(), store=workbook, session_store=session_store, clock=clock)
