"""Question catalog: filter grammar questions by unit and topic."""

from __future__ import annotations

from typing import Any

from grammar_practice.core.sessions import SessionManager, UserType
from grammar_practice.db.records import GrammarQuestion, normalize_unit
from grammar_practice.db.sheets_repository import load_questions
from grammar_practice.db.workbook import TabularStore


class QuestionCatalog:
    """Read-only access to the Grammar Questions sheet."""

    def __init__(self, store: TabularStore, sessions: SessionManager):
        self.store = store
        self.sessions = sessions

    def list_questions(
        self, identity: str, unit: Any = None, topic: str | None = None
    ) -> list[GrammarQuestion]:
        """Questions matching an optional unit and an optional topic.

        Units compare by normalized form, so ``3`` matches ``"3"``.
        Topics compare exactly. Requires a student session.
        """
        self.sessions.validate(identity, UserType.STUDENT)

        wanted_unit = normalize_unit(unit)
        return [
            q
            for q in load_questions(self.store)
            if (not wanted_unit or q.unit == wanted_unit) and (not topic or q.topic == topic)
        ]

    def list_units(self, identity: str) -> list[str]:
        """Distinct non-empty units, sorted lexicographically."""
        self.sessions.validate(identity)

        return sorted({q.unit for q in load_questions(self.store) if q.unit})

    def list_topics(self, identity: str, unit: Any) -> list[str]:
        """Distinct non-empty topics of a unit, in first-seen order."""
        self.sessions.validate(identity)

        wanted_unit = normalize_unit(unit)
        topics = dict.fromkeys(
            q.topic for q in load_questions(self.store) if q.unit == wanted_unit and q.topic
        )
        return list(topics)
