"""Tests for the question catalog."""

import pytest
from conftest import STUDENT_AMY, TEACHER_JANE

from grammar_practice.core.errors import AuthError, AuthErrorReason


@pytest.fixture
def catalog(services):
    services.sessions.authenticate(STUDENT_AMY)
    services.sessions.authenticate(TEACHER_JANE)
    return services.catalog


class TestListQuestions:
    """Tests for QuestionCatalog.list_questions."""

    def test_all_questions(self, catalog):
        assert len(catalog.list_questions(STUDENT_AMY)) == 7

    def test_numeric_unit_matches_string_cells(self, catalog):
        questions = catalog.list_questions(STUDENT_AMY, unit=1)
        assert [q.topic for q in questions] == ["Nouns", "Verbs", "Nouns"]

    def test_string_unit_matches_numeric_cells(self, catalog):
        assert len(catalog.list_questions(STUDENT_AMY, unit="2")) == 1

    def test_unit_and_topic(self, catalog):
        questions = catalog.list_questions(STUDENT_AMY, unit="1", topic="Nouns")
        assert [q.question for q in questions] == ["Which word is a noun?", "Pick the proper noun"]

    def test_topic_is_exact(self, catalog):
        assert catalog.list_questions(STUDENT_AMY, topic="nouns") == []

    def test_no_match(self, catalog):
        assert catalog.list_questions(STUDENT_AMY, unit="99") == []

    def test_teacher_rejected(self, catalog):
        with pytest.raises(AuthError) as exc:
            catalog.list_questions(TEACHER_JANE)
        assert exc.value.reason == AuthErrorReason.WRONG_ROLE

    def test_requires_session(self, services):
        with pytest.raises(AuthError) as exc:
            services.catalog.list_questions(STUDENT_AMY)
        assert exc.value.reason == AuthErrorReason.NO_SESSION


class TestListUnits:
    """Tests for QuestionCatalog.list_units."""

    def test_distinct_sorted_lexicographically(self, catalog):
        assert catalog.list_units(STUDENT_AMY) == ["1", "10", "2", "3"]

    def test_no_duplicates_or_empty(self, catalog):
        units = catalog.list_units(TEACHER_JANE)
        assert len(units) == len(set(units))
        assert "" not in units


class TestListTopics:
    """Tests for QuestionCatalog.list_topics."""

    def test_first_seen_order(self, catalog):
        assert catalog.list_topics(STUDENT_AMY, "1") == ["Nouns", "Verbs"]

    def test_numeric_argument(self, catalog):
        assert catalog.list_topics(TEACHER_JANE, 2) == ["Commas"]

    def test_empty_topics_skipped(self, catalog):
        assert catalog.list_topics(STUDENT_AMY, 3) == []
