"""Pydantic schemas for the Web API.

Every response carries ``success``; JSON keys are camelCase.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from grammar_practice.core.reporter import ClassStats
from grammar_practice.core.sessions import Session
from grammar_practice.db.records import GrammarQuestion, ScoreAttempt, StudentRecord


class ApiModel(BaseModel):
    """Base model serializing with camelCase aliases."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ApiResponse(ApiModel):
    success: bool = True


class ErrorResponse(ApiModel):
    success: bool = False
    message: str


# =============================================================================
# RECORD SCHEMAS
# =============================================================================


class StudentSchema(ApiModel):
    email: str
    last_name: str
    first_name: str
    teacher: str
    period: str

    @classmethod
    def from_record(cls, record: StudentRecord) -> StudentSchema:
        return cls(
            email=record.email,
            last_name=record.last_name,
            first_name=record.first_name,
            teacher=record.teacher_name,
            period=record.period,
        )


class QuestionSchema(ApiModel):
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
    def from_record(cls, record: GrammarQuestion) -> QuestionSchema:
        return cls(**vars(record))


class ScoreAttemptSchema(ApiModel):
    timestamp: str
    student_email: str
    student_name: str
    unit: str
    score: int | float
    total: int | float
    percentage: int | float

    @classmethod
    def from_record(cls, record: ScoreAttempt) -> ScoreAttemptSchema:
        return cls(
            timestamp=record.timestamp.isoformat(),
            student_email=record.student_email,
            student_name=record.student_name,
            unit=record.unit,
            score=record.score,
            total=record.total,
            percentage=record.percentage,
        )


# =============================================================================
# AUTH SCHEMAS
# =============================================================================


class UserResponse(ApiResponse):
    """Response for login and current-user lookups."""

    user_type: str
    user_email: str
    student_info: StudentSchema | None = None

    @classmethod
    def from_session(cls, session: Session) -> UserResponse:
        return cls(
            user_type=session.user_type.value,
            user_email=session.user_email,
            student_info=(
                StudentSchema.from_record(session.student_info)
                if session.student_info
                else None
            ),
        )


class MessageResponse(ApiResponse):
    message: str = ""


# =============================================================================
# CATALOG SCHEMAS
# =============================================================================


class QuestionListResponse(ApiResponse):
    questions: list[QuestionSchema]


class UnitListResponse(ApiResponse):
    units: list[str]


class TopicListResponse(ApiResponse):
    topics: list[str]


# =============================================================================
# PROGRESS SCHEMAS
# =============================================================================


MAX_SCORE_VALUE = 1_000_000


class ScoreRequest(ApiModel):
    """Request body for recording a score.

    The bounds also reject "Infinity" and "NaN", which JSON parsing
    would otherwise accept as floats.
    """

    unit: str | int
    score: int | float = Field(..., ge=0, le=MAX_SCORE_VALUE)
    total: int | float = Field(..., gt=0, le=MAX_SCORE_VALUE)


class ScoreRecordedResponse(ApiResponse):
    message: str = "Score recorded successfully"
    attempt: ScoreAttemptSchema


class ProgressResponse(ApiResponse):
    progress: list[ScoreAttemptSchema]


class StudentListResponse(ApiResponse):
    students: list[StudentSchema]


class UnitStatsSchema(ApiModel):
    unit: str
    average_score: int
    sessions: int


class ClassStatsSchema(ApiModel):
    total_students: int
    total_sessions: int
    average_score: int
    active_today: int
    unit_breakdown: list[UnitStatsSchema]

    @classmethod
    def from_stats(cls, stats: ClassStats) -> ClassStatsSchema:
        return cls(
            total_students=stats.total_students,
            total_sessions=stats.total_sessions,
            average_score=stats.average_score,
            active_today=stats.active_today,
            unit_breakdown=[
                UnitStatsSchema(unit=u.unit, average_score=u.average_score, sessions=u.sessions)
                for u in stats.unit_breakdown
            ],
        )


class ClassStatsResponse(ApiResponse):
    stats: ClassStatsSchema


# =============================================================================
# HEALTH SCHEMAS
# =============================================================================


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "ok"
    version: str = "0.1.0"
    timestamp: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    details: dict[str, Any] = Field(default_factory=dict)
