"""Teacher endpoints: roster, class statistics, filtered progress."""

from fastapi import APIRouter, Depends

from grammar_practice.core.services import Services
from grammar_practice.web.dependencies import get_identity, get_services
from grammar_practice.web.schemas import (
    ClassStatsResponse,
    ClassStatsSchema,
    ProgressResponse,
    ScoreAttemptSchema,
    StudentListResponse,
    StudentSchema,
)

router = APIRouter(prefix="/api/teacher", tags=["teacher"])


@router.get("/students", response_model=StudentListResponse)
async def teacher_students(
    identity: str = Depends(get_identity),
    services: Services = Depends(get_services),
) -> StudentListResponse:
    """Students on the caller's roster."""
    students = services.reporter.get_teacher_students(identity)
    return StudentListResponse(students=[StudentSchema.from_record(s) for s in students])


@router.get("/statistics", response_model=ClassStatsResponse)
async def class_statistics(
    identity: str = Depends(get_identity),
    services: Services = Depends(get_services),
) -> ClassStatsResponse:
    """Aggregated statistics for the caller's class."""
    stats = services.reporter.get_class_statistics(identity)
    return ClassStatsResponse(stats=ClassStatsSchema.from_stats(stats))


@router.get("/progress", response_model=ProgressResponse)
async def filtered_progress(
    email: str | None = None,
    unit: str | None = None,
    identity: str = Depends(get_identity),
    services: Services = Depends(get_services),
) -> ProgressResponse:
    """Attempts of the caller's students, optionally filtered."""
    attempts = services.reporter.get_filtered_progress(
        identity, student_email=email, unit=unit
    )
    return ProgressResponse(progress=[ScoreAttemptSchema.from_record(a) for a in attempts])
