"""Score recording and progress history endpoints."""

from fastapi import APIRouter, Depends, status

from grammar_practice.core.services import Services
from grammar_practice.web.dependencies import get_identity, get_services
from grammar_practice.web.schemas import (
    ProgressResponse,
    ScoreAttemptSchema,
    ScoreRecordedResponse,
    ScoreRequest,
)

router = APIRouter(prefix="/api", tags=["progress"])


@router.post(
    "/scores",
    response_model=ScoreRecordedResponse,
    status_code=status.HTTP_201_CREATED,
)
async def record_score(
    payload: ScoreRequest,
    identity: str = Depends(get_identity),
    services: Services = Depends(get_services),
) -> ScoreRecordedResponse:
    """Record the caller's completed practice session."""
    attempt = services.recorder.record_score(
        identity, unit=payload.unit, score=payload.score, total=payload.total
    )
    return ScoreRecordedResponse(attempt=ScoreAttemptSchema.from_record(attempt))


@router.get("/progress", response_model=ProgressResponse)
async def student_progress(
    email: str | None = None,
    identity: str = Depends(get_identity),
    services: Services = Depends(get_services),
) -> ProgressResponse:
    """Attempt history, newest first. Students always get their own."""
    attempts = services.reporter.get_student_progress(identity, requested_email=email)
    return ProgressResponse(progress=[ScoreAttemptSchema.from_record(a) for a in attempts])
