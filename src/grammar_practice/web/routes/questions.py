"""Question catalog endpoints."""

from fastapi import APIRouter, Depends

from grammar_practice.core.services import Services
from grammar_practice.web.dependencies import get_identity, get_services
from grammar_practice.web.schemas import (
    QuestionListResponse,
    QuestionSchema,
    TopicListResponse,
    UnitListResponse,
)

router = APIRouter(prefix="/api", tags=["questions"])


@router.get("/questions", response_model=QuestionListResponse)
async def list_questions(
    unit: str | None = None,
    topic: str | None = None,
    identity: str = Depends(get_identity),
    services: Services = Depends(get_services),
) -> QuestionListResponse:
    """List questions, optionally filtered by unit and topic."""
    questions = services.catalog.list_questions(identity, unit=unit, topic=topic)
    return QuestionListResponse(questions=[QuestionSchema.from_record(q) for q in questions])


@router.get("/units", response_model=UnitListResponse)
async def list_units(
    identity: str = Depends(get_identity),
    services: Services = Depends(get_services),
) -> UnitListResponse:
    """List distinct units."""
    return UnitListResponse(units=services.catalog.list_units(identity))


@router.get("/units/{unit}/topics", response_model=TopicListResponse)
async def list_topics(
    unit: str,
    identity: str = Depends(get_identity),
    services: Services = Depends(get_services),
) -> TopicListResponse:
    """List topics of a unit in first-seen order."""
    return TopicListResponse(topics=services.catalog.list_topics(identity, unit))
