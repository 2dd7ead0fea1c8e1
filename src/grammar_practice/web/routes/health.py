"""Health check endpoint."""

from datetime import datetime, timezone

from fastapi import APIRouter

from grammar_practice import __version__
from grammar_practice.config.app_config import load_app_config
from grammar_practice.web.schemas import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Check API health status and whether a workbook is configured."""
    config = load_app_config()
    return HealthResponse(
        status="ok",
        version=__version__,
        timestamp=datetime.now(timezone.utc).isoformat(),
        details={"workbook_configured": bool(config.store.workbook_path)},
    )
