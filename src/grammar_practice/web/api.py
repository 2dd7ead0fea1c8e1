"""FastAPI application factory.

Main entry point for the Grammar Practice Web API.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from grammar_practice import __version__
from grammar_practice.config.app_config import load_app_config
from grammar_practice.core.errors import GrammarPracticeError
from grammar_practice.web.routes import (
    auth_router,
    health_router,
    progress_router,
    questions_router,
    teacher_router,
)

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Lifespan context manager for startup/shutdown events."""
    config = load_app_config()
    logger.info(
        "api_startup",
        workbook=config.store.workbook_path,
        email_domain=config.auth.email_domain,
        identity_header=config.auth.identity_header,
    )
    yield


async def _handle_app_error(request: Request, exc: GrammarPracticeError) -> JSONResponse:
    logger.info(
        "request_failed",
        path=request.url.path,
        error=type(exc).__name__,
        message=exc.message,
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": exc.message},
    )


async def _handle_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    details = "; ".join(
        f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()
    )
    return JSONResponse(
        status_code=422,
        content={"success": False, "message": f"Invalid request: {details}"},
    )


async def _handle_http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


async def _handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("request_crashed", path=request.url.path, error=type(exc).__name__)
    return JSONResponse(
        status_code=500,
        content={"success": False, "message": "Internal server error"},
    )


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI app instance
    """
    app = FastAPI(
        title="Grammar Practice API",
        description="Grammar practice for students, rosters and class statistics for teachers",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # CORS middleware for web clients
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Configure appropriately for production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(GrammarPracticeError, _handle_app_error)
    app.add_exception_handler(RequestValidationError, _handle_validation_error)
    app.add_exception_handler(StarletteHTTPException, _handle_http_error)
    app.add_exception_handler(Exception, _handle_unexpected_error)

    # Include routers
    app.include_router(health_router)
    app.include_router(auth_router)
    app.include_router(questions_router)
    app.include_router(progress_router)
    app.include_router(teacher_router)

    return app


# Default app instance for uvicorn
app = create_app()
