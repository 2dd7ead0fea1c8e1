"""Route handlers for the Web API."""

from grammar_practice.web.routes.health import router as health_router
from grammar_practice.web.routes.auth import router as auth_router
from grammar_practice.web.routes.questions import router as questions_router
from grammar_practice.web.routes.progress import router as progress_router
from grammar_practice.web.routes.teacher import router as teacher_router

__all__ = [
    "health_router",
    "auth_router",
    "questions_router",
    "progress_router",
    "teacher_router",
]
