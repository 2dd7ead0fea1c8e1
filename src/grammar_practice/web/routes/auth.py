"""Authentication endpoints: login, current user, logout."""

from fastapi import APIRouter, Depends

from grammar_practice.core.errors import AuthError, AuthErrorReason
from grammar_practice.core.services import Services
from grammar_practice.web.dependencies import get_identity, get_services
from grammar_practice.web.schemas import MessageResponse, UserResponse

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/login", response_model=UserResponse)
async def login(
    identity: str = Depends(get_identity),
    services: Services = Depends(get_services),
) -> UserResponse:
    """Start a session for the verified caller."""
    session = services.sessions.authenticate(identity)
    return UserResponse.from_session(session)


@router.get("/me", response_model=UserResponse)
async def current_user(
    identity: str = Depends(get_identity),
    services: Services = Depends(get_services),
) -> UserResponse:
    """Return the caller's stored session."""
    session = services.sessions.get_current_session(identity)
    if session is None:
        raise AuthError(AuthErrorReason.NO_SESSION)
    return UserResponse.from_session(session)


@router.post("/logout", response_model=MessageResponse)
async def logout(
    identity: str = Depends(get_identity),
    services: Services = Depends(get_services),
) -> MessageResponse:
    """Destroy the caller's session. Always succeeds."""
    services.sessions.logout(identity)
    return MessageResponse(message="Logged out")
