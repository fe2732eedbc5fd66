"""Signup, login and session endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, HTTPException, Request, status

from calorie_tracker.api.models import Credentials
from calorie_tracker.domain.sessions import AuthResult, SessionRecord

if TYPE_CHECKING:
    from calorie_tracker.containers import AppContainer

router = APIRouter(prefix="/auth", tags=["auth"])


def require_session(request: Request) -> SessionRecord:
    """Return the active session or reject the request."""
    container: AppContainer = request.app.state.container
    session = container.session_service.require_session()
    if session is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated"
        )
    return session


@router.post("/signup")
async def signup(credentials: Credentials, request: Request) -> dict[str, object]:
    """Register a new user and log them in."""
    container: AppContainer = request.app.state.container
    result = container.session_service.signup(credentials.email, credentials.password)
    return _result_or_raise(result, status.HTTP_400_BAD_REQUEST)


@router.post("/login")
async def login(credentials: Credentials, request: Request) -> dict[str, object]:
    """Start a session for valid credentials."""
    container: AppContainer = request.app.state.container
    result = container.session_service.login(credentials.email, credentials.password)
    return _result_or_raise(result, status.HTTP_401_UNAUTHORIZED)


@router.post("/logout")
async def logout(request: Request) -> dict[str, str]:
    """End the current session."""
    container: AppContainer = request.app.state.container
    container.session_service.logout()
    return {"status": "ok"}


@router.get("/session")
async def current_session(request: Request) -> dict[str, object]:
    """Return the active session."""
    return require_session(request).model_dump(mode="json")


def _result_or_raise(result: AuthResult, failure_status: int) -> dict[str, object]:
    if not result.success:
        raise HTTPException(status_code=failure_status, detail=result.message)
    return {"success": True, "message": result.message}
