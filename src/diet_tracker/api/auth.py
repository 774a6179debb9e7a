"""Account and profile endpoints with bearer token auth."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, Header, Request, status

from diet_tracker.api.schemas import (
    AuthResponse,
    LoginRequest,
    PreferencesRequest,
    ProfileUpdateRequest,
    RegisterRequest,
    UserResponse,
)
from diet_tracker.domain.errors import NotAuthorized

if TYPE_CHECKING:
    from diet_tracker.containers import AppContainer

router = APIRouter(prefix="/api/auth", tags=["auth"])


def bearer_token(authorization: str | None) -> str:
    """Extract the token from an Authorization header value."""
    if not authorization:
        raise NotAuthorized("Not authorized, no token")
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise NotAuthorized("Not authorized, no token")
    return token.strip()


async def current_user_id(
    request: Request, authorization: str | None = Header(default=None)
) -> UUID:
    """Resolve the authenticated user from the bearer token."""
    container: AppContainer = request.app.state.container
    return container.token_service.verify(bearer_token(authorization))


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(payload: RegisterRequest, request: Request) -> AuthResponse:
    """Create an account."""
    container: AppContainer = request.app.state.container
    result = container.user_service.register(
        payload.name, payload.email, payload.password
    )
    return AuthResponse.from_result(result)


@router.post("/login")
async def login(payload: LoginRequest, request: Request) -> AuthResponse:
    container: AppContainer = request.app.state.container
    result = container.user_service.login(payload.email, payload.password)
    return AuthResponse.from_result(result)


@router.get("/profile")
async def get_profile(
    request: Request, user_id: UUID = Depends(current_user_id)
) -> UserResponse:
    container: AppContainer = request.app.state.container
    return UserResponse.from_record(container.user_service.get_profile(user_id))


@router.put("/profile")
async def update_profile(
    payload: ProfileUpdateRequest,
    request: Request,
    user_id: UUID = Depends(current_user_id),
) -> AuthResponse:
    """Update account and body profile fields; returns a fresh token."""
    container: AppContainer = request.app.state.container
    user = container.user_service.update_profile(user_id, payload.changes())
    return AuthResponse.from_record(user, token=container.token_service.issue(user.id))


@router.put("/preferences")
async def update_preferences(
    payload: PreferencesRequest,
    request: Request,
    user_id: UUID = Depends(current_user_id),
) -> UserResponse:
    """Update dietary preferences only."""
    container: AppContainer = request.app.state.container
    user = container.user_service.update_profile(user_id, payload.changes())
    return UserResponse.from_record(user)
