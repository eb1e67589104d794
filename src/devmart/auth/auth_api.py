"""Authentication API endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request, status
from pydantic import BaseModel

from ..exceptions import NotFoundError
from .auth_dependencies import get_auth_service, require_admin_user
from .auth_service import (
    AuthService,
    InvalidCredentialsError,
    LoginThrottledError,
)
from .profiles_repository import ProfilesRepository

router = APIRouter(prefix="/api", tags=["auth"])


class LoginRequest(BaseModel):
    email: str
    password: str


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int


def _client_ip(request: Request) -> str | None:
    if request.client:
        return request.client.host
    return None


@router.post("/login", response_model=LoginResponse)
def login(
    payload: LoginRequest,
    request: Request,
    service: AuthService = Depends(get_auth_service),
) -> LoginResponse:
    try:
        token, expires_in = service.authenticate(
            email=payload.email,
            password=payload.password,
            client_ip=_client_ip(request),
        )
    except LoginThrottledError as exc:
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail={"status": "error", "failure_reason": "throttled", "details": str(exc)},
        ) from exc
    except InvalidCredentialsError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"status": "error", "failure_reason": "invalid_credentials"},
        ) from exc
    return LoginResponse(access_token=token, expires_in=expires_in)


class ProfileModelOut(BaseModel):
    id: str
    email: str
    role: str
    disabled: bool


class RoleUpdateRequest(BaseModel):
    role: str


def get_profiles_repository(request: Request) -> ProfilesRepository:
    try:
        return request.app.state.profiles_repo  # type: ignore[attr-defined]
    except AttributeError as exc:  # pragma: no cover - defensive path
        raise RuntimeError("ProfilesRepository is not configured") from exc


@router.get("/admin/users", response_model=list[ProfileModelOut])
def list_users(
    _: dict = Depends(require_admin_user),
    repo: ProfilesRepository = Depends(get_profiles_repository),
) -> list[ProfileModelOut]:
    return [
        ProfileModelOut(id=p.id, email=p.email, role=p.role, disabled=p.disabled)
        for p in repo.list_all()
    ]


@router.put("/admin/users/{profile_id}/role", response_model=ProfileModelOut)
def update_user_role(
    profile_id: str,
    payload: RoleUpdateRequest,
    _: dict = Depends(require_admin_user),
    repo: ProfilesRepository = Depends(get_profiles_repository),
) -> ProfileModelOut:
    try:
        profile = repo.update_role(profile_id, payload.role)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"status": "error", "failure_reason": "invalid_role"},
        ) from exc
    except NotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"status": "error", "failure_reason": "not_found"},
        ) from exc
    return ProfileModelOut(id=profile.id, email=profile.email, role=profile.role, disabled=profile.disabled)
