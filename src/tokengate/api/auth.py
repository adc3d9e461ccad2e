"""Auth API — registration, login, token rotation, logout.

Learn: Routes for the session lifecycle:
- POST /auth/register → create a new user account
- POST /auth/login → email/password → access + refresh tokens
- POST /auth/refresh → refresh token → new pair (old token is consumed)
- POST /auth/logout → revoke one refresh token (requires access token)
- POST /auth/logout-all → revoke every session of the current user
- GET /auth/me → identity carried by the access token

Handlers only translate HTTP to service calls. Failures are raised as
classified errors and rendered by api/errors.py.
"""

from fastapi import APIRouter, Depends, Request, Response

from tokengate.auth.dependencies import AuthContext, get_current_user
from tokengate.schemas.auth import (
    LoginRequest,
    LogoutAllRead,
    LogoutRequest,
    MeRead,
    RefreshRequest,
    RegisterRequest,
    TokenResponse,
)
from tokengate.schemas.user import UserRead
from tokengate.services.session_service import SessionService

router = APIRouter(prefix="/auth")


def _svc(request: Request) -> SessionService:
    return request.app.state.session_service


# ─── Register ────────────────────────────────────────────


@router.post("/register", response_model=UserRead, status_code=201)
async def register(body: RegisterRequest, svc: SessionService = Depends(_svc)):
    """Create a new user account."""
    return await svc.register(name=body.name, email=body.email, password=body.password)


# ─── Login ───────────────────────────────────────────────


@router.post("/login", response_model=TokenResponse)
async def login(body: LoginRequest, svc: SessionService = Depends(_svc)):
    """Login with email and password → token pair."""
    return await svc.login(email=body.email, password=body.password)


# ─── Refresh ────────────────────────────────────────────


@router.post("/refresh", response_model=TokenResponse)
async def refresh(body: RefreshRequest, svc: SessionService = Depends(_svc)):
    """Exchange a refresh token for a new pair. The old one stops working."""
    return await svc.refresh(body.refresh_token)


# ─── Logout ─────────────────────────────────────────────


@router.post("/logout", status_code=204)
async def logout(
    body: LogoutRequest,
    identity: AuthContext = Depends(get_current_user),
    svc: SessionService = Depends(_svc),
):
    """Revoke one of the caller's refresh tokens. Access tokens simply expire."""
    await svc.logout(body.refresh_token, user_id=identity.user_id)
    return Response(status_code=204)


@router.post("/logout-all", response_model=LogoutAllRead)
async def logout_all(
    identity: AuthContext = Depends(get_current_user),
    svc: SessionService = Depends(_svc),
):
    """Revoke every session of the current user."""
    revoked = await svc.logout_all(identity.user_id)
    return LogoutAllRead(revoked=revoked)


# ─── Current user ───────────────────────────────────────


@router.get("/me", response_model=MeRead)
async def get_me(identity: AuthContext = Depends(get_current_user)):
    """Identity carried by the access token — no store lookup."""
    return MeRead(id=identity.user_id, email=identity.email)
