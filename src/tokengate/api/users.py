"""User profile routes. All require a valid access token."""

import uuid

from fastapi import APIRouter, Depends, Request, Response

from tokengate.auth.dependencies import AuthContext, get_current_user
from tokengate.schemas.user import PasswordChange, UserRead, UserUpdate
from tokengate.services.user_service import UserService

router = APIRouter(prefix="/users")


def _svc(request: Request) -> UserService:
    return request.app.state.user_service


@router.get("/me", response_model=UserRead)
async def get_my_profile(
    identity: AuthContext = Depends(get_current_user),
    svc: UserService = Depends(_svc),
):
    return await svc.get_profile(identity.user_id)


@router.put("/me", response_model=UserRead)
async def update_my_profile(
    body: UserUpdate,
    identity: AuthContext = Depends(get_current_user),
    svc: UserService = Depends(_svc),
):
    return await svc.update_profile(
        identity.user_id, name=body.name, bio=body.bio, avatar_id=body.avatar_id
    )


@router.put("/me/password", status_code=204)
async def change_my_password(
    body: PasswordChange,
    identity: AuthContext = Depends(get_current_user),
    svc: UserService = Depends(_svc),
):
    """Change password. Every refresh token of the user is revoked."""
    await svc.change_password(identity.user_id, body.current_password, body.new_password)
    return Response(status_code=204)


@router.get("/{user_id}", response_model=UserRead)
async def get_user(
    user_id: uuid.UUID,
    identity: AuthContext = Depends(get_current_user),
    svc: UserService = Depends(_svc),
):
    return await svc.get_profile(user_id)
