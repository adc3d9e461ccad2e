"""Pydantic schemas for authentication requests and responses.

Learn: Request bodies are validated here, before the service layer sees
them. Response models mirror the domain dataclasses and read them via
from_attributes, so the password hash has no field to leak through.
"""

import uuid

from pydantic import BaseModel, EmailStr, Field


# ─── Requests ─────────────────────────────────────────────


class RegisterRequest(BaseModel):
    name: str = Field(..., min_length=2, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1, max_length=128)


class RefreshRequest(BaseModel):
    refresh_token: str = Field(..., min_length=1, max_length=512)


class LogoutRequest(BaseModel):
    refresh_token: str = Field(..., min_length=1, max_length=512)


# ─── Responses ────────────────────────────────────────────


class TokenResponse(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "Bearer"
    expires_in: int

    model_config = {"from_attributes": True}


class MeRead(BaseModel):
    id: uuid.UUID
    email: str


class LogoutAllRead(BaseModel):
    revoked: int
