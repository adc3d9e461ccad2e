"""Authentication gate and its FastAPI dependencies.

Learn: The gate is a plain object that turns an Authorization header into
an AuthContext or raises a classified error. get_current_user wraps it
as a Depends() so protected routes receive the identity as an explicit,
typed argument instead of digging it out of request state.

Header problems (missing, wrong scheme) get specific messages — that's
formatting help, not a security signal. Token problems come straight from
the codec, so an expired token stays TOKEN_EXPIRED.
"""

import uuid
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Header, Request

from tokengate.auth.jwt import TokenCodec
from tokengate.errors import UnauthorizedError

MISSING_HEADER = "Authorization header is required"
MALFORMED_HEADER = "Authorization header must be in format: Bearer <token>"


@dataclass(frozen=True)
class AuthContext:
    """The authenticated identity making the request."""
    user_id: uuid.UUID
    email: str


class AuthGate:
    """Validates bearer access tokens. Holds no state besides the codec."""

    def __init__(self, codec: TokenCodec):
        self.codec = codec

    def authenticate(self, authorization: Optional[str]) -> AuthContext:
        if not authorization:
            raise UnauthorizedError(MISSING_HEADER)

        parts = authorization.split(" ", 1)
        if len(parts) != 2 or parts[0].lower() != "bearer":
            raise UnauthorizedError(MALFORMED_HEADER)
        token = parts[1].strip()
        if not token:
            raise UnauthorizedError(MALFORMED_HEADER)

        claims = self.codec.validate_access_token(token)
        return AuthContext(user_id=claims.user_id, email=claims.email)


def get_gate(request: Request) -> AuthGate:
    return request.app.state.gate


async def get_current_user(
    authorization: Optional[str] = Header(None),
    gate: AuthGate = Depends(get_gate),
) -> AuthContext:
    """Extract current identity (required — 401 if missing or invalid)."""
    return gate.authenticate(authorization)
