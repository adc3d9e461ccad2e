"""Token codec — JWT access tokens and opaque refresh identifiers.

Learn: JWT (JSON Web Token) provides stateless authentication.
- Access token: short-lived (15min), signed with HMAC, self-verifying
- Refresh token: long-lived, but NOT a JWT — a random UUID string that
  only means something while its ledger record exists

The access token carries user_id and email so handlers need no lookup.
There is no server-side record of access tokens; they cannot be revoked
individually, which is why their lifetime is short.
"""

import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

import jwt

from tokengate.config import HMAC_ALGORITHMS
from tokengate.errors import TokenExpiredError, UnauthorizedError

INVALID_TOKEN_MESSAGE = "Invalid or malformed token"


@dataclass(frozen=True)
class AccessClaims:
    """Verified contents of an access token."""
    user_id: uuid.UUID
    email: str
    subject: str
    issued_at: datetime
    expires_at: datetime


class TokenCodec:
    """Signs and verifies access tokens, mints refresh identifiers.

    Learn: Verification pins the configured algorithm. The token's own
    "alg" header is never trusted, so "alg": "none" or a token signed with
    a different algorithm is simply an invalid token.

    The clock only stamps iat/exp at issuance. Validation checks them
    against the wall clock, as PyJWT does.
    """

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        access_ttl: timedelta = timedelta(minutes=15),
        clock: Optional[Callable[[], datetime]] = None,
    ):
        if not secret:
            raise ValueError("JWT signing secret must not be empty")
        if algorithm not in HMAC_ALGORITHMS:
            raise ValueError(f"Unsupported JWT algorithm: {algorithm}")
        if access_ttl <= timedelta(0):
            raise ValueError("Access token lifetime must be positive")
        self._secret = secret
        self.algorithm = algorithm
        self.access_ttl = access_ttl
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    @classmethod
    def from_settings(cls, settings) -> "TokenCodec":
        return cls(
            secret=settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
            access_ttl=settings.access_token_ttl,
        )

    def issue_access_token(self, user_id: uuid.UUID, email: str) -> str:
        """Create a signed JWT access token."""
        now = self._clock()
        payload = {
            "sub": str(user_id),
            "user_id": str(user_id),
            "email": email,
            "iat": now,
            "exp": now + self.access_ttl,
        }
        return jwt.encode(payload, self._secret, algorithm=self.algorithm)

    def issue_refresh_identifier(self) -> str:
        """Create an opaque refresh token value (random UUID)."""
        return str(uuid.uuid4())

    def validate_access_token(self, token: str) -> AccessClaims:
        """Verify and decode an access token.

        Raises TokenExpiredError if the signature is good but exp has
        passed, UnauthorizedError for everything else. A bad signature and
        garbage input are reported identically.
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self.algorithm],
                options={"require": ["exp", "iat", "sub"]},
            )
        except jwt.ExpiredSignatureError:
            raise TokenExpiredError()
        except jwt.InvalidTokenError:
            raise UnauthorizedError(INVALID_TOKEN_MESSAGE)

        return self._claims_from_payload(payload)

    @staticmethod
    def _claims_from_payload(payload: dict) -> AccessClaims:
        raw_user_id = payload.get("user_id")
        email = payload.get("email")
        subject = payload.get("sub")
        if not isinstance(raw_user_id, str) or not isinstance(email, str):
            raise UnauthorizedError(INVALID_TOKEN_MESSAGE)
        try:
            user_id = uuid.UUID(raw_user_id)
        except ValueError:
            raise UnauthorizedError(INVALID_TOKEN_MESSAGE)
        if subject != str(user_id):
            raise UnauthorizedError(INVALID_TOKEN_MESSAGE)

        return AccessClaims(
            user_id=user_id,
            email=email,
            subject=subject,
            issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
            expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
        )
