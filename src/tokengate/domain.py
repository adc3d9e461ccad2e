"""Domain records shared by services and stores.

Learn: Plain dataclasses, independent of any storage technology. The
ORM rows in db/models.py are mapped to and from these at the store
boundary, so services never touch SQLAlchemy objects.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_uuid() -> uuid.UUID:
    return uuid.uuid4()


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


@dataclass
class PublicProfile:
    """The password-free projection of a user, safe to return to callers."""

    id: uuid.UUID
    name: str
    email: str
    bio: str
    avatar_id: Optional[uuid.UUID]
    created_at: datetime


@dataclass
class UserRecord:
    """A stored user credential record.

    password_hash is a bcrypt digest; it never leaves the service layer.
    """

    email: str
    name: str
    password_hash: str
    bio: str = ""
    avatar_id: Optional[uuid.UUID] = None
    id: uuid.UUID = field(default_factory=new_uuid)
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    def to_public(self) -> PublicProfile:
        return PublicProfile(
            id=self.id,
            name=self.name,
            email=self.email,
            bio=self.bio,
            avatar_id=self.avatar_id,
            created_at=self.created_at,
        )

    def __repr__(self) -> str:
        # Keep the hash out of logs and tracebacks
        return f"UserRecord(id={self.id!s}, email={self.email!r})"


@dataclass
class RefreshTokenRecord:
    """A refresh token issued to one session of one user.

    Learn: The token value is an opaque random string, not a JWT. A record
    is valid while it exists and now < expires_at; deleting it revokes it.
    """

    user_id: uuid.UUID
    token: str
    expires_at: datetime
    id: uuid.UUID = field(default_factory=new_uuid)
    created_at: datetime = field(default_factory=utcnow)

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        return (now or utcnow()) >= self.expires_at

    def __repr__(self) -> str:
        return f"RefreshTokenRecord(id={self.id!s}, user_id={self.user_id!s})"


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str
    expires_in: int  # access token lifetime, seconds
    token_type: str = "Bearer"
