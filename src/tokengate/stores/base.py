"""Store contracts — what the session core needs from persistence.

Learn: Services depend on these two interfaces only, never on a database.
Implement them to back the core with a new storage technology; the
in-memory backend is used by tests and local runs, the SQL backend in
production.

Absence is reported with None on lookups. Store failures are raised as
whatever exception the backend produces; the service layer classifies them.
"""

import uuid
from abc import ABC, abstractmethod
from typing import Optional

from tokengate.domain import RefreshTokenRecord, UserRecord


class CredentialStore(ABC):
    """Persists user identity and password hash."""

    @abstractmethod
    async def create(self, record: UserRecord) -> None:
        """Insert a new user. Raises ConflictError if the email is taken."""

    @abstractmethod
    async def get_by_id(self, user_id: uuid.UUID) -> Optional[UserRecord]:
        ...

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[UserRecord]:
        """Look up by already-normalized email."""

    @abstractmethod
    async def update(self, record: UserRecord) -> None:
        """Replace the stored record atomically. Raises NotFoundError if absent."""


class TokenLedger(ABC):
    """Persists issued refresh tokens."""

    @abstractmethod
    async def save(self, record: RefreshTokenRecord) -> None:
        ...

    @abstractmethod
    async def get_by_value(self, token: str) -> Optional[RefreshTokenRecord]:
        ...

    @abstractmethod
    async def delete_by_value(self, token: str) -> bool:
        """Delete the record with this value in one atomic step.

        Returns True only for the caller that actually removed it, so of
        several concurrent deletes of the same value exactly one wins.
        """

    @abstractmethod
    async def delete_all_for_user(self, user_id: uuid.UUID) -> int:
        """Revoke every session of a user. Returns how many were removed."""
