"""User service — profile reads and updates, password change.

Learn: Mutates the credential record after registration. Changing the
password revokes every refresh token of the user, so all other devices
must log in again once their short-lived access tokens run out.
"""

import asyncio
import uuid
from datetime import datetime, timezone
from typing import Callable, Optional

import structlog

from tokengate.auth.password import DEFAULT_ROUNDS, hash_password, verify_password
from tokengate.domain import PublicProfile, UserRecord
from tokengate.errors import NotFoundError, UnauthorizedError, classified
from tokengate.stores.base import CredentialStore, TokenLedger

logger = structlog.get_logger()

WRONG_CURRENT_PASSWORD = "Current password is incorrect"


class UserService:
    def __init__(
        self,
        credentials: CredentialStore,
        ledger: TokenLedger,
        bcrypt_rounds: int = DEFAULT_ROUNDS,
        timeout: Optional[float] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.credentials = credentials
        self.ledger = ledger
        self.bcrypt_rounds = bcrypt_rounds
        self.timeout = timeout
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    async def _load(self, user_id: uuid.UUID) -> UserRecord:
        user = await self.credentials.get_by_id(user_id)
        if user is None:
            raise NotFoundError.of("User")
        return user

    async def get_profile(self, user_id: uuid.UUID) -> PublicProfile:
        async with classified(self.timeout):
            user = await self._load(user_id)
        return user.to_public()

    async def update_profile(
        self,
        user_id: uuid.UUID,
        name: Optional[str] = None,
        bio: Optional[str] = None,
        avatar_id: Optional[uuid.UUID] = None,
    ) -> PublicProfile:
        """Apply the given fields; None leaves a field unchanged."""
        async with classified(self.timeout):
            user = await self._load(user_id)
            if name is not None:
                user.name = name.strip()
            if bio is not None:
                user.bio = bio
            if avatar_id is not None:
                user.avatar_id = avatar_id
            user.updated_at = self._clock()
            await self.credentials.update(user)

        logger.info("user.profile_updated", user_id=str(user_id))
        return user.to_public()

    async def change_password(
        self, user_id: uuid.UUID, current_password: str, new_password: str
    ) -> int:
        """Replace the password and revoke all sessions. Returns sessions revoked."""
        async with classified(self.timeout):
            user = await self._load(user_id)
            ok = await asyncio.to_thread(
                verify_password, current_password, user.password_hash
            )
            if not ok:
                raise UnauthorizedError(WRONG_CURRENT_PASSWORD)

            user.password_hash = await asyncio.to_thread(
                hash_password, new_password, self.bcrypt_rounds
            )
            user.updated_at = self._clock()
            await self.credentials.update(user)
            revoked = await self.ledger.delete_all_for_user(user_id)

        logger.info("user.password_changed", user_id=str(user_id), revoked=revoked)
        return revoked
