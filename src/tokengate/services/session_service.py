"""Session service — registration, login, refresh rotation, logout.

Learn: A session is a refresh-token record in the ledger. The service
moves sessions through four transitions:

    register  → user exists, no session yet
    login     → new session (refresh record) + access token
    refresh   → old record consumed, new record + access token (rotation)
    logout    → record deleted (idempotent)

Refresh tokens are single-use. The old record is deleted before the new
one is minted, and only the caller whose delete actually removed the row
gets a new pair — a replayed or concurrently reused token looks exactly
like a forged one.

Login never reveals whether an email is registered: both failure paths
raise the same error after the same amount of bcrypt work. Registration
does reveal it (409), which is accepted.

All state lives in the stores; the service itself is safe to share
between concurrent requests.
"""

import asyncio
import uuid
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

import structlog

from tokengate.auth.jwt import TokenCodec
from tokengate.auth.password import (
    DEFAULT_ROUNDS,
    dummy_hash,
    hash_password,
    needs_rehash,
    verify_password,
)
from tokengate.domain import (
    PublicProfile,
    RefreshTokenRecord,
    TokenPair,
    UserRecord,
    normalize_email,
)
from tokengate.errors import (
    ConflictError,
    NotFoundError,
    UnauthorizedError,
    classified,
)
from tokengate.stores.base import CredentialStore, TokenLedger

logger = structlog.get_logger()

EMAIL_TAKEN = "Email is already registered"
INVALID_CREDENTIALS = "Invalid email or password"
REFRESH_NOT_FOUND = "Refresh token not found or already used"
REFRESH_EXPIRED = "Refresh token has expired, please login again"


class SessionService:
    """Orchestrates the credential store, token ledger and token codec."""

    def __init__(
        self,
        credentials: CredentialStore,
        ledger: TokenLedger,
        codec: TokenCodec,
        refresh_ttl: timedelta = timedelta(days=7),
        bcrypt_rounds: int = DEFAULT_ROUNDS,
        timeout: Optional[float] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.credentials = credentials
        self.ledger = ledger
        self.codec = codec
        self.refresh_ttl = refresh_ttl
        self.bcrypt_rounds = bcrypt_rounds
        self.timeout = timeout
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    # ─── Register ─────────────────────────────────────────

    async def register(self, name: str, email: str, password: str) -> PublicProfile:
        """Create a user account. Raises ConflictError if the email is taken."""
        async with classified(self.timeout):
            email = normalize_email(email)
            if await self.credentials.get_by_email(email) is not None:
                logger.info("auth.register_conflict")
                raise ConflictError(EMAIL_TAKEN)

            password_hash = await asyncio.to_thread(
                hash_password, password, self.bcrypt_rounds
            )
            now = self._clock()
            user = UserRecord(
                email=email,
                name=name.strip(),
                password_hash=password_hash,
                created_at=now,
                updated_at=now,
            )
            await self.credentials.create(user)

        logger.info("auth.registered", user_id=str(user.id))
        return user.to_public()

    # ─── Login ────────────────────────────────────────────

    async def login(self, email: str, password: str) -> TokenPair:
        """Verify credentials and open a new session."""
        async with classified(self.timeout):
            user = await self.credentials.get_by_email(normalize_email(email))
            ok = await asyncio.to_thread(self._check_password, user, password)
            if user is None or not ok:
                logger.info("auth.login_failed")
                raise UnauthorizedError(INVALID_CREDENTIALS)

            if needs_rehash(user.password_hash, self.bcrypt_rounds):
                await self._upgrade_hash(user, password)

            pair = await self._issue_token_pair(user)

        logger.info("auth.login", user_id=str(user.id))
        return pair

    def _check_password(self, user: Optional[UserRecord], password: str) -> bool:
        # Same bcrypt cost whether or not the user exists
        stored = user.password_hash if user else dummy_hash(self.bcrypt_rounds)
        return verify_password(password, stored)

    async def _upgrade_hash(self, user: UserRecord, password: str) -> None:
        user.password_hash = await asyncio.to_thread(
            hash_password, password, self.bcrypt_rounds
        )
        user.updated_at = self._clock()
        await self.credentials.update(user)
        logger.info("auth.password_rehashed", user_id=str(user.id))

    # ─── Refresh ──────────────────────────────────────────

    async def refresh(self, refresh_token: str) -> TokenPair:
        """Exchange a refresh token for a new pair. The old token dies."""
        async with classified(self.timeout):
            stored = await self.ledger.get_by_value(refresh_token)
            if stored is None:
                raise UnauthorizedError(REFRESH_NOT_FOUND)

            if stored.is_expired(self._clock()):
                await self._discard_expired(refresh_token)
                raise UnauthorizedError(REFRESH_EXPIRED)

            user = await self.credentials.get_by_id(stored.user_id)
            if user is None:
                raise NotFoundError.of("User")

            # Consume before minting. Losing this delete means another
            # request already rotated the same token.
            if not await self.ledger.delete_by_value(refresh_token):
                logger.warning("session.reuse_rejected", user_id=str(user.id))
                raise UnauthorizedError(REFRESH_NOT_FOUND)

            pair = await self._issue_token_pair(user)

        logger.info("session.rotated", user_id=str(user.id))
        return pair

    async def _discard_expired(self, refresh_token: str) -> None:
        try:
            await self.ledger.delete_by_value(refresh_token)
        except Exception as e:
            # Cleanup only; the caller gets the expiry error either way
            logger.warning("session.expired_cleanup_failed", error=str(e))

    # ─── Logout ───────────────────────────────────────────

    async def logout(
        self, refresh_token: str, user_id: Optional[uuid.UUID] = None
    ) -> None:
        """Revoke one session. Unknown or already-revoked tokens are fine.

        With user_id given, a token belonging to someone else is left alone
        and the call still succeeds, so it reveals nothing about the token.
        """
        async with classified(self.timeout):
            if user_id is not None:
                stored = await self.ledger.get_by_value(refresh_token)
                if stored is not None and stored.user_id != user_id:
                    logger.warning("session.logout_foreign_token", user_id=str(user_id))
                    return
            removed = await self.ledger.delete_by_value(refresh_token)
        logger.info("session.logout", revoked=removed)

    async def logout_all(self, user_id: uuid.UUID) -> int:
        """Revoke every session of a user. Returns the number revoked."""
        async with classified(self.timeout):
            count = await self.ledger.delete_all_for_user(user_id)
        logger.info("session.logout_all", user_id=str(user_id), revoked=count)
        return count

    # ─── Token pair ───────────────────────────────────────

    async def _issue_token_pair(self, user: UserRecord) -> TokenPair:
        """Mint an access token and a refresh token, persist the refresh record.

        If the record can't be saved the exception propagates and no pair
        is returned — an access token is never handed out without its session.
        """
        access_token = self.codec.issue_access_token(user.id, user.email)
        refresh_value = self.codec.issue_refresh_identifier()

        now = self._clock()
        await self.ledger.save(
            RefreshTokenRecord(
                user_id=user.id,
                token=refresh_value,
                expires_at=now + self.refresh_ttl,
                created_at=now,
            )
        )
        return TokenPair(
            access_token=access_token,
            refresh_token=refresh_value,
            expires_in=int(self.codec.access_ttl.total_seconds()),
        )
