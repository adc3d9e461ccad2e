"""SQL store backends on async SQLAlchemy.

Learn: Each method opens its own short session and commits before
returning, so every contract method is one transaction. delete_by_value
is a single DELETE statement and reports rowcount; under concurrent
rotation of the same token only one DELETE can match the row.

ORM rows never leave this module — they are mapped to the dataclasses
in tokengate.domain.
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from tokengate.db.models import RefreshToken, User
from tokengate.domain import RefreshTokenRecord, UserRecord
from tokengate.errors import ConflictError, NotFoundError
from tokengate.stores.base import CredentialStore, TokenLedger


def _aware(value: datetime) -> datetime:
    # SQLite hands back naive datetimes even for timezone=True columns
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _user_record(row: User) -> UserRecord:
    return UserRecord(
        id=row.id,
        email=row.email,
        name=row.name,
        password_hash=row.password_hash,
        bio=row.bio or "",
        avatar_id=row.avatar_id,
        created_at=_aware(row.created_at),
        updated_at=_aware(row.updated_at),
    )


def _token_record(row: RefreshToken) -> RefreshTokenRecord:
    return RefreshTokenRecord(
        id=row.id,
        user_id=row.user_id,
        token=row.token,
        expires_at=_aware(row.expires_at),
        created_at=_aware(row.created_at),
    )


class SqlCredentialStore(CredentialStore):
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._sessions = session_factory

    async def create(self, record: UserRecord) -> None:
        async with self._sessions() as session:
            session.add(
                User(
                    id=record.id,
                    email=record.email,
                    name=record.name,
                    password_hash=record.password_hash,
                    bio=record.bio,
                    avatar_id=record.avatar_id,
                    created_at=record.created_at,
                    updated_at=record.updated_at,
                )
            )
            try:
                await session.commit()
            except IntegrityError:
                await session.rollback()
                raise ConflictError("Email is already registered")

    async def get_by_id(self, user_id: uuid.UUID) -> Optional[UserRecord]:
        async with self._sessions() as session:
            row = await session.get(User, user_id)
            return _user_record(row) if row else None

    async def get_by_email(self, email: str) -> Optional[UserRecord]:
        async with self._sessions() as session:
            result = await session.execute(select(User).where(User.email == email))
            row = result.scalars().first()
            return _user_record(row) if row else None

    async def update(self, record: UserRecord) -> None:
        async with self._sessions() as session:
            row = await session.get(User, record.id)
            if row is None:
                raise NotFoundError.of("User")
            row.email = record.email
            row.name = record.name
            row.password_hash = record.password_hash
            row.bio = record.bio
            row.avatar_id = record.avatar_id
            row.updated_at = record.updated_at
            try:
                await session.commit()
            except IntegrityError:
                await session.rollback()
                raise ConflictError("Email is already registered")


class SqlTokenLedger(TokenLedger):
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._sessions = session_factory

    async def save(self, record: RefreshTokenRecord) -> None:
        async with self._sessions() as session:
            session.add(
                RefreshToken(
                    id=record.id,
                    user_id=record.user_id,
                    token=record.token,
                    expires_at=record.expires_at,
                    created_at=record.created_at,
                )
            )
            await session.commit()

    async def get_by_value(self, token: str) -> Optional[RefreshTokenRecord]:
        async with self._sessions() as session:
            result = await session.execute(
                select(RefreshToken).where(RefreshToken.token == token)
            )
            row = result.scalars().first()
            return _token_record(row) if row else None

    async def delete_by_value(self, token: str) -> bool:
        async with self._sessions() as session:
            result = await session.execute(
                delete(RefreshToken).where(RefreshToken.token == token)
            )
            await session.commit()
            return result.rowcount > 0

    async def delete_all_for_user(self, user_id: uuid.UUID) -> int:
        async with self._sessions() as session:
            result = await session.execute(
                delete(RefreshToken).where(RefreshToken.user_id == user_id)
            )
            await session.commit()
            return result.rowcount
