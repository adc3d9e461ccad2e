"""In-memory store backends.

Learn: Dict-backed implementations of the store contracts, guarded by a
lock so every method is a single atomic step even when called from
several threads. Records are copied on the way in and out; callers
never share mutable state with the store.
"""

import copy
import threading
import uuid
from typing import Optional

from tokengate.domain import RefreshTokenRecord, UserRecord
from tokengate.errors import ConflictError, NotFoundError
from tokengate.stores.base import CredentialStore, TokenLedger


class InMemoryCredentialStore(CredentialStore):
    def __init__(self) -> None:
        self._users: dict[uuid.UUID, UserRecord] = {}
        self._by_email: dict[str, uuid.UUID] = {}
        self._lock = threading.RLock()

    async def create(self, record: UserRecord) -> None:
        with self._lock:
            if record.email in self._by_email:
                raise ConflictError("Email is already registered")
            self._users[record.id] = copy.copy(record)
            self._by_email[record.email] = record.id

    async def get_by_id(self, user_id: uuid.UUID) -> Optional[UserRecord]:
        with self._lock:
            record = self._users.get(user_id)
            return copy.copy(record) if record else None

    async def get_by_email(self, email: str) -> Optional[UserRecord]:
        with self._lock:
            user_id = self._by_email.get(email)
            if user_id is None:
                return None
            return copy.copy(self._users[user_id])

    async def update(self, record: UserRecord) -> None:
        with self._lock:
            current = self._users.get(record.id)
            if current is None:
                raise NotFoundError.of("User")
            if record.email != current.email:
                if record.email in self._by_email:
                    raise ConflictError("Email is already registered")
                del self._by_email[current.email]
                self._by_email[record.email] = record.id
            self._users[record.id] = copy.copy(record)

    def count(self) -> int:
        with self._lock:
            return len(self._users)


class InMemoryTokenLedger(TokenLedger):
    def __init__(self) -> None:
        self._tokens: dict[str, RefreshTokenRecord] = {}
        self._lock = threading.RLock()

    async def save(self, record: RefreshTokenRecord) -> None:
        with self._lock:
            if record.token in self._tokens:
                raise ConflictError("Refresh token value already exists")
            self._tokens[record.token] = copy.copy(record)

    async def get_by_value(self, token: str) -> Optional[RefreshTokenRecord]:
        with self._lock:
            record = self._tokens.get(token)
            return copy.copy(record) if record else None

    async def delete_by_value(self, token: str) -> bool:
        with self._lock:
            return self._tokens.pop(token, None) is not None

    async def delete_all_for_user(self, user_id: uuid.UUID) -> int:
        with self._lock:
            doomed = [t for t, r in self._tokens.items() if r.user_id == user_id]
            for token in doomed:
                del self._tokens[token]
            return len(doomed)

    def count_for_user(self, user_id: uuid.UUID) -> int:
        with self._lock:
            return sum(1 for r in self._tokens.values() if r.user_id == user_id)

    def count(self) -> int:
        with self._lock:
            return len(self._tokens)
