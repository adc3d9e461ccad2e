"""Test fixtures — in-memory stores, a controllable clock, an HTTP client.

Learn: Services are built directly from in-memory stores, so most tests
need no database at all. bcrypt runs at the minimum cost (4 rounds) to
keep the suite fast.

The refresh-token clock is a FakeClock that tests can move forward.
The access-token codec keeps real time: PyJWT checks exp/iat against the
wall clock, so expired access tokens are made by issuing them in the past.
"""

from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from tokengate.auth.jwt import TokenCodec
from tokengate.config import Settings
from tokengate.main import create_app
from tokengate.services.session_service import SessionService
from tokengate.services.user_service import UserService
from tokengate.stores.memory import InMemoryCredentialStore, InMemoryTokenLedger

TEST_SECRET = "test-signing-secret-0123456789abcdef0123456789abcdef"
TEST_ROUNDS = 4


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime | None = None):
        self.now = now or datetime.now(timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture()
def settings():
    return Settings(
        store_backend="memory",
        jwt_secret=TEST_SECRET,
        bcrypt_rounds=TEST_ROUNDS,
        environment="development",
    )


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def credentials():
    return InMemoryCredentialStore()


@pytest.fixture()
def ledger():
    return InMemoryTokenLedger()


@pytest.fixture()
def codec():
    return TokenCodec(TEST_SECRET, "HS256", access_ttl=timedelta(minutes=15))


@pytest.fixture()
def session_service(credentials, ledger, codec, clock):
    return SessionService(
        credentials,
        ledger,
        codec,
        refresh_ttl=timedelta(days=7),
        bcrypt_rounds=TEST_ROUNDS,
        timeout=5.0,
        clock=clock,
    )


@pytest.fixture()
def user_service(credentials, ledger, clock):
    return UserService(
        credentials, ledger, bcrypt_rounds=TEST_ROUNDS, timeout=5.0, clock=clock
    )


@pytest_asyncio.fixture()
async def client(settings, credentials, ledger):
    """HTTP client against an app wired to this test's in-memory stores.

    Learn: The real auth pipeline runs — tests register and log in to get
    tokens, and protected routes validate them for real.
    """
    app = create_app(settings, credentials=credentials, ledger=ledger)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture()
async def user_tokens(client):
    """Register + login one user over HTTP; returns (email, token body)."""
    email = "ann@x.com"
    r = await client.post(
        "/api/v1/auth/register",
        json={"name": "Ann", "email": email, "password": "password123"},
    )
    assert r.status_code == 201
    r = await client.post(
        "/api/v1/auth/login",
        json={"email": email, "password": "password123"},
    )
    assert r.status_code == 200
    return email, r.json()

