"""FastAPI application factory.

Learn: App factory pattern — create_app() returns a configured FastAPI
instance. All wiring happens here, by hand: stores → codec → services →
gate, stored on app.state for the route dependencies to pick up.
Tests pass their own Settings and in-memory stores.
"""

from contextlib import asynccontextmanager
from typing import Optional

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.ext.asyncio import AsyncEngine

from tokengate import __version__
from tokengate.api import api_router
from tokengate.api.errors import register_exception_handlers
from tokengate.auth.dependencies import AuthGate
from tokengate.auth.jwt import TokenCodec
from tokengate.config import Settings, settings as default_settings
from tokengate.db.engine import make_engine, make_session_factory
from tokengate.logging import configure_logging
from tokengate.middleware.request_id import RequestIdMiddleware
from tokengate.middleware.security import SecurityHeadersMiddleware
from tokengate.services.session_service import SessionService
from tokengate.services.user_service import UserService
from tokengate.stores.base import CredentialStore, TokenLedger
from tokengate.stores.memory import InMemoryCredentialStore, InMemoryTokenLedger
from tokengate.stores.sql import SqlCredentialStore, SqlTokenLedger

logger = structlog.get_logger()


def build_stores(
    settings: Settings,
) -> tuple[CredentialStore, TokenLedger, Optional[AsyncEngine]]:
    """Pick the store backend named in settings."""
    if settings.store_backend == "memory":
        return InMemoryCredentialStore(), InMemoryTokenLedger(), None

    engine = make_engine(settings.database_url, echo=settings.debug)
    session_factory = make_session_factory(engine)
    return SqlCredentialStore(session_factory), SqlTokenLedger(session_factory), engine


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle."""
    settings: Settings = app.state.settings
    logger.info(
        "tokengate.starting",
        version=__version__,
        environment=settings.environment,
        store_backend=settings.store_backend,
    )

    yield

    logger.info("tokengate.shutdown")
    engine = app.state.engine
    if engine is not None:
        await engine.dispose()


def create_app(
    settings: Optional[Settings] = None,
    *,
    credentials: Optional[CredentialStore] = None,
    ledger: Optional[TokenLedger] = None,
) -> FastAPI:
    """Build and return the FastAPI application."""
    settings = settings or default_settings
    configure_logging(
        level="DEBUG" if settings.debug else "INFO",
        json_output=settings.log_json,
    )

    engine = None
    if credentials is None or ledger is None:
        built_credentials, built_ledger, engine = build_stores(settings)
        if credentials is None:
            credentials = built_credentials
        if ledger is None:
            ledger = built_ledger

    codec = TokenCodec.from_settings(settings)

    app = FastAPI(
        title="tokengate",
        description="Authentication and session-lifecycle service",
        version=__version__,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.engine = engine
    app.state.gate = AuthGate(codec)
    app.state.session_service = SessionService(
        credentials,
        ledger,
        codec,
        refresh_ttl=settings.refresh_token_ttl,
        bcrypt_rounds=settings.bcrypt_rounds,
        timeout=settings.store_timeout_seconds,
    )
    app.state.user_service = UserService(
        credentials,
        ledger,
        bcrypt_rounds=settings.bcrypt_rounds,
        timeout=settings.store_timeout_seconds,
    )

    # ── Middleware stack ──────────────────────────────────────
    # Note: Starlette middleware executes in reverse order of registration.
    # Request flow: RequestId → Security → CORS → handler
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestIdMiddleware)

    register_exception_handlers(app)
    app.include_router(api_router)

    return app


# Default app instance (used by uvicorn: tokengate.main:app)
app = create_app()
