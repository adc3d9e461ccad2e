"""Health check endpoint.

Learn: Simple GET endpoint that verifies the server is running and, when
the SQL backend is configured, that the database is reachable.
"""

import structlog
from fastapi import APIRouter, Request
from sqlalchemy import text

from tokengate import __version__

logger = structlog.get_logger()

router = APIRouter()


@router.get("/health")
async def health_check(request: Request):
    """Check server health and store connectivity."""
    checks = {"server": "ok", "version": __version__}

    engine = getattr(request.app.state, "engine", None)
    if engine is None:
        checks["store"] = "memory"
    else:
        try:
            async with engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            checks["store"] = "ok"
        except Exception as e:
            logger.warning("health.store_unreachable", error=str(e))
            checks["store"] = "error"

    status = "degraded" if checks["store"] == "error" else "healthy"
    return {"status": status, **checks}
