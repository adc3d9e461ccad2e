"""API route aggregation.

All routers registered here get mounted in main.py.

Learn: Health and auth routers are open; individual auth routes that need
an identity (logout, me) declare get_current_user themselves. The users
router is protected as a whole at include time.
"""

from fastapi import APIRouter, Depends

from tokengate.api.auth import router as auth_router
from tokengate.api.health import router as health_router
from tokengate.api.users import router as users_router
from tokengate.auth.dependencies import get_current_user

_auth = [Depends(get_current_user)]

api_router = APIRouter(prefix="/api/v1")

# Open routes — no auth required
api_router.include_router(health_router, tags=["health"])
api_router.include_router(auth_router, tags=["auth"])

# Protected routes — require a valid access token
api_router.include_router(users_router, tags=["users"], dependencies=_auth)
