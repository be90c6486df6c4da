"""API route aggregation.

All routers registered here get mounted in main.py under /api, matching
the paths the web client calls (/api/auth/*, /api/projects, /api/images).

Learn: Auth is applied at the include_router level using FastAPI's
dependencies parameter. This protects all routes in each router
without modifying individual handlers. Health and auth routers are
open (the protected /auth/user route declares its own dependency).
"""

from fastapi import APIRouter, Depends

from venus.api.auth import router as auth_router
from venus.api.health import router as health_router
from venus.api.images import router as images_router
from venus.api.projects import router as projects_router
from venus.auth.dependencies import get_current_user

# All protected routers require authentication
_auth = [Depends(get_current_user)]

api_router = APIRouter(prefix="/api")

# Open routes — no auth required
api_router.include_router(health_router, tags=["health"])
api_router.include_router(auth_router, tags=["auth"])

# Protected routes — require a valid token
api_router.include_router(projects_router, tags=["projects"], dependencies=_auth)
api_router.include_router(images_router, tags=["images"], dependencies=_auth)
