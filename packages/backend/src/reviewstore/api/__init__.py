"""API route aggregation.

All routers registered here get mounted in main.py.

Learn: Auth is applied per route, not per router, because every router
mixes open reads with authenticated writes. Routes that need a caller
declare Depends(get_current_user).
"""

from fastapi import APIRouter

from reviewstore.api.comments import router as comments_router
from reviewstore.api.health import router as health_router
from reviewstore.api.items import router as items_router
from reviewstore.api.reviews import router as reviews_router
from reviewstore.api.users import router as users_router

api_router = APIRouter(prefix="/api/v1")

api_router.include_router(health_router, tags=["health"])
api_router.include_router(users_router, tags=["users"])
api_router.include_router(items_router, tags=["items"])
api_router.include_router(reviews_router, tags=["reviews"])
api_router.include_router(comments_router, tags=["comments"])
