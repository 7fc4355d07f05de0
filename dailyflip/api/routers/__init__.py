from fastapi import APIRouter
from dailyflip.api.routers import (
    auth,
    users,
    posts,
    comments,
    friends,
    admin,
)

# Main API router
api_router = APIRouter()

api_router.include_router(auth.router, tags=["auth"])
api_router.include_router(users.router, tags=["users"])
api_router.include_router(posts.router, tags=["posts"])
api_router.include_router(comments.router, tags=["comments"])
api_router.include_router(friends.router, tags=["friends"])
api_router.include_router(admin.router, tags=["admin"])

__all__ = ["api_router"]
