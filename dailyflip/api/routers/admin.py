from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from dailyflip.api.dependencies import get_async_db
from dailyflip.core.auth import get_current_admin
from dailyflip.models.users import User as UserModel
from dailyflip.schemas.posts import AdminPost
from dailyflip.schemas.users import AdminUser
from dailyflip.services.feed import FeedService
from dailyflip.services.users import UserService

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/users", response_model=list[AdminUser])
async def get_all_users(
    search: str | None = None,
    admin: UserModel = Depends(get_current_admin),
    db: AsyncSession = Depends(get_async_db)
):
    """All users, searchable by name or email (admins only)."""
    return await UserService(db).list_users(search)


@router.get("/posts", response_model=list[AdminPost])
async def get_all_posts(
    search: str | None = None,
    admin: UserModel = Depends(get_current_admin),
    db: AsyncSession = Depends(get_async_db)
):
    """
    All posts including private ones, searchable by content, author name or email.
    Deleting goes through DELETE /posts/{id}.
    """
    return await FeedService(db).admin_posts(search)
