from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from dailyflip.api.dependencies import get_async_db
from dailyflip.core.auth import get_current_user
from dailyflip.models.users import User as UserModel
from dailyflip.schemas.users import User as UserSchema, UserUpdate
from dailyflip.services.users import UserService

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=UserSchema)
async def get_me(
    current_user: UserModel = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db)
):
    return await UserService(db).get_user(current_user.id)


@router.get("/{user_id}", response_model=UserSchema)
async def get_user(
    user_id: int,
    current_user: UserModel = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db)
):
    """
    Public profile of a user, password excluded.
    """
    return await UserService(db).get_user(user_id)


@router.patch("/{user_id}", response_model=UserSchema)
async def update_user(
    user_id: int,
    user_in: UserUpdate,
    current_user: UserModel = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db)
):
    """
    Edit name, avatar, bio or background. Only the user themself or an admin.
    """
    return await UserService(db).update_user(current_user, user_id, **user_in.model_dump(exclude_unset=True))
