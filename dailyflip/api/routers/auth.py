from fastapi import APIRouter, Depends, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.ext.asyncio import AsyncSession

from dailyflip.api.dependencies import get_async_db
from dailyflip.core.auth import create_access_token, create_refresh_token, verify_refresh_token
from dailyflip.schemas.users import UserCreate, RefreshTokenRequest
from dailyflip.services.users import UserService

router = APIRouter(tags=["auth"])


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(user: UserCreate, db: AsyncSession = Depends(get_async_db)):
    """
    Register a member account with an empty profile.
    """
    await UserService(db).register(name=user.name, email=user.email, password=user.password)
    return {"message": "User created successfully"}


@router.post("/token")
async def login(form_data: OAuth2PasswordRequestForm = Depends(),
                db: AsyncSession = Depends(get_async_db)):
    """
    Check email/password and return access and refresh tokens.
    """
    user = await UserService(db).authenticate(form_data.username, form_data.password)
    claims = {"sub": user.email, "id": user.id}
    return {
        "access_token": create_access_token(data=claims),
        "refresh_token": create_refresh_token(data=claims),
        "token_type": "bearer",
    }


@router.post("/refresh-token")
async def refresh_token_access(
    body: RefreshTokenRequest,
    db: AsyncSession = Depends(get_async_db),
):
    """
    Exchange a refresh token for a new access token.
    """
    user = await verify_refresh_token(body.refresh_token, db)
    return {
        "access_token": create_access_token(data={"sub": user.email, "id": user.id}),
        "token_type": "bearer",
    }
