import bcrypt
from fastapi.security import OAuth2PasswordBearer
from datetime import datetime, timedelta, timezone
import jwt
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from dailyflip.models.users import User as UserModel, ROLE_ADMIN
from dailyflip.core.config import SECRET_KEY, ALGORITHM, ACCESS_TOKEN_EXPIRE_MINUTES, REFRESH_TOKEN_EXPIRE_DAYS
from dailyflip.core.exceptions import Unauthorized, Forbidden
from dailyflip.api.dependencies import get_async_db


oauth2_scheme = OAuth2PasswordBearer(tokenUrl="api/token", auto_error=False)


def hash_password(password: str) -> str:
    """
    Hash a password with bcrypt.
    """
    salt = bcrypt.gensalt()
    hashed = bcrypt.hashpw(password.encode('utf-8'), salt)
    return hashed.decode('utf-8')


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Check a plain password against the stored bcrypt hash.
    """
    return bcrypt.checkpw(plain_password.encode('utf-8'), hashed_password.encode('utf-8'))


def create_access_token(data: dict):
    """
    Build a JWT with the given payload (sub, id) and an expiry.
    """
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode.update({
        "exp": expire,
        "token_type": "access",
    })
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def create_refresh_token(data: dict):
    """
    Build a long-lived refresh token (token_type="refresh").
    """
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + timedelta(days=REFRESH_TOKEN_EXPIRE_DAYS)
    to_encode.update({
        'exp': expire,
        'token_type': 'refresh',
    })
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def _decode_email(token: str, expected_type: str) -> str:
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise Unauthorized("Token has expired")
    except jwt.PyJWTError:
        raise Unauthorized("Could not validate credentials")

    email: str | None = payload.get("sub")
    if email is None or payload.get("token_type") != expected_type:
        raise Unauthorized("Could not validate credentials")
    return email


async def get_current_user(token: str | None = Depends(oauth2_scheme),
                           db: AsyncSession = Depends(get_async_db)) -> UserModel:
    """
    Resolve the bearer token to a user. A missing or invalid token is Unauthorized.
    """
    if not token:
        raise Unauthorized()
    email = _decode_email(token, "access")
    result = await db.scalars(select(UserModel).where(UserModel.email == email))
    user = result.first()
    if user is None:
        raise Unauthorized("Could not validate credentials")
    return user


async def verify_refresh_token(refresh_token: str, db: AsyncSession) -> UserModel:
    """
    Check a refresh token and return its user.
    """
    email = _decode_email(refresh_token, "refresh")
    result = await db.scalars(select(UserModel).where(UserModel.email == email))
    user = result.first()
    if user is None:
        raise Unauthorized("Could not validate refresh token")
    return user


def is_admin(user: UserModel) -> bool:
    return user.role == ROLE_ADMIN


async def get_current_admin(current_user: UserModel = Depends(get_current_user)) -> UserModel:
    """
    Require the ADMIN role.
    """
    if not is_admin(current_user):
        raise Forbidden("Only admins can perform this action")
    return current_user
