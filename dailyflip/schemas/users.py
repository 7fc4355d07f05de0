from datetime import datetime
from pydantic import BaseModel, EmailStr, Field, ConfigDict


class UserCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100, description="Display name")
    email: EmailStr = Field(description="Login email, unique")
    password: str = Field(min_length=8, description="Password (at least 8 characters)")


class UserUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    image: str | None = None
    bio: str | None = None
    background_image: str | None = None


class RefreshTokenRequest(BaseModel):
    refresh_token: str


class PublicUser(BaseModel):
    """Fields of a user that other users may see."""
    id: int
    name: str
    email: str
    image: str | None = None

    model_config = ConfigDict(from_attributes=True)


class Profile(BaseModel):
    bio: str = ""
    background_image: str = ""

    model_config = ConfigDict(from_attributes=True)


class User(PublicUser):
    role: str
    created_at: datetime
    profile: Profile | None = None


class AdminUser(PublicUser):
    role: str
    created_at: datetime
