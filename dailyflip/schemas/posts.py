from datetime import datetime
from pydantic import BaseModel, Field, ConfigDict

from dailyflip.schemas.users import PublicUser


class PostCreate(BaseModel):
    content: str = ""
    media_url: str | None = None
    media_type: str | None = Field(default=None, pattern="^(image|video)$")
    is_private: bool = False


class PostUpdate(BaseModel):
    content: str
    is_private: bool


class CommentCreate(BaseModel):
    post_id: int
    content: str = Field(min_length=1)


class CommentAuthor(BaseModel):
    id: int
    name: str
    image: str | None = None

    model_config = ConfigDict(from_attributes=True)


class Comment(BaseModel):
    id: int
    post_id: int
    user_id: int
    content: str
    created_at: datetime
    user: CommentAuthor

    model_config = ConfigDict(from_attributes=True)


class Post(BaseModel):
    id: int
    user_id: int
    content: str
    media_url: str | None = None
    media_type: str | None = None
    is_private: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class FeedPost(Post):
    user: PublicUser
    comments: list[Comment] = Field(default=[])


class AdminPost(Post):
    user: PublicUser
