"""
Feed assembly: which posts a viewer gets, newest first, each with its
author and a short preview of the newest comments.
"""
from collections import defaultdict

from loguru import logger
from sqlalchemy import select, func, or_, Select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from dailyflip.core.config import FEED_COMMENT_PREVIEW
from dailyflip.core.exceptions import Unexpected
from dailyflip.models.posts import Post as PostModel, Comment as CommentModel
from dailyflip.models.users import User as UserModel
from dailyflip.schemas.posts import (
    Post as PostSchema,
    FeedPost as FeedPostSchema,
    AdminPost as AdminPostSchema,
    Comment as CommentSchema,
)
from dailyflip.schemas.users import PublicUser


class FeedService:
    def __init__(self, db: AsyncSession, comment_limit: int = FEED_COMMENT_PREVIEW):
        self.db = db
        self.comment_limit = comment_limit

    async def global_feed(self) -> list[FeedPostSchema]:
        """All public posts. The viewer's own private posts are not included."""
        return await self._assemble(
            select(PostModel).where(PostModel.is_private == False)
        )

    async def profile_feed(self, user_id: int) -> list[FeedPostSchema]:
        """Public posts of one user, whoever is looking."""
        return await self._assemble(
            select(PostModel).where(PostModel.user_id == user_id, PostModel.is_private == False)
        )

    async def admin_posts(self, search: str | None = None) -> list[AdminPostSchema]:
        """Every post, private ones included, optionally filtered by content or author."""
        query = select(PostModel).join(UserModel, PostModel.user_id == UserModel.id)
        if search:
            pattern = f"%{search.lower()}%"
            query = query.where(
                or_(
                    func.lower(PostModel.content).like(pattern),
                    func.lower(UserModel.name).like(pattern),
                    func.lower(UserModel.email).like(pattern)
                )
            )
        try:
            posts = await self._fetch_posts(query)
        except SQLAlchemyError:
            logger.exception("Failed to list posts for admin")
            raise Unexpected("Could not load posts")
        return [
            AdminPostSchema(**PostSchema.model_validate(p).model_dump(), user=PublicUser.model_validate(p.user))
            for p in posts
        ]

    async def _assemble(self, query: Select) -> list[FeedPostSchema]:
        try:
            posts = await self._fetch_posts(query)
            previews = await self._recent_comments([p.id for p in posts])
        except SQLAlchemyError:
            logger.exception("Failed to assemble feed")
            raise Unexpected("Could not load posts")

        return [
            FeedPostSchema(
                **PostSchema.model_validate(p).model_dump(),
                user=PublicUser.model_validate(p.user),
                comments=[CommentSchema.model_validate(c) for c in previews.get(p.id, [])],
            )
            for p in posts
        ]

    async def _fetch_posts(self, query: Select) -> list[PostModel]:
        result = await self.db.execute(
            query.options(selectinload(PostModel.user))
            .order_by(PostModel.created_at.desc(), PostModel.id.desc())
        )
        return list(result.scalars().all())

    async def _recent_comments(self, post_ids: list[int]) -> dict[int, list[CommentModel]]:
        """Newest comment_limit comments per post, newest first."""
        comments_map: dict[int, list[CommentModel]] = defaultdict(list)
        if not post_ids or self.comment_limit <= 0:
            return comments_map

        ranked = select(
            CommentModel.id,
            func.row_number().over(
                partition_by=CommentModel.post_id,
                order_by=[CommentModel.created_at.desc(), CommentModel.id.desc()]
            ).label("comment_rank")
        ).where(CommentModel.post_id.in_(post_ids)).subquery()

        result = await self.db.execute(
            select(CommentModel)
            .join(ranked, CommentModel.id == ranked.c.id)
            .where(ranked.c.comment_rank <= self.comment_limit)
            .options(selectinload(CommentModel.user))
            .order_by(CommentModel.created_at.desc(), CommentModel.id.desc())
        )
        for c in result.scalars().all():
            comments_map[c.post_id].append(c)
        return comments_map
