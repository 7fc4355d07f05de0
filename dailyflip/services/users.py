from loguru import logger
from sqlalchemy import select, or_, func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from dailyflip.core.auth import hash_password, verify_password, is_admin
from dailyflip.core.exceptions import Conflict, Forbidden, NotFound, Unauthorized, Unexpected
from dailyflip.models.users import User as UserModel, Profile as ProfileModel, ROLE_MEMBER


class UserService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def register(self, name: str, email: str, password: str, role: str = ROLE_MEMBER) -> UserModel:
        """
        Create a user together with an empty profile. Emails are unique.
        """
        result = await self.db.execute(select(UserModel).where(UserModel.email == email))
        if result.scalar_one_or_none():
            raise Conflict("User with this email already exists")

        db_user = UserModel(
            name=name,
            email=email,
            hashed_password=hash_password(password),
            role=role,
            profile=ProfileModel(bio="", background_image=""),
        )
        self.db.add(db_user)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise Conflict("User with this email already exists")
        except SQLAlchemyError:
            await self.db.rollback()
            logger.exception(f"Failed to register {email}")
            raise Unexpected()
        await self.db.refresh(db_user)
        logger.info(f"User {db_user.id} registered ({email})")
        return db_user

    async def authenticate(self, email: str, password: str) -> UserModel:
        result = await self.db.execute(select(UserModel).where(UserModel.email == email))
        user = result.scalar_one_or_none()
        if not user or not verify_password(password, user.hashed_password):
            raise Unauthorized("Incorrect email or password")
        return user

    async def get_user(self, user_id: int) -> UserModel:
        """User with profile loaded."""
        result = await self.db.execute(
            select(UserModel).where(UserModel.id == user_id).options(selectinload(UserModel.profile))
        )
        user = result.scalar_one_or_none()
        if user is None:
            raise NotFound("User not found")
        return user

    async def update_user(
        self,
        actor: UserModel,
        user_id: int,
        name: str | None = None,
        image: str | None = None,
        bio: str | None = None,
        background_image: str | None = None,
    ) -> UserModel:
        """
        Edit a user and their profile. Users edit themselves; admins edit anyone.
        Fields left as None are not touched.
        """
        if user_id != actor.id and not is_admin(actor):
            raise Forbidden("Forbidden")

        user = await self.get_user(user_id)
        if name is not None:
            user.name = name
        if image is not None:
            user.image = image
        if user.profile is None:
            user.profile = ProfileModel(bio="", background_image="")
        if bio is not None:
            user.profile.bio = bio
        if background_image is not None:
            user.profile.background_image = background_image

        try:
            await self.db.commit()
        except SQLAlchemyError:
            await self.db.rollback()
            logger.exception(f"Failed to update user {user_id}")
            raise Unexpected()
        logger.info(f"User {user_id} updated by {actor.id}")
        return await self.get_user(user_id)

    async def list_users(self, search: str | None = None) -> list[UserModel]:
        query = select(UserModel)
        if search:
            pattern = f"%{search.lower()}%"
            query = query.where(
                or_(func.lower(UserModel.name).like(pattern), func.lower(UserModel.email).like(pattern))
            )
        result = await self.db.execute(query.order_by(UserModel.created_at.desc(), UserModel.id.desc()))
        return list(result.scalars().all())
