"""
Friend request lifecycle.

Per unordered pair of users there is either no row, a PENDING row
(requester -> recipient) or an ACCEPTED row. Reject and remove delete the row.
"""
from loguru import logger
from sqlalchemy import select, or_, and_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from dailyflip.core.exceptions import BadRequest, Conflict, NotFound, Unexpected
from dailyflip.models.users import (
    User as UserModel,
    Friendship as FriendshipModel,
    FRIENDSHIP_PENDING,
    FRIENDSHIP_ACCEPTED,
)


class FriendshipService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def request(self, actor_id: int, target_id: int) -> FriendshipModel:
        """
        Create a PENDING request from actor to target.
        Any existing row for the pair, in either direction and any status, is a Conflict.
        """
        if actor_id == target_id:
            raise BadRequest("You cannot add yourself as a friend")

        target = await self.db.get(UserModel, target_id)
        if target is None:
            raise NotFound("User not found")

        res = await self.db.execute(
            select(FriendshipModel).where(
                or_(
                    and_(FriendshipModel.requester_id == actor_id, FriendshipModel.recipient_id == target_id),
                    and_(FriendshipModel.requester_id == target_id, FriendshipModel.recipient_id == actor_id)
                )
            )
        )
        if res.scalars().first() is not None:
            raise Conflict("Friendship request already exists")

        low_id, high_id = FriendshipModel.pair_key(actor_id, target_id)
        friendship = FriendshipModel(
            requester_id=actor_id,
            recipient_id=target_id,
            user_low_id=low_id,
            user_high_id=high_id,
            status=FRIENDSHIP_PENDING,
        )
        self.db.add(friendship)
        try:
            await self.db.commit()
        except IntegrityError:
            # A concurrent request for the same pair won the insert
            await self.db.rollback()
            raise Conflict("Friendship request already exists")
        except SQLAlchemyError:
            await self.db.rollback()
            logger.exception(f"Failed to create friendship {actor_id} -> {target_id}")
            raise Unexpected()
        await self.db.refresh(friendship)
        logger.info(f"Friend request {friendship.id}: {actor_id} -> {target_id}")
        return friendship

    async def _pending_for_recipient(self, friendship_id: int, actor_id: int) -> FriendshipModel:
        res = await self.db.execute(
            select(FriendshipModel).where(
                FriendshipModel.id == friendship_id,
                FriendshipModel.recipient_id == actor_id,
                FriendshipModel.status == FRIENDSHIP_PENDING
            )
        )
        friendship = res.scalar_one_or_none()
        if friendship is None:
            raise NotFound("Friendship request not found")
        return friendship

    async def accept(self, friendship_id: int, actor_id: int) -> FriendshipModel:
        """
        Accept a PENDING request addressed to actor. Requesters cannot accept
        their own request, and a second accept finds nothing.
        """
        friendship = await self._pending_for_recipient(friendship_id, actor_id)
        return await self._mark_accepted(friendship, actor_id)

    async def reject(self, friendship_id: int, actor_id: int) -> None:
        friendship = await self._pending_for_recipient(friendship_id, actor_id)
        await self._drop_request(friendship, actor_id)

    async def respond(self, friendship_id: int, actor_id: int, action: str) -> FriendshipModel | None:
        """Apply "accept" or "reject" to an incoming request."""
        friendship = await self._pending_for_recipient(friendship_id, actor_id)
        if action == "accept":
            return await self._mark_accepted(friendship, actor_id)
        if action == "reject":
            await self._drop_request(friendship, actor_id)
            return None
        raise BadRequest("Invalid action")

    async def _mark_accepted(self, friendship: FriendshipModel, actor_id: int) -> FriendshipModel:
        friendship.status = FRIENDSHIP_ACCEPTED
        await self._commit(f"accept friendship {friendship.id}")
        await self.db.refresh(friendship)
        logger.info(f"Friend request {friendship.id} accepted by {actor_id}")
        return friendship

    async def _drop_request(self, friendship: FriendshipModel, actor_id: int) -> None:
        friendship_id = friendship.id
        await self.db.delete(friendship)
        await self._commit(f"reject friendship {friendship_id}")
        logger.info(f"Friend request {friendship_id} rejected by {actor_id}")

    async def remove(self, friendship_id: int, actor_id: int) -> None:
        """Delete a row of any status the actor is a party to."""
        res = await self.db.execute(
            select(FriendshipModel).where(
                FriendshipModel.id == friendship_id,
                or_(FriendshipModel.requester_id == actor_id, FriendshipModel.recipient_id == actor_id)
            )
        )
        friendship = res.scalar_one_or_none()
        if friendship is None:
            raise NotFound("Friendship not found")
        await self.db.delete(friendship)
        await self._commit(f"remove friendship {friendship_id}")
        logger.info(f"Friendship {friendship_id} removed by {actor_id}")

    async def list_friends(self, user_id: int) -> list[tuple[FriendshipModel, UserModel]]:
        """
        Accepted friendships of user_id as (row, counterpart) pairs.
        The counterpart is never user_id itself.
        """
        res = await self.db.execute(
            select(FriendshipModel).where(
                or_(FriendshipModel.requester_id == user_id, FriendshipModel.recipient_id == user_id),
                FriendshipModel.status == FRIENDSHIP_ACCEPTED
            ).options(
                selectinload(FriendshipModel.requester),
                selectinload(FriendshipModel.recipient)
            ).order_by(FriendshipModel.created_at.desc(), FriendshipModel.id.desc())
        )
        return [(f, f.other_party(user_id)) for f in res.scalars().all()]

    async def list_pending(self, user_id: int) -> list[FriendshipModel]:
        """Incoming PENDING requests with the requester loaded."""
        res = await self.db.execute(
            select(FriendshipModel).where(
                FriendshipModel.recipient_id == user_id,
                FriendshipModel.status == FRIENDSHIP_PENDING
            ).options(
                selectinload(FriendshipModel.requester)
            ).order_by(FriendshipModel.created_at.desc(), FriendshipModel.id.desc())
        )
        return list(res.scalars().all())

    async def _commit(self, what: str) -> None:
        try:
            await self.db.commit()
        except SQLAlchemyError:
            await self.db.rollback()
            logger.exception(f"Failed to {what}")
            raise Unexpected()
