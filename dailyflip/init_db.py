import asyncio
import secrets

from loguru import logger
from sqlalchemy import select

from dailyflip.core.config import ADMIN_EMAIL, ADMIN_PASSWORD, ADMIN_NAME
from dailyflip.core.logging import setup_logging
from dailyflip.database import async_session_maker
from dailyflip.models.users import User, ROLE_ADMIN
from dailyflip.services.users import UserService


async def init_admin() -> None:
    """
    Make sure the configured admin account exists and has the ADMIN role.
    """
    async with async_session_maker() as session:
        logger.info(f"Checking for admin account: {ADMIN_EMAIL}")
        result = await session.execute(select(User).where(User.email == ADMIN_EMAIL))
        user = result.scalar_one_or_none()

        if user:
            # Existing password is left alone
            user.role = ROLE_ADMIN
            await session.commit()
            logger.info(f"User {ADMIN_EMAIL} promoted to admin.")
            return

        password = ADMIN_PASSWORD
        if not password:
            password = secrets.token_urlsafe(16)
            logger.warning(f"ADMIN_PASSWORD not set, generated one for {ADMIN_EMAIL}: {password}")
        await UserService(session).register(ADMIN_NAME, ADMIN_EMAIL, password, role=ROLE_ADMIN)
        logger.info(f"Admin {ADMIN_EMAIL} created.")


async def main():
    setup_logging()
    await init_admin()


if __name__ == "__main__":
    asyncio.run(main())
