from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.orm import DeclarativeBase

from dailyflip.core.config import DATABASE_URL, SQL_ECHO

async_engine = create_async_engine(DATABASE_URL, echo=SQL_ECHO)

# Sessions are handed to components per request, never used as a global client
async_session_maker = async_sessionmaker(async_engine, expire_on_commit=False, class_=AsyncSession)


class Base(DeclarativeBase):
    pass
