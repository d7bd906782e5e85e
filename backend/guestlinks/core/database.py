from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import NullPool

from guestlinks.core.config import settings


def make_engine(url: str):
    return create_async_engine(
        url,
        connect_args={"check_same_thread": False},
        poolclass=NullPool,
        echo=settings.DATABASE_ECHO,
    )


def make_sessionmaker(bind):
    return sessionmaker(
        bind=bind,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False
    )


engine = make_engine(settings.DATABASE_URL)

SessionLocal = make_sessionmaker(engine)

Base = declarative_base()

async def get_db():
    async with SessionLocal() as session:
        yield session
