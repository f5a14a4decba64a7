import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from db.db import create_tables, drop_tables
from db.models import KJVVerse


SAMPLE_VERSES = [
    ("Genesis", 1, 1, "In the beginning God created the heaven and the earth."),
    ("Genesis", 1, 2, "And the earth was without form, and void."),
    ("Genesis", 1, 3, "And God said, Let there be light: and there was light."),
    ("John", 3, 16, "For God so loved the world, that he gave his only begotten Son."),
    ("John", 3, 17, "For God sent not his Son into the world to condemn the world."),
    ("John", 11, 35, "Jesus wept."),
    ("1 John", 4, 8, "He that loveth not knoweth not God; for God is love."),
]


@pytest_asyncio.fixture
async def sqlite_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await create_tables(bind=engine)
    yield engine
    await drop_tables(bind=engine)
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(sqlite_engine):
    return async_sessionmaker(sqlite_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def kjv_session(session_factory):
    async with session_factory() as session:
        session.add_all([
            KJVVerse(book=book, chapter=chapter, verse=verse, text=text,
                     reference=f"{book} {chapter}:{verse}")
            for book, chapter, verse, text in SAMPLE_VERSES
        ])
        await session.commit()
        yield session
