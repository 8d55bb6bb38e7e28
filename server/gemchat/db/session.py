from __future__ import annotations
from contextlib import asynccontextmanager
from typing import AsyncIterator
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession
from sqlalchemy.ext.asyncio import create_async_engine, AsyncEngine
from sqlalchemy.orm import sessionmaker

# Register table metadata before create_all
from gemchat.db import models  # noqa: F401

DEFAULT_DATABASE_URL = "sqlite+aiosqlite:///./gemchat.db"


class Database:
    """Async engine plus session factory, built once at startup."""

    def __init__(self, url: str = DEFAULT_DATABASE_URL, echo: bool = False) -> None:
        self.url = url
        self.engine: AsyncEngine = create_async_engine(url, echo=echo, future=True)
        self._sessionmaker = sessionmaker(
            bind=self.engine, class_=AsyncSession, expire_on_commit=False, autoflush=False, autocommit=False
        )

    async def init(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)

    async def dispose(self) -> None:
        await self.engine.dispose()

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        session: AsyncSession = self._sessionmaker()
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
