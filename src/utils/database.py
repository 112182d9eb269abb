"""
Key-value persistence for engine state.
"""

import logging
from datetime import datetime
from typing import Dict, Optional, Protocol
from sqlalchemy import Column, String, DateTime, select
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import declarative_base
from config.settings import settings

logger = logging.getLogger(__name__)

# Database base model
Base = declarative_base()


class EngineState(Base):
    """Database model for persisted engine values."""
    __tablename__ = "engine_state"

    key = Column(String(64), primary_key=True)
    value = Column(String(255), nullable=False)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)


class KeyValueStore(Protocol):
    async def get(self, key: str) -> Optional[str]: ...

    async def set(self, key: str, value: str) -> None: ...


class InMemoryKeyValueStore:
    """Process-local store, used when no database is configured."""

    def __init__(self, initial: Dict[str, str] = None):
        self.values: Dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> Optional[str]:
        return self.values.get(key)

    async def set(self, key: str, value: str) -> None:
        self.values[key] = value


class DatabaseManager:
    """Async SQLAlchemy-backed key-value store."""

    def __init__(self, database_url: str = None):
        self.database_url = database_url or settings.database_url
        self.engine = None
        self.async_session = None
        self._initialize_engine()

    def _initialize_engine(self):
        """Initialize the database engine and session maker."""
        self.engine = create_async_engine(
            self.database_url,
            echo=False,  # Set to True for SQL debugging
            pool_pre_ping=True,
        )
        self.async_session = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False
        )

    async def create_tables(self):
        """Create all database tables."""
        try:
            async with self.engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
            logger.info("Database tables created successfully")
        except Exception as e:
            logger.error(f"Failed to create database tables: {e}")
            raise

    async def get(self, key: str) -> Optional[str]:
        async with self.async_session() as session:
            try:
                result = await session.execute(
                    select(EngineState.value).where(EngineState.key == key)
                )
                return result.scalar_one_or_none()
            except Exception as e:
                logger.error(f"Failed to read engine state {key}: {e}")
                raise

    async def set(self, key: str, value: str) -> None:
        async with self.async_session() as session:
            try:
                await session.merge(EngineState(key=key, value=value, updated_at=datetime.now()))
                await session.commit()
            except Exception as e:
                await session.rollback()
                logger.error(f"Failed to write engine state {key}: {e}")
                raise

    async def close(self):
        """Close the database engine."""
        await self.engine.dispose()
