import asyncio

from loguru import logger
from sqlalchemy import func, select, text
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from refiner_indexer.data_types import Block
from .base import BaseDataManager
from .composer import compose_block_insert
from .schema import block_table


class PostgresDataManager(BaseDataManager):
    """
    Persists refined blocks into PostgreSQL through a pooled async engine
    """

    def __init__(self, database_url: str, persist_timeout: float = 30.0, pool_size: int = 5):
        """
        Args:
            database_url (str): SQLAlchemy url using the asyncpg driver
            persist_timeout (float): Seconds a single block statement may run
            pool_size (int): Connections kept in the pool
        """
        self.database_url = database_url
        self.persist_timeout = persist_timeout
        self.pool_size = pool_size
        self.engine: AsyncEngine | None = None

    async def connect(self) -> None:
        self.engine = create_async_engine(
            self.database_url,
            pool_size=self.pool_size,
            pool_pre_ping=True,
        )
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        logger.info("Connected to database")

    async def close(self) -> None:
        if self.engine is not None:
            await self.engine.dispose()
            self.engine = None

    async def get_last_processed_block(self) -> int:
        async with self._get_engine().connect() as conn:
            result = await conn.execute(select(func.coalesce(func.max(block_table.c.height), 0)))
            return int(result.scalar_one())

    async def load_block(self, block: Block) -> None:
        await asyncio.wait_for(self._execute(block), timeout=self.persist_timeout)

    async def _execute(self, block: Block) -> None:
        # begin() commits on success and rolls back on any error or cancellation
        async with self._get_engine().begin() as conn:
            await conn.execute(compose_block_insert(block))

    def _get_engine(self) -> AsyncEngine:
        if self.engine is None:
            raise RuntimeError("PostgresDataManager.connect() must be called first")
        return self.engine
