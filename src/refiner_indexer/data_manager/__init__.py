from refiner_indexer.utils import IndexerConfig
from .base import BaseDataManager
from .composer import compose_block_insert
from .postgres import PostgresDataManager
from .schema import block_table, event_table, metadata, transaction_table


def get_data_manager(config: IndexerConfig) -> BaseDataManager:
    """
    Build the data manager for the configured store

    Args:
        config (IndexerConfig): Indexer configuration
    Returns:
        BaseDataManager: Store used for cursor lookup and block persistence
    """
    return PostgresDataManager(
        database_url=config.database_url,
        persist_timeout=config.persist_timeout,
        pool_size=config.pool_size,
    )


__all__ = [
    "BaseDataManager",
    "PostgresDataManager",
    "block_table",
    "compose_block_insert",
    "event_table",
    "get_data_manager",
    "metadata",
    "transaction_table",
]
