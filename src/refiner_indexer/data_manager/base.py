from abc import ABC, abstractmethod

from refiner_indexer.data_types import Block


class BaseDataManager(ABC):
    """Abstract base class for the relational block store"""

    @abstractmethod
    async def connect(self) -> None:
        """Open the connection pool and verify the store is reachable"""
        pass

    @abstractmethod
    async def close(self) -> None:
        pass

    @abstractmethod
    async def get_last_processed_block(self) -> int:
        """
        Highest committed block height, 0 when the store is empty
        """
        pass

    @abstractmethod
    async def load_block(self, block: Block) -> None:
        """
        Persist a block with its transactions and logs atomically

        Args:
            block (Block): Decoded block, sequence already assigned

        Raises:
            Exception: Any failure, no partial rows of the block remain
        """
        pass
