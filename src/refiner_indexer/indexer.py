import asyncio
import time

from loguru import logger
from pydantic import ValidationError

from refiner_indexer.data_manager import BaseDataManager
from refiner_indexer.data_types import Block
from refiner_indexer.metrics import (
    BLOCK_RETRIES,
    BLOCKS_PROCESSED,
    CLEANUP_ERRORS,
    LATEST_BLOCK_PROCESSING_TIME,
    LATEST_PROCESSED_BLOCK,
    LOGS_PROCESSED,
    TRANSACTIONS_PROCESSED,
)
from refiner_indexer.source import RefinerSource
from refiner_indexer.utils import IndexerConfig


class BlockIndexer:
    """
    Sequential cursor over refiner block files.

    One height is read, decoded, persisted and cleaned up before the next one
    is touched. A missing or unreadable file, a malformed file or a failed
    persist keeps the cursor on the same height and retries after
    poll_interval, forever.
    """

    def __init__(
        self,
        config: IndexerConfig,
        data_manager: BaseDataManager,
        source: RefinerSource | None = None,
        stop_event: asyncio.Event | None = None,
    ) -> None:
        self.config = config
        self.data_manager = data_manager
        self.source = source or RefinerSource(config.source_folder, config.shard_width)
        self.stop_event = stop_event or asyncio.Event()

    def stop(self) -> None:
        """Request a clean exit, observed between heights"""
        if not self.stop_event.is_set():
            logger.info("Stop requested, finishing current block")
        self.stop_event.set()

    async def determine_start_block(self) -> int:
        """Explicit from_block, else the height after the last committed one, never below genesis"""
        start_block = self.config.from_block
        if start_block == 0:
            last_processed_block = await self.data_manager.get_last_processed_block()
            logger.info(f"Last processed block: {last_processed_block}")
            start_block = last_processed_block + 1

        if start_block < self.config.genesis_block:
            logger.info(f"Start block {start_block} is below genesis, starting from {self.config.genesis_block}")
            start_block = self.config.genesis_block

        return start_block

    async def run(self, start_block: int) -> int:
        """
        Consume heights from start_block until to_block (exclusive) or a stop request

        Returns:
            int: The next height to process, i.e. the resumable position
        """
        height = start_block
        logger.info(f"Starting indexer from block {height}")

        while not self.stop_event.is_set():
            if self.config.to_block > 0 and self.config.to_block <= height:
                logger.info(f"Ended on {self.config.to_block}")
                break

            if await self.process_block(height):
                height += 1
            else:
                await self.wait()

        return height

    async def process_block(self, height: int) -> bool:
        """
        Read, decode and persist a single height

        Returns:
            bool: True when the block was committed and the cursor may advance
        """
        try:
            content = await asyncio.to_thread(self.source.read_block, height)
        except OSError as e:
            logger.warning(f"Unable to read block {height}: {e}. Retrying..")
            BLOCK_RETRIES.labels(reason='read').inc()
            return False

        if content is None:
            logger.debug(f"Waiting for new block in {self.source.block_path(height)}..")
            BLOCK_RETRIES.labels(reason='missing').inc()
            return False

        try:
            block = Block.model_validate_json(content)
        except ValidationError as e:
            logger.warning(f"Failed to parse block {height}: {e}. Retrying..")
            BLOCK_RETRIES.labels(reason='decode').inc()
            return False

        if block.height != height:
            logger.warning(f"File for block {height} contains block {block.height}. Retrying..")
            BLOCK_RETRIES.labels(reason='decode').inc()
            return False

        block.sequence = block.height

        start_time = time.time()
        try:
            await self.data_manager.load_block(block)
        except Exception as e:
            logger.warning(f"Unable to import block {height}: {type(e).__name__}: {e}")
            BLOCK_RETRIES.labels(reason='persist').inc()
            return False

        BLOCKS_PROCESSED.inc()
        TRANSACTIONS_PROCESSED.inc(len(block.transactions))
        LOGS_PROCESSED.inc(block.log_count)
        LATEST_PROCESSED_BLOCK.set(height)
        LATEST_BLOCK_PROCESSING_TIME.set(time.time() - start_time)
        logger.info(f"{height}")

        if not self.config.keep_files:
            if not await asyncio.to_thread(self.source.cleanup, height):
                CLEANUP_ERRORS.inc()

        return True

    async def wait(self) -> None:
        """Back off for poll_interval, returning early on a stop request"""
        try:
            await asyncio.wait_for(self.stop_event.wait(), timeout=self.config.poll_interval)
        except asyncio.TimeoutError:
            pass
