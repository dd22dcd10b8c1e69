import argparse
import asyncio
import signal
import sys

from loguru import logger

from refiner_indexer.data_manager import get_data_manager
from refiner_indexer.indexer import BlockIndexer
from refiner_indexer.metrics import start_metrics_server
from refiner_indexer.utils import IndexerConfig, load_config, setup_logging

SHUTDOWN_SIGNALS = (signal.SIGHUP, signal.SIGTERM, signal.SIGQUIT, signal.SIGINT)


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="refiner-indexer",
        description="Consumes refiner block files and inserts them into PostgreSQL.",
    )
    parser.add_argument("-c", "--config", help="settings file (default is config/local.yml)")
    parser.add_argument("-d", "--debug", action="store_true", help="enable debug logging")
    return parser.parse_args(argv)


async def main(config: IndexerConfig) -> int:
    """Connect, resolve the start height, publish it to the refiner and index until stopped

    Startup failures propagate to the caller and are fatal.

    Returns:
        int: The next height that would have been processed
    """
    if config.metrics_port:
        start_metrics_server(config.metrics_port)

    data_manager = get_data_manager(config)
    try:
        await data_manager.connect()

        indexer = BlockIndexer(config, data_manager)
        start_block = await indexer.determine_start_block()
        indexer.source.update_refiner_last_block(start_block)

        loop = asyncio.get_running_loop()
        for sig in SHUTDOWN_SIGNALS:
            loop.add_signal_handler(sig, indexer.stop)

        return await indexer.run(start_block)
    finally:
        await data_manager.close()


def run(argv=None) -> None:
    args = parse_args(argv)
    try:
        config = load_config(args.config, debug=True if args.debug else None)
    except Exception as e:
        logger.exception(f"Invalid configuration: {e}")
        sys.exit(1)

    setup_logging(config.debug, config.log_file or None)
    logger.info(f"Indexing {config.source_folder} into the block store")

    try:
        next_block = asyncio.run(main(config))
        logger.info(f"Stopped, next block to process is {next_block}")
    except KeyboardInterrupt:
        logger.info("Program interrupted by user. Exiting.")
    except Exception as e:
        logger.exception(f"An unexpected error occurred: {e}")
        sys.exit(1)


if __name__ == "__main__":
    run()
