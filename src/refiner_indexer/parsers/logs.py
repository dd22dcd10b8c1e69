from refiner_indexer.data_types import Block, Log, Transaction
from refiner_indexer.utils.utils import bytes_or_none, hex_to_bytes


class LogParser:
    @staticmethod
    def parse_raw(log: Log, log_index: int, transaction: Transaction, block: Block) -> dict:
        """Log columns plus the denormalized block and transaction context

        The owning transaction id is not known here, it is resolved inside the statement.
        """
        return {
            'index': log_index,
            'data': bytes_or_none(log.data),
            'from': hex_to_bytes(log.address),
            'topics': [bytes(topic) for topic in log.topics],
            'block': block.height,
            'block_hash': hex_to_bytes(block.hash),
            'transaction_index': transaction.transaction_index,
            'transaction_hash': hex_to_bytes(transaction.hash),
        }
