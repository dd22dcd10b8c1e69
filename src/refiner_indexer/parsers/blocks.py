from refiner_indexer.data_types import Block
from refiner_indexer.utils.utils import base58_to_bytes, hex_to_bytes, uint256_to_decimal, unix_nano_to_utc


class BlockParser:
    @staticmethod
    def parse_raw(block: Block) -> dict:
        existing_block = block.existing_block
        return {
            'chain': block.chain_id,
            'height': block.height,
            'hash': hex_to_bytes(block.hash),
            'near_hash': base58_to_bytes(existing_block.near_hash),
            'timestamp': unix_nano_to_utc(block.timestamp),
            'size': uint256_to_decimal(block.size),
            'gas_limit': uint256_to_decimal(block.gas_limit),
            'gas_used': uint256_to_decimal(block.gas_used),
            'parent_hash': hex_to_bytes(block.parent_hash),
            'transactions_root': hex_to_bytes(block.transactions_root),
            'state_root': hex_to_bytes(block.state_root),
            'receipts_root': hex_to_bytes(block.receipts_root),
            'logs_bloom': hex_to_bytes(block.logs_bloom),
            'miner': hex_to_bytes(block.miner),
            'author': existing_block.author,
            'sequence': block.sequence,
        }
